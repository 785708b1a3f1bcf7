"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- realtime/: Connection registry and WebSocket outbound channels
- persistence/: Conversation store and identity directory (Prisma, in-memory)
- cache/: Redis history cache (CachedConversationStore)
- identity/: JWT credential verification
- storage/: Media blob store on local disk
"""
