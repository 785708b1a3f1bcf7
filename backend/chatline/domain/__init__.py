"""
DOMAIN LAYER - The Heart of the Messaging Service

This layer contains:
- Entities: Business objects with identity (Message, User, LiveSession)
- Value Objects: Immutable types (UserId, ConversationKey, MessageId, MediaRef)
- Ports: Interfaces that infrastructure implements
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Prisma, Pydantic, etc.)
2. NO I/O operations (no database, no HTTP, no file system)
3. Only depends on Python stdlib
"""
