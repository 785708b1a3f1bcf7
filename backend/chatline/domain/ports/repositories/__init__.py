"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the application needs
- Does NOT specify implementation (Prisma, in-memory, etc.)
"""

from chatline.domain.ports.repositories.conversation_store import ConversationStore
from chatline.domain.ports.repositories.user_repository import UserRepository

__all__ = [
    "ConversationStore",
    "UserRepository",
]
