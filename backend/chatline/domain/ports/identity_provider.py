"""
IdentityProvider Port - verifies credential tokens issued elsewhere.
Implementation: chatline/infrastructure/identity/jwt_identity_provider.py
"""

from abc import ABC, abstractmethod

from chatline.domain.value_objects.user_id import UserId


class IdentityProvider(ABC):
    @abstractmethod
    async def verify_credentials(self, token: str) -> UserId:
        """Return the authenticated user id or raise UnauthorizedError."""
        ...
