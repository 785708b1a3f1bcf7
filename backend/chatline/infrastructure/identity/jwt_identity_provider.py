"""
JWT Identity Provider - verifies tokens minted by the auth service.

Token claims:
    {"id": 7, "email": "user@example.com", "iat": ..., "exp": ...}

Only verification lives here; login, registration and password hashing are
handled by the identity service that issues the tokens.
"""

import logging

import jwt

from chatline.domain.exceptions.unauthorized import UnauthorizedError
from chatline.domain.ports.identity_provider import IdentityProvider
from chatline.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class JwtIdentityProvider(IdentityProvider):
    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret must be configured")
        self._secret = secret
        self._algorithm = algorithm

    async def verify_credentials(self, token: str) -> UserId:
        if not token:
            raise UnauthorizedError("Missing credential token")

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "id"]},
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected credential token: {e}")
            raise UnauthorizedError(f"Invalid token: {str(e)}")

        try:
            return UserId.parse(claims["id"])
        except (TypeError, ValueError) as e:
            raise UnauthorizedError("Token carries an invalid user id") from e
