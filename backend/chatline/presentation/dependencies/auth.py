"""
Authentication Dependency for FastAPI.

- Reads the credential token from the Authorization header (Bearer scheme)
  or, for browser clients, from the auth cookie
- Verifies it with the IdentityProvider registered in the app container
- Raises HTTPException 401 if unauthorized
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from chatline.config.settings import Config
from chatline.domain.exceptions.unauthorized import UnauthorizedError
from chatline.domain.ports.identity_provider import IdentityProvider
from chatline.domain.value_objects.user_id import UserId
from chatline.observability.metrics import MetricsErrorType, increment_error


@dataclass
class AuthUser:
    id: UserId


security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    Extract and verify the user from the credential token.

    Raises:
        HTTPException 401 if the token is missing, invalid or expired
    """
    token = credentials.credentials if credentials else request.cookies.get(
        Config.AUTH_COOKIE_NAME
    )
    identity_provider = await request.app.state.dishka_container.get(IdentityProvider)
    try:
        user_id = await identity_provider.verify_credentials(token or "")
    except UnauthorizedError as e:
        increment_error(MetricsErrorType.UNAUTHORIZED)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e

    return AuthUser(id=user_id)
