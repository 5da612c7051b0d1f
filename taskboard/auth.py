"""Authentication helpers for request-scoped user context."""

from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from taskboard.config import Settings
from taskboard.security import decode_access_token, resolve_user_id

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_app_settings(request: Request) -> Settings:
    """Return the configuration snapshot the running app was built with."""
    return request.app.state.settings


async def get_current_user_id(
    token: str = Depends(oauth2_scheme),
    settings: Settings = Depends(get_app_settings),
) -> UUID:
    """Resolve the current user ID from the bearer token."""
    payload = decode_access_token(token, settings)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is not valid",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = resolve_user_id(payload)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user identity",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user_id
