"""Bearer-token authentication.

Tokens are HS256 JWTs whose `sub` claim is the user's ID. Issuing tokens
(registration, login) belongs to the identity service; this module only
creates them for tooling and tests, and verifies them on each request.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from jobportal.api.dependencies import get_user_service
from jobportal.config import get_settings
from jobportal.models import User
from jobportal.services.user_service import UserService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

ACCESS_TOKEN_EXPIRE_DAYS = 7


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    return jwt.encode(
        {"sub": user_id, "exp": expire},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def decode_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def _load_user(token: str, user_service: UserService) -> User:
    user_id = decode_token(token).get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        user = user_service.get_user(user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    if not user.is_active:
        logger.warning(f"Inactive user {user_id} refused")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated")

    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    user_service: UserService = Depends(get_user_service)
) -> User:
    """Resolve the authenticated caller, or fail with 401."""
    return _load_user(token, user_service)


def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    user_service: UserService = Depends(get_user_service)
) -> Optional[User]:
    """Resolve the caller when a valid token is sent, None otherwise.

    Used by public routes that personalize their output (match scores).
    """
    if not token:
        return None
    try:
        return _load_user(token, user_service)
    except HTTPException:
        return None


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning(f"User {user.id} refused admin access")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
