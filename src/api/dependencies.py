"""FastAPI dependencies for authentication, providers and services."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token
from src.services.providers import GenerationProvider, ImageProvider, TextProvider

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_current_user as 401
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Unauthorized")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        logger.error("Token payload missing user id")
        raise _unauthorized("Invalid token payload: Missing userId")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise _unauthorized("User not found")

    return user


def get_text_provider() -> GenerationProvider:
    """Get text generation provider instance."""
    return TextProvider()


def get_image_provider() -> GenerationProvider:
    """Get image generation provider instance."""
    return ImageProvider()
