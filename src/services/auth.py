"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

ACCESS_TOKEN_TYPE = "access"  # noqa: S105
RESET_TOKEN_TYPE = "password_reset"  # noqa: S105

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _encode(claims: dict, expires_minutes: int) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes)
    return jwt.encode(
        {**claims, "exp": expire}, settings.jwt_secret, algorithm=settings.jwt_algorithm
    )


def _decode(token: str, token_type: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload


def create_access_token(user_id: int, email: str) -> str:
    """Create a JWT access token."""
    return _encode(
        {"sub": str(user_id), "email": email, "type": ACCESS_TOKEN_TYPE},
        settings.jwt_expiration_minutes,
    )


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT access token."""
    return _decode(token, ACCESS_TOKEN_TYPE)


def create_reset_token(email: str) -> str:
    """Create a short-lived password reset token."""
    return _encode(
        {"email": email, "type": RESET_TOKEN_TYPE}, settings.reset_token_expiration_minutes
    )


def decode_reset_token(token: str) -> dict | None:
    """Decode and validate a password reset token."""
    return _decode(token, RESET_TOKEN_TYPE)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, email: str, password: str, name: str | None = None) -> User:
    """Create a new user."""
    hashed_password = get_password_hash(password)
    user = User(email=email, password_hash=hashed_password, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def issue_reset_token(db: Session, user: User) -> str:
    """Create a reset token and store it as the user's outstanding one."""
    token = create_reset_token(user.email)
    user.reset_token = token
    db.commit()
    logger.info(f"Reset token generated for user {user.id}")
    return token


def reset_password(db: Session, token: str, new_password: str) -> User | None:
    """Redeem a reset token and set a new password.

    Returns None when the token is invalid, expired, or no longer the
    user's outstanding reset token.
    """
    payload = decode_reset_token(token)
    if payload is None or not payload.get("email"):
        return None

    user = get_user_by_email(db, payload["email"])
    if user is None or user.reset_token != token:
        return None

    user.password_hash = get_password_hash(new_password)
    user.reset_token = None
    db.commit()
    logger.info(f"Password reset for user {user.id}")
    return user
