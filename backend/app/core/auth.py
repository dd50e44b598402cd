from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.config import settings
from app.core.exceptions import AuthError
from app.core.logging_config import log_security_event, get_client_ip
from app.models.user import User
from typing import Optional
from datetime import datetime, timedelta, timezone
import bcrypt
import logging
import uuid

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# JWT settings
ALGORITHM = "HS256"

NO_TOKEN_MESSAGE = "No token provided"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a password against a stored bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(
    user_id: int, email: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: ID of the user the token identifies
        email: Email of the user, carried as a convenience claim
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode = {
        "sub": str(user_id),  # JWT requires a string subject
        "email": email,
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),
        "type": "access",
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str, token_type: str = "access") -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        AuthError: If the token is expired, tampered with, or of the wrong type
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Token expired")
        raise AuthError(INVALID_TOKEN_MESSAGE)
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise AuthError(INVALID_TOKEN_MESSAGE)

    if payload.get("type") != token_type:
        logger.warning(
            f"Token type mismatch: expected {token_type}, got {payload.get('type')}"
        )
        raise AuthError(INVALID_TOKEN_MESSAGE)

    return payload


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from the ``Authorization: Bearer`` header."""
    if not credentials or not credentials.credentials:
        raise AuthError(NO_TOKEN_MESSAGE)

    try:
        payload = decode_token(credentials.credentials)
    except AuthError:
        log_security_event(
            event_type="auth.token.rejected",
            message="Rejected invalid or expired token",
            level=logging.WARNING,
            ip_address=get_client_ip(request),
            request_path=request.url.path,
        )
        raise

    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise AuthError(INVALID_TOKEN_MESSAGE)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        # Token outlived its account
        raise AuthError(INVALID_TOKEN_MESSAGE)

    return user
