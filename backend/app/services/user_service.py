"""
User service - account registration and credential checks.
"""

import logging
import re
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.core.auth import hash_password, verify_password
from app.core.config import settings
from app.core.exceptions import ValidationError, AuthError
from app.models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
# bcrypt only looks at the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for creating users and checking their passwords."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == _normalize_email(email)).first()

    def register(self, username: Optional[str], email: Optional[str], password: Optional[str]) -> User:
        """
        Create a new account.

        Raises:
            ValidationError: Missing or malformed fields, or email already registered
        """
        if not username or not email or not password:
            raise ValidationError("Username, email, and password are required")
        if not isinstance(username, str) or not username.strip():
            raise ValidationError("Username cannot be empty")
        if not EMAIL_PATTERN.match(email.strip()):
            raise ValidationError("Invalid email address")
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )
        if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")

        email = _normalize_email(email)
        if self.get_by_email(email):
            raise ValidationError("User with this email already exists")

        user = User(
            username=username.strip(),
            email=email,
            password=hash_password(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("User with this email already exists")

        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Check an email/password pair.

        Raises:
            ValidationError: Missing fields
            AuthError: Unknown email or wrong password (same message for both)
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            raise AuthError("Invalid email or password")

        return user
