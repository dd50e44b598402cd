from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
import logging

from app.core.database import get_db
from app.core.auth import create_access_token, get_current_user
from app.core.exceptions import AuthError
from app.core.logging_config import log_security_event, get_client_ip
from app.models.user import User
from app.schemas.user import UserSignup, UserLogin, AuthResult, CurrentUser
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
def signup(request: Request, payload: UserSignup, db: Session = Depends(get_db)):
    """Register a new account and return a bearer token for it."""
    user = UserService(db).register(payload.username, payload.email, payload.password)
    token = create_access_token(user.id, user.email)

    log_security_event(
        event_type="auth.user.created",
        message="New user account created",
        user_id=user.id,
        email=user.email,
        ip_address=get_client_ip(request),
        request_path="/api/auth/signup",
    )

    return {"message": "User created successfully", "user": user, "token": token}


@router.post("/login", response_model=AuthResult)
def login(request: Request, payload: UserLogin, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    client_ip = get_client_ip(request)

    try:
        user = UserService(db).authenticate(payload.email, payload.password)
    except AuthError:
        log_security_event(
            event_type="auth.login.failure",
            message="Login failed: invalid email or password",
            level=logging.WARNING,
            email=payload.email,
            ip_address=client_ip,
            request_path="/api/auth/login",
        )
        raise

    token = create_access_token(user.id, user.email)

    log_security_event(
        event_type="auth.login.success",
        message="User logged in successfully",
        user_id=user.id,
        email=user.email,
        ip_address=client_ip,
        request_path="/api/auth/login",
    )

    return {"message": "Login successful", "user": user, "token": token}


@router.get("/me", response_model=CurrentUser)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    logger.debug(f"Get user info for user ID: {current_user.id}")
    return {"user": current_user}
