"""
Pytest configuration and fixtures for linkvault tests.
"""

import os

# Settings are read at import time, so the test environment must exist first
os.environ.setdefault("SECRET_KEY", "test_secret_key_for_testing_only")
os.environ.setdefault("POSTGRES_PASSWORD", "test_password")
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite:///:memory:")

import pytest
from typing import Callable, Generator, List, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.core.database import Base, get_db
from app.core.auth import create_access_token, hash_password
from app.core.exceptions import register_exception_handlers
from app.models import Content, ContentType, Tag, User


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="session")
def user_password() -> str:
    """Plain-text password of every fixture user."""
    return TEST_PASSWORD


@pytest.fixture(scope="session")
def password_hash() -> str:
    """One bcrypt hash shared by fixture users; hashing is slow on purpose."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_app(db_session):
    """Create a FastAPI test app without lifespan events."""
    from fastapi import FastAPI
    from app.api.endpoints import auth, content, tags

    test_app = FastAPI(title="linkvault - Test", version="1.0.0")
    register_exception_handlers(test_app)

    test_app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    test_app.include_router(content.router, prefix="/api/content", tags=["content"])
    test_app.include_router(tags.router, prefix="/api/tags", tags=["tags"])

    @test_app.get("/health")
    def health():
        return {"status": "ok"}

    # Override database dependency
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db

    return test_app


@pytest.fixture(scope="function")
def client(test_app) -> TestClient:
    """Create a test client without entering context manager."""
    return TestClient(test_app, raise_server_exceptions=False)


def _make_user(db_session, password_hash, username: str, email: str) -> User:
    user = User(username=username, email=email, password=password_hash)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db_session, password_hash) -> User:
    """Create a test user."""
    return _make_user(db_session, password_hash, "tester", "test@example.com")


@pytest.fixture(scope="function")
def other_user(db_session, password_hash) -> User:
    """A second user whose content must stay invisible to ``test_user``."""
    return _make_user(db_session, password_hash, "someone", "other@example.com")


@pytest.fixture(scope="function")
def auth_headers(test_user) -> dict:
    """Create authentication headers for test requests."""
    access_token = create_access_token(test_user.id, test_user.email)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture(scope="function")
def other_auth_headers(other_user) -> dict:
    access_token = create_access_token(other_user.id, other_user.email)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture(scope="function")
def make_tag(db_session) -> Callable[[str], Tag]:
    """Factory that inserts a tag with an already-normalized title."""

    def _make_tag(title: str) -> Tag:
        tag = Tag(title=title)
        db_session.add(tag)
        db_session.commit()
        db_session.refresh(tag)
        return tag

    return _make_tag


@pytest.fixture(scope="function")
def make_content(db_session) -> Callable[..., Content]:
    """Factory that inserts content directly, bypassing the service."""

    def _make_content(
        owner: User,
        title: str = "Saved item",
        description: str = "Something worth keeping",
        content_type: ContentType = ContentType.ARTICLE,
        link: Optional[str] = None,
        tags: Optional[List[Tag]] = None,
    ) -> Content:
        content = Content(
            user_id=owner.id,
            title=title,
            description=description,
            type=content_type,
            link=link,
        )
        content.tags = list(tags or [])
        db_session.add(content)
        db_session.commit()
        db_session.refresh(content)
        return content

    return _make_content
