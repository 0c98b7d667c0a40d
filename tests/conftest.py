"""Pytest configuration and fixtures."""

import os

# Set test environment variables BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-32chars")
os.environ.setdefault("ENVIRONMENT", "testing")

# Disable rate limiting for tests by monkey-patching BEFORE imports
from slowapi import Limiter
from slowapi.util import get_remote_address

_disabled_limiter = Limiter(key_func=get_remote_address, enabled=False)

# Patch the rate_limit module before it's imported elsewhere
import app.core.rate_limit as rate_limit_module
rate_limit_module.limiter = _disabled_limiter

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.api.deps import get_db
from app.models import Role
from app.services.jwt_service import JWTService
from app.services.password_reset_store import PasswordResetStore
from app.services.token_blacklist import TokenBlacklist
from app.services.user_service import UserService
from main import app

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def token_blacklist():
    return TokenBlacklist()


@pytest.fixture
def password_resets():
    return PasswordResetStore()


@pytest.fixture
def jwt_service(token_blacklist):
    return JWTService(token_blacklist)


@pytest.fixture
def test_user_data():
    """Sample registration data."""
    return {
        "username": "alice",
        "email": "alice@x.com",
        "password": "secret1",
        "first_name": "Alice",
        "last_name": "Smith",
    }


@pytest.fixture
def test_user_credentials():
    """Sample login credentials."""
    return {
        "username": "alice",
        "password": "secret1",
    }


@pytest.fixture
def admin_user(db_session):
    """An ADMIN account created directly in the datastore."""
    return UserService.create_user(
        db_session,
        username="admin",
        email="admin@x.com",
        password="adminpass1",
        first_name="Ada",
        last_name="Admin",
        role=Role.ADMIN,
    )
