"""
Shared test fixtures: in-memory SQLite database, signing context and an
API test client wired to both.
"""
# Configure the environment BEFORE importing the app (settings are read at import time)
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["AUTO_CREATE_TABLES"] = "true"

import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.core.database.models import Base, User
from backend.core.identity import SigningContext, sign_identity


@pytest.fixture
def signing_context():
    """Freshly initialized signing context"""
    context = SigningContext()
    context.initialize()
    return context


@pytest.fixture
def test_db():
    """In-memory SQLite session; every connection shares one database"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_user(test_db, signing_context):
    """Insert a signed user directly, optionally with a fixed created_at"""
    def _make_user(email, role="user", status="active", created_at=None):
        identity = sign_identity(signing_context, email)
        user = User(
            email=email,
            role=role,
            status=status,
            email_hash=identity.email_hash,
            signature=identity.signature,
            public_key=identity.public_key,
            created_at=created_at or datetime.utcnow(),
        )
        test_db.add(user)
        test_db.commit()
        test_db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def client(test_db, signing_context):
    """TestClient for the full app with database and signing key overridden"""
    from backend.api.main import app
    from backend.api.dependencies import get_signing_context
    from backend.core.database import get_db

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_signing_context] = lambda: signing_context
    try:
        # Not used as a context manager: startup (real DB, new key) is skipped
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
