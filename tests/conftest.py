"""
Shared fixtures: in-memory database, fake upstream clients, TestClient.
"""
import os

os.environ["CLARIFIED_RATE_LIMIT_ENABLED"] = "false"
os.environ["CLARIFIED_DATABASE_URL"] = "sqlite://"
os.environ["CLARIFIED_MANAGE_SCHEMA"] = "false"

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from careerclarified.database import Base, get_db
from careerclarified.main import app
from careerclarified.models import Profile, AIUsageLog
from careerclarified.rate_limit import limiter
from careerclarified.services.ai_service import AIServiceError, get_ai_service
from careerclarified.services.storage_service import StorageServiceError, get_storage_service
from careerclarified.services.auth_client import get_auth_client

limiter.enabled = False


class FakeAI:
    """Records chat calls and returns a canned reply."""

    def __init__(self, reply="Generated text", configured=True, error=None):
        self.reply = reply
        self.configured = configured
        self.error = error
        self.model = "gpt-4o-mini"
        self.calls = []

    def is_configured(self):
        return self.configured

    async def is_available(self):
        return self.configured

    async def list_models(self):
        return ["gpt-4o-mini", "gpt-4o"] if self.configured else []

    async def chat(self, messages, model=None, temperature=None, max_tokens=None):
        self.calls.append({
            "messages": messages,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error:
            raise AIServiceError(self.error)
        return self.reply


class FakeStorage:
    def __init__(self, configured=True, bucket_exists=True, upload_error=None):
        self.configured = configured
        self.bucket_exists = bucket_exists
        self.upload_error = upload_error
        self.uploads = []

    def is_configured(self):
        return self.configured

    async def get_bucket(self, name):
        if not self.bucket_exists:
            raise StorageServiceError("Bucket not found", 404)
        return {"id": name, "name": name}

    async def upload(self, bucket, path, data, content_type="application/pdf", upsert=False):
        if self.upload_error:
            raise StorageServiceError(self.upload_error, 403)
        self.uploads.append({"bucket": bucket, "path": path, "size": len(data), "content_type": content_type})
        return f"{bucket}/{path}"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def fake_ai():
    return FakeAI()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def client(db_session, fake_ai, fake_storage):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    app.dependency_overrides[get_storage_service] = lambda: fake_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def set_auth_client():
    """Install a fake auth client for the auth proxy endpoints."""
    def _set(fake):
        app.dependency_overrides[get_auth_client] = lambda: fake
        return fake
    return _set


@pytest.fixture
def make_profile(db_session):
    def _make(tier="free", is_admin=False, email="jane@example.com"):
        profile = Profile(id=str(uuid.uuid4()), email=email, tier=tier, is_admin=is_admin)
        db_session.add(profile)
        db_session.commit()
        return profile
    return _make


@pytest.fixture
def add_usage(db_session):
    def _add(user_id, count, feature_name="resume_builder", when=None):
        when = when or datetime.now(timezone.utc)
        for _ in range(count):
            db_session.add(AIUsageLog(user_id=user_id, feature_name=feature_name, created_at=when))
        db_session.commit()
    return _add
