import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
# Keep external integrations disabled by default for unit/API tests. Individual
# tests can opt-in by monkeypatching settings.
os.environ["DISABLE_CELERY"] = "true"
os.environ["RESEND_API_KEY"] = ""
os.environ["NOTIFICATION_DEDUP_BACKEND"] = "memory"
os.environ["FRONTEND_URL"] = "http://localhost:3000"
os.environ["SENTRY_DSN"] = ""

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from app.platform.database import Base, get_db
from app.main import app
from app.platform.middleware import _rate_limit_store
from app.components.notifications.dedupe import InMemoryRecentSendCache
from app.domains.integrations_notifications.adapters import (
    build_recent_send_cache,
    build_results_notifier,
    build_welcome_sender,
)
from app.models.profile import Profile, UserRole
from app.models.user import User

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Enable foreign key support for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class RecordingNotifier:
    """Stands in for the results/welcome email sender and records each call."""

    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.fail:
            raise RuntimeError("email provider unavailable")
        return f"email-{len(self.calls)}"


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def send_cache():
    return InMemoryRecentSendCache(window_seconds=300, sweep_probability=0.0)


@pytest.fixture(scope="function")
def client(db, notifier, send_cache):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[build_results_notifier] = lambda: notifier
    app.dependency_overrides[build_welcome_sender] = lambda: notifier
    app.dependency_overrides[build_recent_send_cache] = lambda: send_cache
    Base.metadata.create_all(bind=engine)
    # Clear in-memory rate limit state between tests to prevent 429 bleed-through
    _rate_limit_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Helpers: account state set directly in the DB
# ---------------------------------------------------------------------------

def verify_user(email: str) -> None:
    """Mark a user as email-verified in the test DB (call after register)."""
    db = TestingSessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.is_verified = True
            db.commit()
    finally:
        db.close()


def set_role(email: str, role: UserRole) -> None:
    db = TestingSessionLocal()
    try:
        profile = (
            db.query(Profile)
            .join(User, User.id == Profile.user_id)
            .filter(User.email == email)
            .first()
        )
        profile.role = role
        db.commit()
    finally:
        db.close()


def profile_id_for(email: str) -> str:
    db = TestingSessionLocal()
    try:
        profile = (
            db.query(Profile)
            .join(User, User.id == Profile.user_id)
            .filter(User.email == email)
            .first()
        )
        return profile.id
    finally:
        db.close()


# ---------------------------------------------------------------------------
# Factory helpers: create test entities quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0

def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}-{uuid.uuid4().hex[:8]}"


def register_user(client, email=None, password="TestPass123!", first_name="Test", last_name="User", company="Acme"):
    """Register a user via the API. Returns the response."""
    email = email or f"user-{_unique_id()}@acme.com"
    payload = {
        "email": email,
        "password": password,
        "first_name": first_name,
        "last_name": last_name,
        "company": company,
    }
    return client.post("/api/v1/auth/register", json=payload)


def login_user(client, email, password="TestPass123!"):
    """Log in a user via the API (FastAPI-Users JWT). Returns the response."""
    return client.post(
        "/api/v1/auth/jwt/login",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


def auth_headers(client, email=None, password="TestPass123!", role=None, **profile):
    """Register, verify, login a user and return Authorization headers + email.

    Returns (headers_dict, email) tuple.
    """
    email = email or f"user-{_unique_id()}@acme.com"
    reg = register_user(client, email=email, password=password, **profile)
    assert reg.status_code == 201, f"Registration failed: {reg.text}"
    verify_user(email)
    if role is not None:
        set_role(email, role)
    login_resp = login_user(client, email, password)
    assert login_resp.status_code == 200, f"Login failed: {login_resp.text}"
    token = login_resp.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}, email


def guest_payload(**overrides):
    payload = {
        "email": overrides.pop("email", f"guest-{_unique_id()}@acme.com"),
        "type": "INITIAL",
        "answers": {"q1": 1, "q2": 2, "q3": 3},
        "firstName": "Jane",
        "lastName": "Doe",
        "company": "Acme",
    }
    payload.update(overrides)
    return payload


def submit_guest(client, **overrides):
    return client.post("/api/v1/evaluations/guest", json=guest_payload(**overrides))
