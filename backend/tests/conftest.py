import os

# Settings are read at import time: point everything at test values before importing waitlist.*.
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("ENABLE_RATE_LIMITING", "false")

from contextlib import contextmanager
import importlib

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from waitlist.core.base import Base
from waitlist.core import config as app_config
from waitlist.core.security import hash_password, issue_session_token

# Import models so they register with SQLAlchemy metadata.
from waitlist.models.organizer import Organizer, OrganizerSocialProvider  # noqa: F401
from waitlist.models.service import Service  # noqa: F401
from waitlist.models.participant import WaitlistParticipant  # noqa: F401

from waitlist.core.database import get_db


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # The in-memory DB persists across tests (StaticPool); reset schema per test.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "ENABLE_RATE_LIMITING",
        "ALLOW_IMPLICIT_SOCIAL_LINKING",
        "OAUTH_STATE_TTL_SECONDS",
        "OAUTH_STATE_COOKIE_NAME",
        "SESSION_TOKEN_EXPIRE_MINUTES",
        "FRONTEND_BASE_URL",
        "GOOGLE_CLIENT_ID",
        "GITHUB_CLIENT_ID",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)
        app_config.settings.ENABLE_RATE_LIMITING = False


class FakeProviderHttp:
    """
    Stand-in for the provider HTTP APIs (Google tokeninfo, GitHub user/emails, token endpoints).

    Register tokens with add_google / add_github; anything unregistered is rejected the way
    the real provider rejects it (Google 400, GitHub 401).
    """

    def __init__(self):
        self.google: dict[str, dict] = {}
        self.github_users: dict[str, dict] = {}
        self.github_emails: dict[str, list[dict]] = {}
        self.codes: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str]] = []

    def add_google(self, token: str, *, user_id: str | None, email: str | None) -> None:
        payload: dict = {"audience": "test-client", "verified_email": True}
        if user_id is not None:
            payload["user_id"] = user_id
        if email is not None:
            payload["email"] = email
        self.google[token] = payload

    def add_github(self, token: str, *, github_id: int, email: str | None, emails: list[dict] | None = None) -> None:
        self.github_users[token] = {"id": github_id, "login": f"user{github_id}", "email": email}
        self.github_emails[token] = emails or []

    def add_code(self, provider: str, code: str, access_token: str) -> None:
        self.codes[(provider, code)] = access_token

    @staticmethod
    def _response(method: str, url: str, status_code: int, body) -> httpx.Response:
        return httpx.Response(status_code, json=body, request=httpx.Request(method, url))

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(("GET", url))
        if url.startswith("https://www.googleapis.com/"):
            token = (params or {}).get("access_token")
            if token not in self.google:
                return self._response("GET", url, 400, {"error": "invalid_token"})
            return self._response("GET", url, 200, self.google[token])

        token = (headers or {}).get("Authorization", "").removeprefix("Bearer ")
        if url == "https://api.github.com/user":
            if token not in self.github_users:
                return self._response("GET", url, 401, {"message": "Bad credentials"})
            return self._response("GET", url, 200, self.github_users[token])
        if url == "https://api.github.com/user/emails":
            if token not in self.github_emails:
                return self._response("GET", url, 401, {"message": "Bad credentials"})
            return self._response("GET", url, 200, self.github_emails[token])

        raise AssertionError(f"Unexpected provider GET: {url}")

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append(("POST", url))
        provider = "google" if "google" in url else "github"
        access_token = self.codes.get((provider, (data or {}).get("code")))
        if provider == "google":
            if not access_token:
                return self._response("POST", url, 400, {"error": "invalid_grant"})
            return self._response("POST", url, 200, {"access_token": access_token, "token_type": "Bearer"})
        if not access_token:
            # GitHub reports bad codes with a 200.
            return self._response("POST", url, 200, {"error": "bad_verification_code"})
        return self._response("POST", url, 200, {"access_token": access_token, "token_type": "bearer"})


@pytest.fixture()
def fake_providers(monkeypatch):
    from waitlist.auth import oauth, providers

    fake = FakeProviderHttp()
    monkeypatch.setattr(providers.httpx, "get", fake.get)
    monkeypatch.setattr(oauth.httpx, "post", fake.post)
    return fake


@pytest.fixture()
def app(db_session):
    app_config.settings.JWT_SECRET = app_config.settings.JWT_SECRET or "test_jwt_secret"
    app_config.settings.ENABLE_RATE_LIMITING = False

    # SlowAPI decorators bind at import time; reload routes + app so a rate-limited
    # reload from another test can't leak in.
    import waitlist.core.rate_limit as rate_limit
    import waitlist.routes.auth as auth_routes
    import waitlist.routes.public as public_routes
    import waitlist.main as main

    importlib.reload(rate_limit)
    importlib.reload(auth_routes)
    importlib.reload(public_routes)
    importlib.reload(main)
    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def organizers(db_session):
    """
    Two distinct password organizers for ownership / isolation tests.
    """
    org_a = Organizer(email="test@example.com", password_hash=hash_password("test_password_123"))
    org_b = Organizer(email="other@example.com", password_hash=hash_password("test_password_123"))
    db_session.add_all([org_a, org_b])
    db_session.commit()
    db_session.refresh(org_a)
    db_session.refresh(org_b)
    return org_a, org_b


def _auth_headers(organizer_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_session_token(organizer_id)}"}


@pytest.fixture()
def auth_headers():
    return _auth_headers


@pytest.fixture()
def anon_client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def client(app, organizers):
    """
    Default client authenticated as organizer A (real session token).
    """
    org_a, _ = organizers
    with TestClient(app, headers=_auth_headers(org_a.id)) as c:
        yield c


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary organizer.

    Usage:
        with client_for(organizer) as c:
            ...
    """

    @contextmanager
    def _client_for(organizer: Organizer):
        with TestClient(app, headers=_auth_headers(organizer.id)) as c:
            yield c

    return _client_for
