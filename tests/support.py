"""Shared test helpers: in-memory database, settings and an API test case base class."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cms.core.config import Settings, get_settings
from cms.core.database import get_db
from cms.main import app
from cms.models import Base
from cms.services.user_store import CredentialStore

TEST_SECRET = "test-only-signing-secret-0123456789abcdef"
STRONG_PASSWORD = "Secret1!"


def make_settings(**overrides: object) -> Settings:
    """Settings for tests: fast bcrypt, in-memory URL, fixed secret."""
    values: dict[str, object] = {
        "JWT_SECRET": TEST_SECRET,
        "DATABASE_URL": "sqlite://",
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(**values)


def make_memory_engine():
    """One shared in-memory SQLite connection, usable from TestClient worker threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


class ApiTestCase(unittest.TestCase):
    """Runs the FastAPI app against a fresh in-memory database per test."""

    settings_overrides: dict[str, object] = {}

    def setUp(self) -> None:
        self.engine = make_memory_engine()
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False)
        self.settings = make_settings(**self.settings_overrides)

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()

    def url(self, path: str) -> str:
        return f"{self.settings.API_PREFIX}{path}"

    def new_client(self, cookies: dict[str, str] | None = None) -> TestClient:
        """A separate client (own cookie jar), e.g. for a second user."""
        return TestClient(app, cookies=cookies)

    def register(
        self,
        email: str,
        name: str,
        password: str = STRONG_PASSWORD,
        client: TestClient | None = None,
    ):
        return (client or self.client).post(
            self.url("/register"),
            json={"email": email, "name": name, "password": password},
        )

    def login(self, email: str, password: str = STRONG_PASSWORD, client: TestClient | None = None):
        return (client or self.client).post(
            self.url("/sessions"),
            json={"email": email, "password": password},
        )

    def grant_admin(self, email: str) -> None:
        db = self.session_factory()
        try:
            CredentialStore(db).set_admin(email, True)
        finally:
            db.close()

    def user_count(self) -> int:
        db = self.session_factory()
        try:
            return len(CredentialStore(db).list_all())
        finally:
            db.close()
