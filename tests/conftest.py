"""
Shared pytest fixtures.

The app runs against a throwaway SQLite file per test via
``app.dependency_overrides[get_db]``; logs go to a temporary directory.
Environment variables are set before any project import so that
``Security.security_config`` picks them up.
"""

import datetime
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="roledesk-logs-")
os.environ["SESSION_SECRET_KEY"] = "test-session-secret"
os.environ["FORCE_HTTPS"] = "false"
os.environ["SEED_PASSWORD"] = "password"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from roledesk.database import Base, get_db, make_engine  # noqa: E402
from roledesk.enums import UserType  # noqa: E402
from roledesk.main import create_app  # noqa: E402
from roledesk.models import User  # noqa: E402
from roledesk.seeders import DataSeeder  # noqa: E402
from Security.Password_hash import hash_password  # noqa: E402

SEED_PASSWORD = "password"


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: Unit tests (no database, no HTTP)")
    config.addinivalue_line("markers", "integration: Tests that go through the database and the app")


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'roledesk-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def seeded_users(db_session) -> dict:
    """The three seed accounts, keyed by UserType."""
    users = DataSeeder(password=SEED_PASSWORD).run(db_session)
    return {user.user_type: user for user in users}


@pytest.fixture
def make_user(db_session):
    def _make_user(email: str, user_type=UserType.USER, password: str = SEED_PASSWORD, verified: bool = True) -> User:
        user = User(
            name=email.split("@")[0].title(),
            email=email,
            password_hash=hash_password(password),
            type=user_type,
            email_verified_at=datetime.datetime.utcnow() if verified else None,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


# ============================================================================
# App
# ============================================================================


@pytest.fixture
def app(session_factory):
    application = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def login(client):
    def _login(email: str, password: str = SEED_PASSWORD):
        response = client.post(
            "/login",
            data={"email": email, "password": password},
            follow_redirects=False,
        )
        assert response.status_code == 303, response.text
        return response

    return _login
