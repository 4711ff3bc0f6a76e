import os

# Must be set before the app (and its settings) are imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from almanac.main import app
from almanac.db import Base, get_db
from almanac.models import Profile

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# check_same_thread is needed for SQLite; StaticPool shares the single
# in-memory connection between the test session and the app's sessions.
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Test client with DB override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


def _make_profile(db_session, username: str, default_unit: str = "cups") -> Profile:
    p = Profile(username=username, default_unit=default_unit)
    db_session.add(p)
    db_session.commit()
    db_session.refresh(p)
    return p


@pytest.fixture
def profile(db_session):
    """The calling cook."""
    return _make_profile(db_session, "Jane Doe")


@pytest.fixture
def other_profile(db_session):
    return _make_profile(db_session, "grandma")


@pytest.fixture
def auth_headers(profile):
    return {"X-Profile-Id": profile.id}


@pytest.fixture
def other_headers(other_profile):
    return {"X-Profile-Id": other_profile.id}
