import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_yachtclub.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["HOURS_PER_TOKEN"] = "4"
os.environ.pop("FRONTEND_URL", None)

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.domain.membership import MembershipPolicy, default_registry
from app.domain.tokens import TokenPolicy


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    # Use a temporary file for SQLite database
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    # Create test engine and session with proper SQLite settings
    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
        poolclass=None,  # Don't use connection pooling for SQLite
    )

    # Enable WAL mode to reduce locking issues
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Dispose the engine to close all connections
        test_engine.dispose()

        # Clean up - remove test database file and directory
        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def other_db(db_session):
    """A second session on the same database, acting as a concurrent request."""
    other = sessionmaker(autoflush=False, bind=db_session.get_bind())()
    try:
        yield other
    finally:
        other.close()


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def policy(registry) -> MembershipPolicy:
    return MembershipPolicy(registry)


@pytest.fixture
def token_policy(registry) -> TokenPolicy:
    return TokenPolicy(registry, hours_per_token=4)


@pytest.fixture(scope="function")
def make_member(client):
    """Factory creating members through the API; returns the response JSON."""
    counter = {"n": 0}

    def _make(tier: str = "bronze", email: str | None = None, name: str = "Test Member") -> dict:
        counter["n"] += 1
        response = client.post(
            "/api/v1/members",
            json={
                "email": email or f"member{counter['n']}@example.com",
                "name": name,
                "membership_tier": tier,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture(scope="function")
def make_yacht(client):
    """Factory creating yachts through the API; returns the response JSON."""

    def _make(
        size: int,
        name: str | None = None,
        capacity: int = 10,
        location: str = "Miami Marina",
        is_available: bool = True,
    ) -> dict:
        response = client.post(
            "/api/v1/yachts",
            json={
                "name": name or f"Yacht {size}ft",
                "location": location,
                "size": size,
                "capacity": capacity,
                "is_available": is_available,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make
