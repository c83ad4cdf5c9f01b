"""
Shared fixtures: a fresh SQLite database, limiter and session state per test.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from app.core.config import settings
from app.core.rate_limit import api_limiter, auth_limiter
from app.core.sessions import session_manager
from app.db.base import Base
from app.db.session import get_db, init_db, make_engine
from app.main import app

VALID_PASSWORD = "Secret123"


@pytest.fixture
def engine(tmp_path):
    """Engine bound to a throwaway database file."""
    test_engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    """Database session for service-level tests."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    """Minimum bcrypt cost so the suite stays quick."""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture(autouse=True)
def reset_state():
    """Rate-limit counters and sessions must not leak between tests."""
    auth_limiter.reset()
    api_limiter.reset()
    session_manager.store.clear()
    yield
    auth_limiter.reset()
    api_limiter.reset()
    session_manager.store.clear()


@pytest.fixture
def client(engine):
    """Test client whose requests use the test database."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # Not used as a context manager: the lifespan would create the real database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user through the API; the client keeps the session cookie."""
    def _register(username: str = "alice", password: str = VALID_PASSWORD):
        response = client.post(
            "/api/auth/register",
            json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()
    return _register
