from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.main import app
from shared.database import Base, get_db
from shared.models import Event  # noqa: F401  registers the table


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_session():
    return MagicMock()


@pytest.fixture
def broken_client(broken_session):
    """A client whose store session fails on every call the test configures."""
    def override_get_db():
        yield broken_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def post_event(client):
    def _post(source="web", event_type="click", occurred_at="2024-01-01T10:00:00Z", metadata=None):
        body = {
            "source": source,
            "event_type": event_type,
            "occurred_at": occurred_at,
            "metadata": metadata if metadata is not None else {},
        }
        response = client.post("/api/events", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _post
