import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_mentorship.db")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "true")

import pytest
from fastapi.testclient import TestClient

from mentorship_api.database import Base, SessionLocal, engine
from mentorship_api.dependencies.service_dependencies import get_notification_sender
from mentorship_api.main import app
from tests.factories import RecordingSender


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def client(sender):
    app.dependency_overrides[get_notification_sender] = lambda: sender
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
