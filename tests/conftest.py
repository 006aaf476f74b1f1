import os

# Must be set before any app module reads settings.
os.environ["ENV"] = "test"
os.environ["BACKGROUND_TASKS_ENABLED"] = "false"
os.environ["TELEGRAM_BOT_TOKEN"] = ""
os.environ["TELEGRAM_WEBHOOK_SECRET"] = ""
os.environ["TRANSCRIPTION_API_URL"] = ""
os.environ["ANALYSIS_API_URL"] = ""
os.environ["HELPDESK_TIMEZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient

from app.db import Base, SessionLocal, engine, get_db
from app.main import create_app
import app.models  # noqa: F401

pytest_plugins = [
    "tests.fixtures.channel_fixtures",
    "tests.fixtures.agent_fixtures",
    "tests.fixtures.message_fixtures",
    "tests.fixtures.case_fixtures",
]


@pytest.fixture(scope="function")
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """TestClient sharing the test session."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
