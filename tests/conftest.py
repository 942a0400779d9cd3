"""
Shared fixtures: an in-memory database, memory-backed sessions and a fake LLM gateway
"""
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.db import create_db_engine, init_db
from app.deps import get_gateway
from app.main import create_app
from app.middleware.rate_limit import limiter
from app.services.cache import CacheService
from app.services.sessions import SessionStore

THREE_QUESTIONS = (
    "Q1: What is photosynthesis?\n"
    "A: The process plants use to turn light into chemical energy.\n"
    "Q2: Where does it happen?\n"
    "A: In the chloroplasts.\n"
    "Q3: What gas is released?\n"
    "A: Oxygen.\n"
)


class FakeGateway:
    configured = True
    model = "fake-model"

    def __init__(self):
        self.summary = "Plants convert light into energy."
        self.questions_text = THREE_QUESTIONS
        self.error = None
        self.calls = []

    def summarize(self, text):
        self.calls.append(("summary", text))
        if self.error:
            raise self.error
        return self.summary

    def generate_questions(self, summary):
        self.calls.append(("questions", summary))
        if self.error:
            raise self.error
        return self.questions_text

    def close(self):
        pass


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", redis_url=None, openai_api_key=None)


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_store():
    return SessionStore(CacheService(None), idle_seconds=600, absolute_seconds=3600)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(settings, gateway):
    limiter.enabled = False
    app = create_app(settings)
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True


@pytest.fixture
def login(client):
    """Register (once per username) and log in; the client keeps the session cookie."""
    registered = set()

    def _login(username="alice", password="s3cret-pass"):
        if username not in registered:
            assert client.post("/register", json={"username": username, "password": password}).status_code == 201
            registered.add(username)
        response = client.post("/login", json={"username": username, "password": password})
        assert response.status_code == 200
        return response.json()["user"]

    return _login
