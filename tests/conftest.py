import httpx
import pytest
from fastapi.testclient import TestClient

from config import Settings, get_settings
from tests.fixtures.mock_clients import UpstreamRecorder
from utils.http_client import HTTPClientManager


@pytest.fixture
def settings():
    """Settings with every provider credential configured."""
    return Settings(
        OPENAI_API_KEY="test-openai-key",
        ELEVENLABS_API_KEY="test-elevenlabs-key",
        GEMINI_API_KEY="test-gemini-key",
    )


@pytest.fixture
def upstream(monkeypatch):
    """Fake provider APIs behind an httpx.MockTransport installed for all relay clients."""
    recorder = UpstreamRecorder()
    monkeypatch.setattr(HTTPClientManager, "transport", httpx.MockTransport(recorder))
    return recorder


@pytest.fixture
def client_factory(upstream):
    """Build a TestClient for an app running with the given settings."""
    from main import create_app

    clients = []

    def build(app_settings):
        app = create_app(app_settings)
        app.dependency_overrides[get_settings] = lambda: app_settings
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield build

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def app_client(client_factory, settings):
    """Pre-configured app with all provider credentials set."""
    return client_factory(settings)
