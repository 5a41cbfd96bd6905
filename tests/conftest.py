import pytest
from fastapi.testclient import TestClient

from openai_mock.config import ServiceConfig
from openai_mock.server import create_app


@pytest.fixture
def config():
    """Default settings with latency disabled so tests run fast."""
    return ServiceConfig()


@pytest.fixture
def make_client():
    """Factory for a TestClient around an app built from custom settings."""
    def _make(**settings):
        return TestClient(create_app(ServiceConfig(**settings)))
    return _make


@pytest.fixture
def client(config):
    with TestClient(create_app(config)) as test_client:
        yield test_client
