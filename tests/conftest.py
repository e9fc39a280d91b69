"""
Shared fixtures for the access relay tests.
"""

import pytest
from fastapi.testclient import TestClient

from access_relay.config import Settings
from access_relay.main import create_app
from access_relay.utils.exceptions import NotifierException

from .fakes import FakeAccessProvider, FakeNotifier


@pytest.fixture
def settings():
    """Settings that do not depend on the environment."""
    return Settings(
        _env_file=None,
        email_user="relay@example.com",
        email_pass="secret",
        to_email="owner@example.com",
        backend_url="https://relay.example.com",
        owner="example-org",
        github_token="ghp_test",
        rate_limit_max=1000,
    )


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def failing_notifier():
    return FakeNotifier(error=NotifierException("Failed to send email: connection refused"))


@pytest.fixture
def access_provider():
    return FakeAccessProvider()


@pytest.fixture
def client(settings, notifier, access_provider):
    """Test client wired to fake capabilities."""
    app = create_app(settings, notifier=notifier, access_provider=access_provider)
    return TestClient(app)
