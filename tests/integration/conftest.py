"""Shared fixtures for integration tests."""

import pytest
from fastapi.testclient import TestClient

from app.context import MockContext
from app.main import create_app
from models.config import Configuration


@pytest.fixture(name="context")
def context_fixture(configuration: Configuration) -> MockContext:
    """Mock context over the sample configuration, with compiled routes."""
    return MockContext.from_configuration(configuration)


@pytest.fixture(name="client")
def client_fixture(context: MockContext) -> TestClient:
    """Test client of the whole web service.

    Redirects are not followed so that authorize responses can be
    inspected.
    """
    return TestClient(create_app(context), follow_redirects=False)
