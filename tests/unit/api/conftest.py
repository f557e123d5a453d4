"""Fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from tests.conftest import FakeSites
from vodhub.api.app import create_app
from vodhub.config import Settings


@pytest.fixture
def client(settings: Settings, fake_sites: FakeSites) -> Iterator[TestClient]:
    """Test client with the lifespan running and outbound traffic faked."""
    app = create_app(settings, transport=fake_sites.transport())
    with TestClient(app) as test_client:
        yield test_client
