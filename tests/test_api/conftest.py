"""
Fixtures for the API tests. Each test gets an app started on its own copy
of the Perun export.
"""

import pytest
from fastapi.testclient import TestClient

from gridmon.api.app import create_app


@pytest.fixture
def client(server_settings):
    with TestClient(create_app(server_settings)) as client:
        yield client

