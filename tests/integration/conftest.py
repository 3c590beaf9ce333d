import pytest
from fastapi.testclient import TestClient

from kubesnoop.api.dependencies import get_rule_store
from kubesnoop.main import app


@pytest.fixture
def client(default_store):
    """Test client whose rule store is a fresh in-memory copy of the defaults."""
    app.dependency_overrides[get_rule_store] = lambda: default_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
