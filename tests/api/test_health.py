from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from zoning_search.api.deps import get_store_connection
from zoning_search.api.main import create_app


@pytest.fixture
def app(store_connection):
    app = create_app()
    app.dependency_overrides[get_store_connection] = lambda: store_connection
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_store(client):
    response = client.get("/api/v1/health/store")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Chunk store connection OK"}


def test_health_check_store_unreachable(app):
    connection = MagicMock()
    connection.ping.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    app.dependency_overrides[get_store_connection] = lambda: connection

    response = TestClient(app).get("/api/v1/health/store")

    assert response.status_code == 503
    assert response.json() == {"status": "unhealthy", "message": "Chunk store unreachable"}
