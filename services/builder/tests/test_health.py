from app.main import app
from fastapi.testclient import TestClient


def test_health() -> None:
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["service"] == "builder"


def test_health_echoes_correlation_id() -> None:
    client = TestClient(app)
    response = client.get("/health", headers={"x-correlation-id": "corr-42"})
    assert response.headers["x-correlation-id"] == "corr-42"
