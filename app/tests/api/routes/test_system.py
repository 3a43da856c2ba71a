import pytest

pytestmark = pytest.mark.unit


def test_get_version(client):
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": "abc123"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_rate_limit_exceeded(client):
    for _ in range(50):
        client.get("/health")

    response = client.get("/health")

    assert response.status_code == 429
    assert response.json() == {"message": "Rate limit exceeded"}
