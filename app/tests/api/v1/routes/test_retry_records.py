"""Tests for the retry record routes."""

import pytest

from infrastructure.resilience.retry import RetryState
from tests.fakes import BASE_TIME

pytestmark = pytest.mark.unit


class TestSaveRetryRecord:
    def test_stores_record_verbatim(self, client, record_store):
        body = {
            "id": "manual-1",
            "entityKey": "099999999903",
            "taskType": "CBSE_ONBOARDING",
            "requestPayload": {"entityKey": "099999999903"},
            "responsePayload": {"status": 500, "message": "Internal error"},
            "state": "PENDING",
            "attemptCount": 2,
            "createdAt": "2025-06-12T06:00:00Z",
            "nextEligibleAt": "2025-06-12T07:00:00",
        }

        response = client.post("/api/v1/retry-records", json=body)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "manual-1"
        assert data["attemptCount"] == 2
        record = record_store.get("manual-1")
        assert record.attempt_count == 2
        assert record.state is RetryState.PENDING
        assert record.next_eligible_at == BASE_TIME
        assert record.response_payload == {"status": 500, "message": "Internal error"}

    def test_minimal_body_gets_defaults(self, client, record_store):
        response = client.post(
            "/api/v1/retry-records",
            json={"entityKey": "099999999902", "taskType": "CBSE_ONBOARDING"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["state"] == "PENDING"
        assert data["attemptCount"] == 0
        assert record_store.get(data["id"]) is not None

    def test_bypasses_idempotency(self, client, record_store, retry_record_factory):
        """A manual write replaces the record held by the pair."""
        existing = record_store.create(retry_record_factory(entity_key="099999999902"))

        response = client.post(
            "/api/v1/retry-records",
            json={
                "entityKey": "099999999902",
                "taskType": "CBSE_ONBOARDING",
                "state": "CLOSED",
            },
        )

        assert response.status_code == 201
        assert record_store.get(existing.id) is None
        record = record_store.find_by_entity("099999999902", "CBSE_ONBOARDING")
        assert record.state is RetryState.CLOSED

    @pytest.mark.parametrize(
        "body",
        [
            {"taskType": "CBSE_ONBOARDING"},
            {"entityKey": "1", "taskType": "CBSE_ONBOARDING", "state": "OPEN"},
            {"entityKey": "1", "taskType": "CBSE_ONBOARDING", "attemptCount": -1},
        ],
    )
    def test_invalid_body_rejected(self, client, body):
        response = client.post("/api/v1/retry-records", json=body)
        assert response.status_code == 422


class TestGetRetryRecord:
    def test_get_by_id(self, client, record_store, retry_record_factory):
        record = record_store.create(retry_record_factory())

        response = client.get(f"/api/v1/retry-records/{record.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["entityKey"] == record.entity_key
        assert data["taskType"] == "CBSE_ONBOARDING"
        assert data["state"] == "PENDING"
        assert "nextEligibleAt" in data

    def test_unknown_id_is_404(self, client):
        response = client.get("/api/v1/retry-records/does-not-exist")
        assert response.status_code == 404

    def test_find_by_entity(self, client, record_store, retry_record_factory):
        record = record_store.create(retry_record_factory(entity_key="099999999901"))

        response = client.get(
            "/api/v1/retry-records",
            params={"entityKey": "099999999901", "taskType": "CBSE_ONBOARDING"},
        )

        assert response.status_code == 200
        assert response.json()["id"] == record.id

    def test_find_by_entity_missing_is_404(self, client):
        response = client.get(
            "/api/v1/retry-records",
            params={"entityKey": "1", "taskType": "CBSE_ONBOARDING"},
        )
        assert response.status_code == 404

    def test_find_requires_both_params(self, client):
        response = client.get("/api/v1/retry-records", params={"entityKey": "1"})
        assert response.status_code == 422
