"""
HTTP tests through FastAPI's TestClient.

Checks routing, the API key guard, the response envelope and how domain
errors map to status codes.
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from botledger.database import Settings, StoreClients
from botledger.main import create_app

from helpers import IN_MEMORY_DATABASE_URL, MockRedis

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}

BOT_PAYLOAD = {
    "name": "MyAwesomeBot",
    "contract_type": "CALL",
    "initial_stake": 10,
    "duration": 5,
    "duration_unit": "TICK",
    "repeat_trade": True,
    "symbol": "R_100",
    "version": "1.0.0",
    "status": "INITIALIZING",
    "is_active": False,
}


@pytest.fixture
def redis_client():
    return MockRedis()


@pytest.fixture
def client(redis_client):
    stores = StoreClients(Settings(database_url=IN_MEMORY_DATABASE_URL), redis_client=redis_client)
    with TestClient(create_app(stores=stores, api_key=API_KEY)) as test_client:
        yield test_client


def create_bot(client, owner="user123", **overrides):
    response = client.post(f"/api/v1/users/{owner}/bots", json={**BOT_PAYLOAD, **overrides}, headers=HEADERS)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def audit_payload(bot_id, outcome, **overrides):
    payload = {
        "owner_id": "user123",
        "bot_id": bot_id,
        "session_id": "session-1",
        "strategy_used": "MartingaleV1",
        "amount": 10,
        "contract_type": "CALL",
        "currency": "USD",
        "duration": 5,
        "duration_unit": "TICK",
        "symbol": "R_100",
        "outcome": outcome,
        "profit_or_loss": 5 if outcome == "WIN" else -10,
    }
    payload.update(overrides)
    return payload


def test_create_app_requires_api_key(monkeypatch):
    monkeypatch.delenv("API_SECRET_KEY", raising=False)
    with pytest.raises(ValueError):
        create_app(stores=StoreClients(Settings(database_url=IN_MEMORY_DATABASE_URL), redis_client=MockRedis()))


def test_health_is_public(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["statusCode"] == 200
    assert body["data"] == {"status": "ok", "database": True, "mirror": True}


def test_health_reports_degraded_mirror(client, redis_client):
    redis_client.fail("ping")
    response = client.get("/api/v1/health")
    assert response.json()["data"]["status"] == "degraded"
    assert response.json()["data"]["mirror"] is False


def test_missing_api_key_is_rejected(client):
    response = client.get("/api/v1/users/user123/bots")
    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized"


def test_bearer_api_key_is_accepted(client):
    response = client.get("/api/v1/users/user123/bots", headers={"Authorization": f"Bearer {API_KEY}"})
    assert response.status_code == 200


def test_bot_lifecycle(client):
    bot = create_bot(client)
    bot_url = f"/api/v1/users/user123/bots/{bot['id']}"
    assert bot["mirror_synced"] is True

    response = client.get(bot_url, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "MyAwesomeBot"

    response = client.patch(bot_url, json={"status": "RUNNING", "is_active": True}, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "RUNNING"

    response = client.get(f"/api/v1/bots/{bot['id']}/display-status", headers=HEADERS)
    assert response.json()["data"]["status"] == "RUNNING"

    response = client.get("/api/v1/users/user123/bots", params={"status": "RUNNING"}, headers=HEADERS)
    assert [b["id"] for b in response.json()["data"]] == [bot["id"]]

    response = client.delete(bot_url, headers=HEADERS)
    assert response.status_code == 204

    assert client.get(bot_url, headers=HEADERS).status_code == 404
    assert client.delete(bot_url, headers=HEADERS).status_code == 404
    assert client.get(f"/api/v1/bots/{bot['id']}/display-status", headers=HEADERS).status_code == 404


def test_create_bot_validation_error(client):
    response = client.post(
        "/api/v1/users/user123/bots", json={**BOT_PAYLOAD, "initial_stake": -1}, headers=HEADERS
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Validation Error"


def test_partial_status_update_is_rejected(client):
    bot = create_bot(client)
    response = client.patch(
        f"/api/v1/users/user123/bots/{bot['id']}", json={"status": "PAUSED"}, headers=HEADERS
    )
    assert response.status_code == 422
    assert "together" in response.json()["data"]["detail"]


def test_update_unknown_bot_is_not_found(client):
    response = client.patch(f"/api/v1/users/user123/bots/{uuid4()}", json={"name": "x"}, headers=HEADERS)
    assert response.status_code == 404


def test_mirror_outage_does_not_fail_create(client, redis_client):
    redis_client.fail("hset")
    bot = create_bot(client)
    assert bot["mirror_synced"] is False

    response = client.post(f"/api/v1/users/user123/bots/{bot['id']}/display-status/sync", headers=HEADERS)
    assert response.status_code == 503

    redis_client.failing.clear()
    response = client.post(f"/api/v1/users/user123/bots/{bot['id']}/display-status/sync", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "INITIALIZING"


def test_session_state_publish_and_read(client):
    bot_id = str(uuid4())
    payload = {
        "bot_id": bot_id,
        "session_id": "session-1",
        "number_of_runs": 1,
        "number_of_wins": 1,
        "number_of_losses": 0,
        "total_stake": 10,
        "total_payout": 15,
        "total_profit": 5,
        "commission_payout": 0,
        "real_commission_payout": 0,
        "current_strategy": "MartingaleV1",
    }

    assert client.get(f"/api/v1/bots/{bot_id}/session", headers=HEADERS).status_code == 404

    response = client.put(f"/api/v1/bots/{bot_id}/session", json=payload, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["last_updated"] is not None

    response = client.get(f"/api/v1/bots/{bot_id}/session", headers=HEADERS)
    assert response.json()["data"]["total_profit"] == 5

    response = client.put(f"/api/v1/bots/{uuid4()}/session", json=payload, headers=HEADERS)
    assert response.status_code == 422


def test_audits_and_streaks(client):
    bot_id = str(uuid4())
    for outcome in ["WIN", "WIN", "LOSS", "WIN", "WIN", "WIN", "LOSS"]:
        response = client.post("/api/v1/audits", json=audit_payload(bot_id, outcome), headers=HEADERS)
        assert response.status_code == 201
    client.post("/api/v1/audits", json=audit_payload(str(uuid4()), "LOSS"), headers=HEADERS)

    response = client.get("/api/v1/audits", params={"bot_id": bot_id}, headers=HEADERS)
    audits = response.json()["data"]
    assert len(audits) == 7
    assert [a["timestamp"] for a in audits] == sorted(a["timestamp"] for a in audits)

    response = client.get("/api/v1/audits/streaks", params={"bot_id": bot_id}, headers=HEADERS)
    report = response.json()["data"]
    assert report["trades_analyzed"] == 7
    assert report["longest_win"]["length"] == 3
    assert report["longest_loss"]["length"] == 1


def test_audit_query_rejects_inverted_range(client):
    response = client.get(
        "/api/v1/audits",
        params={"start_time": "2024-01-02T00:00:00Z", "end_time": "2024-01-01T00:00:00Z"},
        headers=HEADERS,
    )
    assert response.status_code == 422
