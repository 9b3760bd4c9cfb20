import pytest

from core.config import settings
from shared.codes import BusinessCode

from conftest import BUCKET, make_action, make_target

ACTION_URL = f"{settings.API_PREFIX}/semantic/action"


@pytest.mark.asyncio
async def test_business_success_is_200(client, store_factory):
    store_factory.seed("a.txt", b"1")
    resp = await client.post(ACTION_URL, json=make_action("SearchAction", target=make_target()))
    assert resp.status_code == 200
    body = resp.json()
    assert body["actionStatus"] == "CompletedActionStatus"
    assert body["result"][0]["contentUrl"] == f"s3://{BUCKET}/a.txt"
    assert resp.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_business_failure_is_still_200(client):
    resp = await client.post(ACTION_URL, json=make_action("DeleteAction", target=make_target()))
    assert resp.status_code == 200
    body = resp.json()
    assert body["actionStatus"] == "FailedActionStatus"
    assert body["error"]["name"] == "MissingObjectKey"


@pytest.mark.asyncio
async def test_malformed_payload_is_400(client):
    resp = await client.post(ACTION_URL, content=b"{oops", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == BusinessCode.MALFORMED_PAYLOAD
    assert body["error"]["type"] == "MalformedPayload"
    assert body["error"]["request_id"] == resp.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_unsupported_type_is_400(client, store_factory):
    resp = await client.post(ACTION_URL, json=make_action("UpdateAction", target=make_target()))
    assert resp.status_code == 400
    assert resp.json()["code"] == BusinessCode.UNSUPPORTED_ACTION_TYPE
    assert store_factory.opened == []


@pytest.mark.asyncio
async def test_state_routes(client):
    await client.post(ACTION_URL, json=make_action("SearchAction", target=make_target(), identifier="op-42"))

    listing = await client.get(f"{settings.API_PREFIX}/state")
    assert listing.status_code == 200
    assert listing.json()["data"][0]["operation_id"] == "op-42"

    one = await client.get(f"{settings.API_PREFIX}/state/op-42")
    assert one.status_code == 200
    data = one.json()["data"]
    assert data["status"] == "CompletedActionStatus"
    assert data["action_type"] == "SearchAction"
    assert data["started_at"].endswith("Z")

    missing = await client.get(f"{settings.API_PREFIX}/state/unknown")
    assert missing.status_code == 404
    assert missing.json()["code"] == BusinessCode.OPERATION_NOT_FOUND


@pytest.mark.asyncio
async def test_health_and_docs(client):
    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"

    docs = await client.get(f"{settings.API_PREFIX}/docs")
    assert docs.status_code == 200
    body = docs.json()
    assert body["id"] == "s3service"
    assert "semantic-actions" in body["capabilities"]
    assert ("POST", ACTION_URL) in {(e["method"], e["path"]) for e in body["endpoints"]}


@pytest.mark.asyncio
async def test_api_key_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "s3cret-key")
    action = make_action("SearchAction", target=make_target())

    resp = await client.post(ACTION_URL, json=action)
    assert resp.status_code == 401
    assert resp.json()["code"] == BusinessCode.UNAUTHORIZED

    resp = await client.post(ACTION_URL, json=action, headers={"X-API-Key": "wrong"})
    assert resp.status_code == 401

    resp = await client.post(ACTION_URL, json=action, headers={"X-API-Key": "s3cret-key"})
    assert resp.status_code == 200

    resp = await client.post(ACTION_URL, json=action, headers={"Authorization": "Bearer s3cret-key"})
    assert resp.status_code == 200

    # health stays open
    assert (await client.get("/health")).status_code == 200


@pytest.mark.asyncio
async def test_state_routes_require_api_key_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "s3cret-key")

    assert (await client.get(f"{settings.API_PREFIX}/state")).status_code == 401
    assert (await client.get(f"{settings.API_PREFIX}/state/op-1")).status_code == 401

    resp = await client.get(f"{settings.API_PREFIX}/state", headers={"X-API-Key": "s3cret-key"})
    assert resp.status_code == 200
