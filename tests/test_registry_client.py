import json

import httpx
import pytest

from core.config import settings
from infrastructure.external.api_clients import RegistryClient, build_registration


def test_registration_payload_describes_service():
    payload = build_registration(settings)
    assert payload["id"] == settings.SERVICE_ID
    assert payload["port"] == settings.PORT
    assert "object-storage" in payload["capabilities"]
    assert payload["apiVersions"][0]["documentation"].endswith(f"{settings.API_PREFIX}/docs")


@pytest.mark.asyncio
async def test_register_and_unregister():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        return httpx.Response(200, json={"ok": True})

    async with RegistryClient("http://registry.test/", transport=httpx.MockTransport(handler)) as client:
        assert await client.register({"id": "s3service"}) is True
        assert await client.unregister("s3service") is True

    assert seen[0][0:2] == ("POST", "/v1/api/services")
    assert json.loads(seen[0][2]) == {"id": "s3service"}
    assert seen[1][0:2] == ("DELETE", "/v1/api/services/s3service")


@pytest.mark.asyncio
async def test_failures_are_reported_not_raised():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        return httpx.Response(503, json={"message": "down"})

    client = RegistryClient("http://registry.test", max_retries=1, transport=httpx.MockTransport(handler))
    client.retry_delay = 0.01
    try:
        assert await client.register({"id": "s3service"}) is False
    finally:
        await client.close()
    assert attempts == ["POST", "POST"]


@pytest.mark.asyncio
async def test_client_errors_are_not_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        return httpx.Response(404, json={"detail": "unknown service"})

    async with RegistryClient("http://registry.test", transport=httpx.MockTransport(handler)) as client:
        assert await client.unregister("s3service") is False
    assert attempts == ["DELETE"]
