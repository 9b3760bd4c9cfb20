"""Registry service client: self-registration at startup, removal at shutdown.

Registration is best effort. Failures are logged and never stop the
service from starting or shutting down.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx

from core.config import Settings
from core.logging_config import get_logger
from .base import APIError, BaseAPIClient

logger = get_logger(__name__)

CAPABILITIES = ["object-storage", "s3", "semantic-actions", "state-tracking"]


def build_registration(settings: Settings) -> dict[str, Any]:
    """Service descriptor sent to the registry."""
    base = f"http://localhost:{settings.PORT}"
    return {
        "id": settings.SERVICE_ID,
        "name": settings.PROJECT_NAME,
        "description": settings.DESCRIPTION,
        "port": settings.PORT,
        "directory": settings.registry.directory,
        "binary": settings.registry.binary,
        "version": settings.API_VERSION,
        "capabilities": list(CAPABILITIES),
        "apiVersions": [
            {
                "version": settings.API_VERSION,
                "url": f"{base}/{settings.API_VERSION}",
                "documentation": f"{base}{settings.API_PREFIX}/docs",
                "isDefault": True,
                "status": "stable",
                "capabilities": ["object-storage", "s3", "semantic-actions"],
            }
        ],
    }


class RegistryClient(BaseAPIClient):
    """Client for the registry service's `/v1/api/services` resource."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            transport=transport,
        )

    async def register(self, payload: dict[str, Any]) -> bool:
        try:
            await self.post("v1/api/services", json_data=payload)
        except APIError as exc:
            logger.error("registry_register_failed", service_id=payload.get("id"), error=str(exc))
            return False
        logger.info("registry_registered", service_id=payload.get("id"), registry=self.base_url)
        return True

    async def unregister(self, service_id: str) -> bool:
        try:
            await self.delete(f"v1/api/services/{service_id}")
        except APIError as exc:
            logger.error("registry_unregister_failed", service_id=service_id, error=str(exc))
            return False
        logger.info("registry_unregistered", service_id=service_id)
        return True
