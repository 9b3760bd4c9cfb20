"""Infrastructure adapter that implements the application ObjectStorePort
by delegating to the concrete S3Provider and translating models.
"""
from __future__ import annotations

from typing import Optional

from application.ports.object_store import (
    BucketSummary,
    ObjectStoreFactory,
    ObjectStorePort,
    S3Credentials,
    StoredObject,
)
from infrastructure.external.storage import (
    S3Provider,
    build_client_config,
    create_provider,
)


class S3ObjectStoreAdapter(ObjectStorePort):
    def __init__(self, provider: S3Provider):
        self.provider = provider

    @property
    def bucket(self) -> Optional[str]:
        return self.provider.bucket

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> StoredObject:
        result = await self.provider.upload(data, key, content_type=content_type)
        return StoredObject(
            key=getattr(result, "key", key),
            size=int(getattr(result, "size", len(data)) or 0),
            etag=getattr(result, "etag", None),
        )

    async def get_object(self, key: str) -> bytes:
        return await self.provider.download(key)

    async def delete_object(self, key: str) -> None:
        await self.provider.delete(key)

    async def list_objects(self, prefix: str = "") -> list[StoredObject]:
        objects = await self.provider.list_objects(prefix=prefix)
        return [
            StoredObject(
                key=obj.key,
                size=int(obj.size or 0),
                last_modified=obj.last_modified,
                etag=obj.etag,
            )
            for obj in objects
        ]

    async def list_buckets(self) -> list[BucketSummary]:
        buckets = await self.provider.list_buckets()
        return [BucketSummary(name=b.name, created_at=b.creation_date) for b in buckets]


class S3ObjectStoreFactory(ObjectStoreFactory):
    """Opens a fresh boto3-backed store for each action's credentials."""

    async def open(self, credentials: S3Credentials) -> ObjectStorePort:
        config = build_client_config(
            endpoint=credentials.endpoint_url,
            region=credentials.region,
            access_key_id=credentials.access_key,
            secret_access_key=credentials.secret_key,
            bucket=credentials.bucket,
        )
        provider = await create_provider(config)
        return S3ObjectStoreAdapter(provider)
