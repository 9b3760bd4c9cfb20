"""Application-owned object store port abstraction (hexagonal architecture).

Defines the minimal methods the action handlers need so that the
application layer does not depend on boto3 or any infrastructure detail.
A store is opened per action from the caller-supplied credentials.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class S3Credentials:
    endpoint_url: str
    region: str
    access_key: str
    secret_key: str
    bucket: Optional[str] = None

    def __repr__(self) -> str:
        # never leak the secret through logs or tracebacks
        return (
            f"S3Credentials(endpoint_url={self.endpoint_url!r}, region={self.region!r}, "
            f"access_key={self.access_key[:4]!r}..., bucket={self.bucket!r})"
        )


@dataclass
class StoredObject:
    key: str
    size: int
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass
class BucketSummary:
    name: str
    created_at: Optional[datetime] = None


@runtime_checkable
class ObjectStorePort(Protocol):
    @property
    def bucket(self) -> Optional[str]: ...

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> StoredObject: ...

    async def get_object(self, key: str) -> bytes: ...

    async def delete_object(self, key: str) -> None: ...

    async def list_objects(self, prefix: str = "") -> list[StoredObject]: ...

    async def list_buckets(self) -> list[BucketSummary]: ...


@runtime_checkable
class ObjectStoreFactory(Protocol):
    async def open(self, credentials: S3Credentials) -> ObjectStorePort: ...
