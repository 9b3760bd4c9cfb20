"""Pytest bootstrap configuration.

Provides an in-memory object store that stands in for S3, a dispatcher
wired to it, and an HTTP client against the FastAPI app.
"""
import os

# Keep tests independent of a developer's .env / shell
os.environ.pop("S3_API_KEY", None)
os.environ.pop("REGISTRYSERVICE_API_URL", None)

from datetime import datetime, timezone
from typing import Optional

import httpx
import pytest
import pytest_asyncio

from application.ports.object_store import BucketSummary, S3Credentials, StoredObject
from application.services.action_dispatcher import ActionDispatcher
from infrastructure.state.operation_tracker import OperationTracker


ENDPOINT = "http://minio.test:9000"
ACCESS_KEY = "AKIATESTKEY"
SECRET_KEY = "test-secret"
BUCKET = "test-bucket"


class FakeObjectStore:
    def __init__(self, factory: "FakeObjectStoreFactory", credentials: S3Credentials):
        self._factory = factory
        self._credentials = credentials

    @property
    def bucket(self) -> Optional[str]:
        return self._credentials.bucket

    def _objects(self) -> dict:
        return self._factory.buckets.setdefault(self._credentials.bucket, {})

    def _call(self, op: str) -> None:
        self._factory.calls.append(op)
        if op in self._factory.fail_on:
            raise RuntimeError(f"simulated {op} error")

    async def put_object(self, key, data, content_type=None):
        self._call("put_object")
        self._objects()[key] = data
        return StoredObject(key=key, size=len(data))

    async def get_object(self, key):
        self._call("get_object")
        try:
            return self._objects()[key]
        except KeyError:
            raise RuntimeError(f"NoSuchKey: {key}") from None

    async def delete_object(self, key):
        self._call("delete_object")
        self._objects().pop(key, None)

    async def list_objects(self, prefix=""):
        self._call("list_objects")
        return [
            StoredObject(key=k, size=len(v), last_modified=self._factory.now)
            for k, v in sorted(self._objects().items())
            if k.startswith(prefix)
        ]

    async def list_buckets(self):
        self._call("list_buckets")
        return [BucketSummary(name=name, created_at=self._factory.now) for name in sorted(self._factory.buckets)]


class FakeObjectStoreFactory:
    """Records every open() and store call; `fail_on` names ops that raise."""

    def __init__(self):
        self.buckets: dict = {}
        self.opened: list = []
        self.calls: list = []
        self.fail_on: set = set()
        self.fail_open = False
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    async def open(self, credentials: S3Credentials):
        self.opened.append(credentials)
        if self.fail_open:
            raise RuntimeError("invalid endpoint")
        return FakeObjectStore(self, credentials)

    def seed(self, key: str, data: bytes, bucket: str = BUCKET) -> None:
        self.buckets.setdefault(bucket, {})[key] = data


def make_target(bucket: Optional[str] = BUCKET, **overrides) -> dict:
    props = {"url": ENDPOINT, "accessKey": ACCESS_KEY, "secretKey": SECRET_KEY, "region": "eu-central-1"}
    if bucket:
        props["bucket"] = bucket
    props.update(overrides)
    return {
        "@type": "DataCatalog",
        "additionalProperty": [
            {"@type": "PropertyValue", "name": k, "value": v} for k, v in props.items() if v is not None
        ],
    }


def make_action(action_type: str, obj: Optional[dict] = None, target: Optional[dict] = None, **extra) -> dict:
    envelope = {"@context": "https://schema.org", "@type": action_type}
    if obj is not None:
        envelope["object"] = obj
    if target is not None:
        envelope["target"] = target
    envelope.update(extra)
    return envelope


@pytest.fixture
def store_factory():
    return FakeObjectStoreFactory()


@pytest.fixture
def tracker():
    return OperationTracker(max_operations=100)


@pytest.fixture
def dispatcher(store_factory, tracker, tmp_path):
    return ActionDispatcher(store_factory, tracker=tracker, download_dir=str(tmp_path))


@pytest.fixture
def app(dispatcher, tracker):
    from main import app as fastapi_app

    fastapi_app.state.dispatcher = dispatcher
    fastapi_app.state.operation_tracker = tracker
    return fastapi_app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
def default_store(monkeypatch):
    """Point the REST routes' default store at the fake credentials."""
    from core.config import settings

    monkeypatch.setattr(settings.storage, "endpoint", ENDPOINT)
    monkeypatch.setattr(settings.storage, "access_key_id", ACCESS_KEY)
    monkeypatch.setattr(settings.storage, "secret_access_key", SECRET_KEY)
    monkeypatch.setattr(settings.storage, "bucket", BUCKET)
    return settings.storage
