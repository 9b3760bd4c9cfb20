import io
from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError

from infrastructure.adapters.storage_port import S3ObjectStoreAdapter
from infrastructure.external.storage import (
    ConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    S3ClientConfig,
    S3Provider,
    StorageError,
)


class FakeS3Client:
    """Mimics the subset of the boto3 S3 client the provider calls."""

    def __init__(self):
        self.calls = []
        self.objects = {}
        self.truncated = False
        self.error = None

    def _record(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error

    def put_object(self, **kwargs):
        self._record("put_object", **kwargs)
        self.objects[kwargs["Key"]] = kwargs["Body"]
        return {"ETag": '"abc123"'}

    def get_object(self, **kwargs):
        self._record("get_object", **kwargs)
        return {"Body": io.BytesIO(self.objects[kwargs["Key"]])}

    def delete_object(self, **kwargs):
        self._record("delete_object", **kwargs)
        self.objects.pop(kwargs["Key"], None)
        return {}

    def list_objects_v2(self, **kwargs):
        self._record("list_objects_v2", **kwargs)
        prefix = kwargs.get("Prefix", "")
        return {
            "Contents": [
                {"Key": k, "Size": len(v), "ETag": '"e"', "LastModified": datetime(2024, 1, 1, tzinfo=timezone.utc)}
                for k, v in sorted(self.objects.items())
                if k.startswith(prefix)
            ],
            "IsTruncated": self.truncated,
        }

    def list_buckets(self):
        self._record("list_buckets")
        return {"Buckets": [{"Name": "media", "CreationDate": datetime(2023, 6, 1, tzinfo=timezone.utc)}]}


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "Op")


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def provider(s3_client):
    config = S3ClientConfig(
        endpoint="http://minio:9000",
        region="us-east-1",
        access_key_id="AK",
        secret_access_key="SK",
        bucket="media",
    )
    return S3Provider(s3_client, config)


@pytest.mark.asyncio
async def test_upload_sends_one_put_with_content_type(provider, s3_client):
    result = await provider.upload(b"data", "a/b.txt", content_type="text/plain")
    assert result.etag == "abc123"
    assert result.size == 4
    assert s3_client.calls == [(
        "put_object",
        {"Bucket": "media", "Key": "a/b.txt", "Body": b"data", "ContentType": "text/plain"},
    )]


@pytest.mark.asyncio
async def test_download_reads_body(provider, s3_client):
    s3_client.objects["k"] = b"payload"
    assert await provider.download("k") == b"payload"


@pytest.mark.asyncio
async def test_list_is_single_page_even_when_truncated(provider, s3_client):
    s3_client.objects.update({"logs/1": b"1", "logs/2": b"22", "other": b"3"})
    s3_client.truncated = True

    objects = await provider.list_objects(prefix="logs/")
    assert [o.key for o in objects] == ["logs/1", "logs/2"]
    assert [name for name, _ in s3_client.calls] == ["list_objects_v2"]
    assert s3_client.calls[0][1] == {"Bucket": "media", "Prefix": "logs/"}


@pytest.mark.asyncio
async def test_list_buckets(provider):
    buckets = await provider.list_buckets()
    assert [b.name for b in buckets] == ["media"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "code,exc_type",
    [
        ("NoSuchKey", NotFoundError),
        ("AccessDenied", PermissionDeniedError),
        ("SignatureDoesNotMatch", PermissionDeniedError),
        ("InternalError", StorageError),
    ],
)
async def test_client_errors_are_mapped(provider, s3_client, code, exc_type):
    s3_client.error = client_error(code)
    with pytest.raises(exc_type):
        await provider.download("missing")


@pytest.mark.asyncio
async def test_bucket_is_required_for_object_calls(s3_client):
    config = S3ClientConfig(access_key_id="AK", secret_access_key="SK")
    provider = S3Provider(s3_client, config)
    with pytest.raises(ConfigurationError):
        await provider.list_objects()
    assert s3_client.calls == []
    # bucket listing does not need one
    assert [b.name for b in await provider.list_buckets()] == ["media"]


@pytest.mark.asyncio
async def test_adapter_translates_models(provider, s3_client):
    adapter = S3ObjectStoreAdapter(provider)
    stored = await adapter.put_object("x.bin", b"12345", "application/octet-stream")
    assert (stored.key, stored.size, stored.etag) == ("x.bin", 5, "abc123")

    listed = await adapter.list_objects()
    assert listed[0].key == "x.bin"
    assert listed[0].last_modified == datetime(2024, 1, 1, tzinfo=timezone.utc)

    buckets = await adapter.list_buckets()
    assert buckets[0].created_at == datetime(2023, 6, 1, tzinfo=timezone.utc)
    assert adapter.bucket == "media"
