"""S3-compatible storage provider implementation (AWS S3, Hetzner, MinIO)."""
from typing import Any, Optional
from functools import partial

import anyio

from core.logging_config import get_logger
from ..config import S3ClientConfig
from ..models import UploadResult, StorageObject, StorageBucket
from ..exceptions import (
    StorageError,
    NotFoundError,
    PermissionDeniedError,
    TransientError,
    ConfigurationError,
)

logger = get_logger(__name__)


class S3Provider:
    """S3 storage provider bound to one set of credentials and one bucket.

    Every method issues exactly one SDK call on the worker thread pool.
    Retries and timeouts are whatever botocore does by default.
    """

    def __init__(
        self,
        client: Any,  # boto3 S3 client
        config: S3ClientConfig
    ):
        self.client = client
        self.config = config
        self.bucket = config.bucket
        self.region = config.region

    async def upload(
        self,
        file: bytes,
        key: str,
        content_type: Optional[str] = None
    ) -> UploadResult:
        """Upload bytes to S3 under key."""
        bucket = self._require_bucket()
        try:
            extra_args = {}
            if content_type:
                extra_args["ContentType"] = content_type

            response = await anyio.to_thread.run_sync(
                partial(
                    self.client.put_object,
                    Bucket=bucket,
                    Key=key,
                    Body=file,
                    **extra_args
                )
            )
            etag = (response or {}).get("ETag", "").strip('"') or None
            logger.info("s3_object_uploaded", bucket=bucket, key=key, size=len(file))
            return UploadResult(
                key=key,
                etag=etag,
                size=len(file),
                content_type=content_type,
            )
        except Exception as e:
            self._handle_exception(e, f"upload {key}")

    async def download(self, key: str) -> bytes:
        """Download object from S3 fully into memory."""
        bucket = self._require_bucket()
        try:
            response = await anyio.to_thread.run_sync(
                partial(
                    self.client.get_object,
                    Bucket=bucket,
                    Key=key
                )
            )
            body = response["Body"]
            try:
                data = await anyio.to_thread.run_sync(body.read)
                logger.info("s3_object_downloaded", bucket=bucket, key=key, size=len(data))
                return data
            finally:
                # close the stream even if read fails
                try:
                    await anyio.to_thread.run_sync(body.close)
                except Exception as close_exc:
                    logger.debug("s3_body_close_failed", key=key, error=str(close_exc))
        except Exception as e:
            self._handle_exception(e, f"download {key}")

    async def delete(self, key: str) -> None:
        """Delete object from S3. Missing keys are not an error on S3."""
        bucket = self._require_bucket()
        try:
            await anyio.to_thread.run_sync(
                partial(
                    self.client.delete_object,
                    Bucket=bucket,
                    Key=key
                )
            )
            logger.info("s3_object_deleted", bucket=bucket, key=key)
        except Exception as e:
            self._handle_exception(e, f"delete {key}")

    async def list_objects(self, prefix: str = "") -> list[StorageObject]:
        """List one page of objects under prefix (no continuation token loop)."""
        bucket = self._require_bucket()
        try:
            args = {"Bucket": bucket}
            if prefix:
                args["Prefix"] = prefix
            response = await anyio.to_thread.run_sync(
                partial(self.client.list_objects_v2, **args)
            )

            objects = []
            for obj in response.get("Contents", []):
                objects.append(StorageObject(
                    key=obj["Key"],
                    size=obj.get("Size", 0),
                    etag=obj.get("ETag", "").strip('"') or None,
                    last_modified=obj.get("LastModified")
                ))

            if response.get("IsTruncated"):
                logger.warning(
                    "s3_listing_truncated",
                    bucket=bucket,
                    prefix=prefix,
                    returned=len(objects),
                )
            return objects

        except Exception as e:
            self._handle_exception(e, f"list objects {prefix}")

    async def list_buckets(self) -> list[StorageBucket]:
        """List buckets visible to the credentials."""
        try:
            response = await anyio.to_thread.run_sync(self.client.list_buckets)
            return [
                StorageBucket(name=b["Name"], creation_date=b.get("CreationDate"))
                for b in response.get("Buckets", [])
            ]
        except Exception as e:
            self._handle_exception(e, "list buckets")

    def _require_bucket(self) -> str:
        if not self.bucket:
            raise ConfigurationError("S3 bucket name is required")
        return self.bucket

    def _handle_exception(self, e: Exception, operation: str) -> None:
        """Map S3 exceptions to storage exceptions."""
        if isinstance(e, StorageError):
            raise e
        error_code = getattr(e, "response", {}).get("Error", {}).get("Code", "")

        if error_code in ["NoSuchKey", "NoSuchBucket", "404", "NotFound"]:
            raise NotFoundError(f"Object not found: {operation}") from e
        elif error_code in ["AccessDenied", "403", "InvalidAccessKeyId", "SignatureDoesNotMatch"]:
            raise PermissionDeniedError(f"Access denied: {operation}") from e
        elif error_code in ["RequestTimeout", "SlowDown", "ServiceUnavailable"]:
            raise TransientError(f"Transient error: {operation}: {e}") from e
        else:
            raise StorageError(f"S3 error during {operation}: {e}") from e


def _create_client(config: S3ClientConfig) -> Any:
    import boto3
    from botocore.config import Config as BotoConfig

    boto_config = BotoConfig(
        region_name=config.region,
        signature_version=config.signature_version,
        s3={"addressing_style": config.addressing_style},
    )

    client_args = {
        "service_name": "s3",
        "config": boto_config,
        "region_name": config.region,
        "aws_access_key_id": config.access_key_id,
        "aws_secret_access_key": config.secret_access_key,
    }
    if config.endpoint:
        client_args["endpoint_url"] = config.endpoint

    # Sessions are not thread-safe to share; one per client
    session = boto3.session.Session()
    return session.client(**client_args)


async def build_s3_provider(config: S3ClientConfig) -> S3Provider:
    """Build S3 storage provider.

    No connectivity check is performed: the action's own SDK call is the
    only request this layer makes against the store.

    Args:
        config: Client configuration assembled from request credentials

    Returns:
        Configured S3 provider instance
    """
    try:
        client = await anyio.to_thread.run_sync(partial(_create_client, config))
    except Exception as e:
        raise ConfigurationError(f"Failed to create S3 client: {e}") from e
    return S3Provider(client, config)
