"""Storage provider factory.

Builds a provider per action from the request's credentials plus the
client knobs in service settings. Nothing is cached between actions.
"""
from typing import Optional

from core.config import settings
from core.logging_config import get_logger
from .config import S3ClientConfig
from .providers.s3 import S3Provider, build_s3_provider

logger = get_logger(__name__)


def build_client_config(
    *,
    endpoint: str,
    region: str,
    access_key_id: str,
    secret_access_key: str,
    bucket: Optional[str] = None,
) -> S3ClientConfig:
    """Assemble S3ClientConfig from credentials and settings.storage."""
    s = settings.storage
    return S3ClientConfig(
        endpoint=endpoint,
        region=region,
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        bucket=bucket,
        addressing_style=s.addressing_style,
        signature_version=s.signature_version,
    )


async def create_provider(config: S3ClientConfig) -> S3Provider:
    """Create S3 provider instance for one action."""
    provider = await build_s3_provider(config)
    logger.debug(
        "storage_provider_created",
        endpoint=config.endpoint,
        bucket=config.bucket,
    )
    return provider
