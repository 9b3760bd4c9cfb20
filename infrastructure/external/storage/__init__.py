"""Storage service entry point."""
from .config import S3ClientConfig
from .factory import build_client_config, create_provider
from .models import UploadResult, StorageObject, StorageBucket
from .exceptions import (
    StorageError,
    NotFoundError,
    PermissionDeniedError,
    TransientError,
    ConfigurationError,
)
from .providers.s3 import S3Provider

# Export public interface
__all__ = [
    # Factory
    "build_client_config",
    "create_provider",
    "S3ClientConfig",
    "S3Provider",

    # Models
    "UploadResult",
    "StorageObject",
    "StorageBucket",

    # Exceptions
    "StorageError",
    "NotFoundError",
    "PermissionDeniedError",
    "TransientError",
    "ConfigurationError",
]
