"""Storage client configuration models."""
from typing import Optional
from pydantic import BaseModel


class S3ClientConfig(BaseModel):
    """Per-action S3 client configuration.

    Credentials come from the request's target descriptor; only the
    client knobs below come from service settings.
    """
    endpoint: Optional[str] = None
    region: str = "us-east-1"
    access_key_id: str
    secret_access_key: str
    bucket: Optional[str] = None

    addressing_style: str = "path"
    signature_version: str = "s3v4"
