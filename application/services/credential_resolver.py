"""Credential resolver: target descriptor -> S3Credentials.

Values are taken literally. Placeholders such as ${S3_SECRET} must be
expanded by the caller before submission; no environment lookups here.
"""
from __future__ import annotations

from typing import Any, Optional

from application.dto import TargetDescriptorDTO
from application.ports.object_store import S3Credentials
from domain.action import MissingCredentials

# canonical field -> accepted additionalProperty names (compared lowercased)
_ALIASES: dict[str, tuple[str, ...]] = {
    "url": ("url", "endpoint", "endpointurl", "endpoint_url", "serviceurl"),
    "region": ("region", "regionname", "region_name"),
    "accessKey": ("accesskey", "accesskeyid", "access_key", "access_key_id", "aws_access_key_id"),
    "secretKey": ("secretkey", "secretaccesskey", "secret_key", "secret_access_key", "aws_secret_access_key"),
    "bucket": ("bucket", "bucketname", "bucket_name"),
}


def _property_map(target: TargetDescriptorDTO) -> dict[str, Any]:
    props: dict[str, Any] = {}
    for prop in target.additional_property:
        if not prop.name:
            continue
        props.setdefault(prop.name.strip().lower(), prop.value)
    return props


def _lookup(props: dict[str, Any], field: str) -> Optional[str]:
    for alias in _ALIASES[field]:
        value = props.get(alias)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def resolve_credentials(
    target: Optional[TargetDescriptorDTO],
    *,
    default_region: str = "us-east-1",
    require_bucket: bool = True,
) -> S3Credentials:
    """Extract endpoint, region, keys and bucket name from the target.

    The property list wins; the descriptor's own `url` and
    `identifier`/`name` are fallbacks for endpoint and bucket.

    Raises:
        MissingCredentials: listing every required field that is absent
    """
    if target is None:
        missing = ["url", "accessKey", "secretKey"]
        if require_bucket:
            missing.append("bucket")
        raise MissingCredentials(missing)

    props = _property_map(target)
    endpoint = _first(_lookup(props, "url"), target.url)
    region = _first(_lookup(props, "region"), default_region)
    access_key = _lookup(props, "accessKey")
    secret_key = _lookup(props, "secretKey")
    bucket = _first(_lookup(props, "bucket"), target.identifier, target.name)

    missing = []
    if not endpoint:
        missing.append("url")
    if not access_key:
        missing.append("accessKey")
    if not secret_key:
        missing.append("secretKey")
    if require_bucket and not bucket:
        missing.append("bucket")
    if missing:
        raise MissingCredentials(missing)

    return S3Credentials(
        endpoint_url=endpoint,
        region=region,
        access_key=access_key,
        secret_key=secret_key,
        bucket=bucket,
    )
