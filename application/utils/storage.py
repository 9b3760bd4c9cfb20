"""Application-level storage helpers to avoid infra coupling."""
from __future__ import annotations

import mimetypes
from pathlib import PurePosixPath


def guess_content_type(filename: str) -> str:
    """Guess content type from filename.

    Args:
        filename: File name, S3 key or local path

    Returns:
        MIME type string
    """
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"


def key_basename(key: str) -> str:
    """Last path segment of an S3 key ("a/b/c.txt" -> "c.txt").

    Keys ending in "/" (directory markers) keep their last non-empty
    segment.
    """
    name = PurePosixPath(key.rstrip("/")).name
    return name or key


def s3_uri(bucket: str, key: str) -> str:
    return f"s3://{bucket}/{key}"
