"""Storage data transfer objects."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class StorageObject(BaseModel):
    """Storage object metadata (one entry of a listing)."""
    key: str
    size: int
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None


class UploadResult(BaseModel):
    """Upload operation result."""
    key: str
    etag: Optional[str] = None
    size: int
    content_type: Optional[str] = None


class StorageBucket(BaseModel):
    """Bucket visible to the given credentials."""
    name: str
    creation_date: Optional[datetime] = None
