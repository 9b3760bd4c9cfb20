"""Semantic action domain exports."""
from .entity import (
    LIST_BUCKETS_QUERY,
    ActionCompleted,
    ActionExecution,
    ActionFailed,
    ActionKind,
    ActionOutcome,
    ActionStatus,
)
from .errors import (
    ActionError,
    CredentialResolutionFailure,
    DeleteFailure,
    DownloadFailure,
    ListFailure,
    LocalWriteFailure,
    MissingContentPath,
    MissingCredentials,
    MissingObjectKey,
    UnsupportedOperation,
    UploadFailure,
)

__all__ = [
    "LIST_BUCKETS_QUERY",
    "ActionCompleted",
    "ActionExecution",
    "ActionFailed",
    "ActionKind",
    "ActionOutcome",
    "ActionStatus",
    "ActionError",
    "CredentialResolutionFailure",
    "DeleteFailure",
    "DownloadFailure",
    "ListFailure",
    "LocalWriteFailure",
    "MissingContentPath",
    "MissingCredentials",
    "MissingObjectKey",
    "UnsupportedOperation",
    "UploadFailure",
]
