"""Business failures of a semantic action.

These never become HTTP errors. The dispatcher catches them and records a
FailedActionStatus on the envelope, so callers must inspect the envelope
rather than the HTTP status.
"""
from __future__ import annotations

from typing import Optional


class ActionError(Exception):
    """Base class; `kind` is the name rendered into the envelope error."""

    kind = "ActionError"
    summary = "Action failed"

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        cause: Optional[BaseException] = None,
        summary: Optional[str] = None,
    ):
        if summary:
            self.summary = summary
        self.detail = detail
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.summary]
        if self.detail:
            parts.append(self.detail)
        if self.cause is not None:
            parts.append(str(self.cause))
        return ": ".join(parts)


class CredentialResolutionFailure(ActionError):
    kind = "CredentialResolutionFailure"
    summary = "Failed to create S3 client"


class MissingCredentials(CredentialResolutionFailure):
    kind = "MissingCredentials"
    summary = "Failed to extract S3 credentials"

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__("missing " + ", ".join(self.missing))


class MissingObjectKey(ActionError):
    kind = "MissingObjectKey"
    summary = "Object identifier (S3 key) is required"


class MissingContentPath(ActionError):
    kind = "MissingContentPath"
    summary = "Object contentUrl (file path) is required"


class UploadFailure(ActionError):
    kind = "UploadFailure"
    summary = "Failed to upload file"


class DownloadFailure(ActionError):
    kind = "DownloadFailure"
    summary = "Failed to download file"


class LocalWriteFailure(ActionError):
    kind = "LocalWriteFailure"
    summary = "Failed to write local file"


class DeleteFailure(ActionError):
    kind = "DeleteFailure"
    summary = "Failed to delete file"


class ListFailure(ActionError):
    kind = "ListFailure"
    summary = "Failed to list objects"


class UnsupportedOperation(ActionError):
    kind = "UnsupportedOperation"
    summary = "Operation is not supported"
