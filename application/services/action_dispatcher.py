"""Action dispatcher: routes a parsed semantic action to its handler.

Each handler resolves credentials, opens a store for them and performs
exactly one store call. Business failures are caught here and written to
the envelope as FailedActionStatus; request errors (malformed payload,
unsupported type) propagate as exceptions and never reach a handler.
"""
from __future__ import annotations

import os
import uuid
from contextlib import nullcontext
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Union

import aiofiles

from application.dto import ObjectDescriptorDTO, SemanticActionDTO
from application.ports.object_store import (
    ObjectStoreFactory,
    ObjectStorePort,
    S3Credentials,
)
from application.ports.operation_state import OperationRecorder
from application.services.action_parser import parse_action
from application.services.credential_resolver import resolve_credentials
from application.services.response_formatter import format_timestamp, render_envelope
from application.utils.storage import guess_content_type, key_basename, s3_uri
from core.logging_config import get_logger
from domain.action import (
    LIST_BUCKETS_QUERY,
    ActionError,
    ActionExecution,
    ActionKind,
    CredentialResolutionFailure,
    DeleteFailure,
    DownloadFailure,
    ListFailure,
    LocalWriteFailure,
    MissingContentPath,
    MissingObjectKey,
    UploadFailure,
)
from domain.common.exceptions import UnsupportedActionTypeException

logger = get_logger(__name__)

ActionResult = Union[dict[str, Any], list[dict[str, Any]]]
ActionHandler = Callable[[SemanticActionDTO], Awaitable[ActionResult]]


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value and value.strip():
            return value
    return None


class ActionDispatcher:
    """Single dispatch point over the four action kinds.

    Collaborators are injected so the dispatcher can run without a live
    store, tracer or state tracker:

    - store_factory: opens an ObjectStorePort for a set of credentials
    - tracker: optional OperationRecorder for the state routes
    - tracer: optional OpenTelemetry-compatible tracer (start_as_current_span)
    """

    def __init__(
        self,
        store_factory: ObjectStoreFactory,
        *,
        tracker: Optional[OperationRecorder] = None,
        tracer: Any = None,
        download_dir: str = "/tmp",
        default_region: str = "us-east-1",
    ) -> None:
        self._store_factory = store_factory
        self._tracker = tracker
        self._tracer = tracer
        self._download_dir = download_dir
        self._default_region = default_region
        self._handlers: dict[ActionKind, ActionHandler] = {
            ActionKind.UPLOAD: self._upload,
            ActionKind.DOWNLOAD: self._download,
            ActionKind.DELETE: self._delete,
            ActionKind.LIST: self._list,
        }
        unhandled = set(ActionKind) - set(self._handlers)
        if unhandled:
            raise RuntimeError(f"no handler for action kinds: {sorted(k.value for k in unhandled)}")

    async def execute(self, raw: Union[bytes, str]) -> dict[str, Any]:
        """Parse a JSON-LD payload and dispatch it."""
        return await self.dispatch(parse_action(raw))

    async def dispatch(self, action: SemanticActionDTO) -> dict[str, Any]:
        """Run the handler for action.kind and return the rendered envelope."""
        handler = self._handlers.get(getattr(action, "kind", None))
        if handler is None:
            raise UnsupportedActionTypeException(str(action.type))

        execution = ActionExecution(
            kind=action.kind,
            operation_id=action.identifier or str(uuid.uuid4()),
        )
        execution.start()
        if self._tracker is not None:
            self._tracker.record_started(execution, action_type=action.kind.value)

        with self._span(action, execution):
            try:
                result = await handler(action)
            except ActionError as err:
                execution.fail(err)
                logger.warning(
                    "action_failed",
                    action_type=action.kind.value,
                    operation_id=execution.operation_id,
                    error_kind=err.kind,
                    error=str(err),
                )
            except Exception as exc:
                execution.fail(ActionError(cause=exc))
                logger.error(
                    "action_crashed",
                    action_type=action.kind.value,
                    operation_id=execution.operation_id,
                    exc_info=True,
                )
            else:
                execution.complete(result)
                logger.info(
                    "action_completed",
                    action_type=action.kind.value,
                    operation_id=execution.operation_id,
                )

        if self._tracker is not None:
            self._tracker.record_finished(execution)
        return render_envelope(action, execution)

    def reject(self, action: SemanticActionDTO, error: ActionError) -> dict[str, Any]:
        """Record and render a failed envelope without running a handler."""
        execution = ActionExecution(
            kind=action.kind,
            operation_id=action.identifier or str(uuid.uuid4()),
        )
        execution.start()
        if self._tracker is not None:
            self._tracker.record_started(execution, action_type=action.kind.value)
        execution.fail(error)
        logger.warning(
            "action_rejected",
            action_type=action.kind.value,
            operation_id=execution.operation_id,
            error_kind=error.kind,
        )
        if self._tracker is not None:
            self._tracker.record_finished(execution)
        return render_envelope(action, execution)

    def _span(self, action: SemanticActionDTO, execution: ActionExecution):
        if self._tracer is None:
            return nullcontext()
        return self._tracer.start_as_current_span(
            f"s3service.{action.kind.value}",
            attributes={
                "action.type": action.kind.value,
                "action.operation_id": execution.operation_id,
            },
        )

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------
    def _resolve(self, action: SemanticActionDTO, *, require_bucket: bool = True) -> S3Credentials:
        return resolve_credentials(
            action.target,
            default_region=self._default_region,
            require_bucket=require_bucket,
        )

    async def _open_store(self, credentials: S3Credentials) -> ObjectStorePort:
        try:
            return await self._store_factory.open(credentials)
        except ActionError:
            raise
        except Exception as exc:
            raise CredentialResolutionFailure(cause=exc) from exc

    @staticmethod
    def _object_key(obj: ObjectDescriptorDTO) -> str:
        key = _first(obj.identifier, obj.name)
        if not key:
            raise MissingObjectKey()
        return key

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    async def _upload(self, action: SemanticActionDTO) -> ActionResult:
        credentials = self._resolve(action)
        obj = action.object or ObjectDescriptorDTO()

        file_path = _first(obj.content_url)
        if not file_path:
            raise MissingContentPath()

        # identifier, then targetUrl, then the local file name
        key = _first(obj.identifier, action.target_url) or os.path.basename(file_path)
        encoding_format = obj.encoding_format or guess_content_type(file_path)

        try:
            async with aiofiles.open(file_path, "rb") as f:
                data = await f.read()
        except (OSError, ValueError) as exc:
            raise UploadFailure(f"cannot read {file_path}", cause=exc) from exc

        store = await self._open_store(credentials)
        try:
            stored = await store.put_object(key, data, content_type=encoding_format)
        except Exception as exc:
            raise UploadFailure(cause=exc) from exc

        return {
            "@type": "MediaObject",
            "identifier": key,
            "name": os.path.basename(file_path),
            "contentUrl": s3_uri(credentials.bucket, key),
            "contentSize": stored.size,
            "encodingFormat": encoding_format,
            "uploadDate": format_timestamp(datetime.now(timezone.utc)),
        }

    async def _download(self, action: SemanticActionDTO) -> ActionResult:
        credentials = self._resolve(action)
        obj = action.object or ObjectDescriptorDTO()
        key = self._object_key(obj)
        local_path = _first(obj.content_url) or os.path.join(self._download_dir, key_basename(key))

        store = await self._open_store(credentials)
        try:
            data = await store.get_object(key)
        except Exception as exc:
            raise DownloadFailure(cause=exc) from exc

        try:
            async with aiofiles.open(local_path, "wb") as f:
                await f.write(data)
        except (OSError, ValueError) as exc:
            raise LocalWriteFailure(local_path, cause=exc) from exc

        return {
            "@type": "MediaObject",
            "identifier": key,
            "name": key_basename(key),
            "contentUrl": local_path,
            "contentSize": len(data),
            "encodingFormat": obj.encoding_format or guess_content_type(key),
        }

    async def _delete(self, action: SemanticActionDTO) -> ActionResult:
        credentials = self._resolve(action)
        key = self._object_key(action.object or ObjectDescriptorDTO())

        store = await self._open_store(credentials)
        # no existence check: deleting a missing key follows the store's semantics
        try:
            await store.delete_object(key)
        except Exception as exc:
            raise DeleteFailure(cause=exc) from exc

        return {
            "@type": "MediaObject",
            "identifier": key,
            "name": key_basename(key),
            "contentUrl": s3_uri(credentials.bucket, key),
        }

    async def _list(self, action: SemanticActionDTO) -> ActionResult:
        query = action.query if isinstance(action.query, str) else ""
        if query == LIST_BUCKETS_QUERY:
            return await self._list_buckets(action)

        credentials = self._resolve(action)
        store = await self._open_store(credentials)
        try:
            objects = await store.list_objects(prefix=query)
        except Exception as exc:
            raise ListFailure(cause=exc) from exc

        return [
            {
                "@type": "MediaObject",
                "identifier": obj.key,
                "name": key_basename(obj.key),
                "contentUrl": s3_uri(credentials.bucket, obj.key),
                "contentSize": obj.size,
                "uploadDate": format_timestamp(obj.last_modified),
            }
            for obj in objects
        ]

    async def _list_buckets(self, action: SemanticActionDTO) -> ActionResult:
        credentials = self._resolve(action, require_bucket=False)
        store = await self._open_store(credentials)
        try:
            buckets = await store.list_buckets()
        except Exception as exc:
            raise ListFailure(cause=exc, summary="Failed to list buckets") from exc

        return [
            {
                "@type": "DataCatalog",
                "identifier": bucket.name,
                "name": bucket.name,
                "dateCreated": format_timestamp(bucket.created_at),
            }
            for bucket in buckets
        ]
