"""REST adapter: convenience routes -> equivalent JSON-LD envelopes.

Nothing here talks to a store. Every route builds the envelope a semantic
client would have sent and runs it through the dispatcher, so REST and
semantic callers see the same handlers and the same envelope shapes.
"""
from __future__ import annotations

import base64
import binascii
import json
import os
from typing import Any, Optional

import aiofiles
import aiofiles.tempfile

from application.services.action_dispatcher import ActionDispatcher
from application.services.action_parser import parse_action
from application.utils.storage import key_basename
from core.config import StorageSettings
from domain.action import LIST_BUCKETS_QUERY, ActionKind, UnsupportedOperation
from domain.common.exceptions import InvalidParameterException, MissingParameterException

SCHEMA_CONTEXT = "https://schema.org"


def _property(name: str, value: Optional[str]) -> dict[str, Any]:
    return {"@type": "PropertyValue", "name": name, "value": value}


def decode_content(content: str) -> bytes:
    """Strict base64 decode; anything else is a request error."""
    try:
        return base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidParameterException("content", "must be base64 encoded") from exc


class RestActionAdapter:
    """Builds envelopes for the REST routes against the configured store."""

    def __init__(self, dispatcher: ActionDispatcher, storage: StorageSettings):
        self._dispatcher = dispatcher
        self._storage = storage

    def build_target(self, bucket: Optional[str] = None) -> dict[str, Any]:
        """Target descriptor for the default store; `bucket` overrides its bucket.

        Unset settings are left out so the dispatcher reports them as
        missing credentials on the envelope.
        """
        storage = self._storage
        bucket_name = bucket or storage.bucket
        props = [
            _property("url", storage.endpoint),
            _property("region", storage.region),
            _property("accessKey", storage.access_key_id),
            _property("secretKey", storage.secret_access_key),
            _property("bucket", bucket_name),
        ]
        target: dict[str, Any] = {
            "@type": "DataCatalog",
            "additionalProperty": [p for p in props if p["value"]],
        }
        if bucket_name:
            target["identifier"] = bucket_name
        return target

    def _envelope(self, kind: ActionKind, **fields: Any) -> dict[str, Any]:
        envelope = {"@context": SCHEMA_CONTEXT, "@type": kind.value}
        envelope.update({k: v for k, v in fields.items() if v is not None})
        return envelope

    async def _run(self, envelope: dict[str, Any]) -> dict[str, Any]:
        return await self._dispatcher.execute(json.dumps(envelope))

    async def upload_object(
        self,
        key: Optional[str],
        content: Optional[str],
        *,
        bucket: Optional[str] = None,
        encoding_format: Optional[str] = None,
    ) -> dict[str, Any]:
        if not key:
            raise MissingParameterException("key")
        if not content:
            raise MissingParameterException("content")
        data = decode_content(content)

        # temp dir is removed, with the file, once the action has finished
        async with aiofiles.tempfile.TemporaryDirectory(prefix="s3service-") as tmpdir:
            path = os.path.join(tmpdir, key_basename(key))
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
            obj: dict[str, Any] = {"@type": "MediaObject", "identifier": key, "contentUrl": path}
            if encoding_format:
                obj["encodingFormat"] = encoding_format
            envelope = self._envelope(
                ActionKind.UPLOAD,
                object=obj,
                target=self.build_target(bucket),
            )
            return await self._run(envelope)

    async def get_object(self, key: str, *, bucket: Optional[str] = None) -> dict[str, Any]:
        if not key:
            raise MissingParameterException("key")
        envelope = self._envelope(
            ActionKind.LIST,
            object={"@type": "MediaObject", "identifier": key},
            query=key,
            target=self.build_target(bucket),
        )
        return await self._run(envelope)

    async def delete_object(self, key: str, *, bucket: Optional[str] = None) -> dict[str, Any]:
        if not key:
            raise MissingParameterException("key")
        envelope = self._envelope(
            ActionKind.DELETE,
            object={"@type": "MediaObject", "identifier": key},
            target=self.build_target(bucket),
        )
        return await self._run(envelope)

    async def list_buckets(self) -> dict[str, Any]:
        envelope = self._envelope(
            ActionKind.LIST,
            query=LIST_BUCKETS_QUERY,
            target=self.build_target(),
        )
        return await self._run(envelope)

    async def create_bucket(self, name: Optional[str]) -> dict[str, Any]:
        """Bucket creation is not offered; the envelope comes back Failed."""
        if not name:
            raise MissingParameterException("name")
        envelope = self._envelope(
            ActionKind.UPLOAD,
            object={"@type": "DataCatalog", "identifier": name, "name": name},
            target=self.build_target(name),
        )
        action = parse_action(json.dumps(envelope))
        return self._dispatcher.reject(
            action, UnsupportedOperation(summary="Bucket creation is not supported")
        )
