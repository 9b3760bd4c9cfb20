"""Action parser: raw request bytes -> typed semantic action variant.

Only structure is checked here. Business fields (credentials, keys,
paths) are left to the handlers so that their failures are reported
in-band on the envelope.
"""
from __future__ import annotations

import json
from typing import Any, Union

from pydantic import ValidationError

from application.dto import ACTION_MODELS, SemanticActionDTO
from domain.action import ActionKind
from domain.common.exceptions import (
    MalformedPayloadException,
    UnsupportedActionTypeException,
)

SUPPORTED_ACTION_TYPES = [kind.value for kind in ActionKind]


def decode_payload(raw: Union[bytes, str]) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedPayloadException(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedPayloadException("payload must be a JSON object")
    return data


def resolve_kind(data: dict[str, Any]) -> ActionKind:
    action_type = data.get("@type")
    if action_type is None or action_type == "":
        raise MalformedPayloadException("missing @type")
    if not isinstance(action_type, str):
        raise MalformedPayloadException("@type must be a string")
    try:
        return ActionKind(action_type)
    except ValueError:
        raise UnsupportedActionTypeException(action_type, SUPPORTED_ACTION_TYPES) from None


def parse_action(raw: Union[bytes, str]) -> SemanticActionDTO:
    """Decode a JSON-LD envelope into its action variant.

    Raises:
        MalformedPayloadException: not JSON, not an object, no @type, or a
            nested node with the wrong shape
        UnsupportedActionTypeException: @type is not one of the four kinds
    """
    data = decode_payload(raw)
    kind = resolve_kind(data)
    model = ACTION_MODELS[kind]
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise MalformedPayloadException(
            f"{loc}: {first.get('msg', 'invalid value')}" if loc else str(exc),
            details={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
        ) from exc
