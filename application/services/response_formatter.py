"""Response formatter: applies status vocabulary and timestamps to envelopes."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from application.dto import SemanticActionDTO
from domain.action import (
    ActionCompleted,
    ActionExecution,
    ActionFailed,
    ActionStatus,
)

# keys owned by the formatter; stale values sent by the caller are dropped
_OUTCOME_KEYS = ("actionStatus", "startTime", "endTime", "result", "error")


def format_timestamp(ts: Optional[datetime]) -> Optional[str]:
    """UTC ISO8601, `Z` suffix (same convention as the DTO serializer)."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def render_error(outcome: ActionFailed) -> dict[str, Any]:
    return {
        "@type": "Thing",
        "name": outcome.kind,
        "description": outcome.message,
    }


def render_envelope(action: SemanticActionDTO, execution: ActionExecution) -> dict[str, Any]:
    """Serialize the action with its outcome: result XOR error.

    A non-terminal execution renders as PotentialActionStatus with neither
    result nor error.
    """
    envelope = action.to_jsonld()
    for key in _OUTCOME_KEYS:
        envelope.pop(key, None)

    envelope["actionStatus"] = execution.status.value
    started = format_timestamp(execution.started_at)
    if started:
        envelope["startTime"] = started
    ended = format_timestamp(execution.ended_at)
    if ended:
        envelope["endTime"] = ended

    outcome = execution.outcome
    if isinstance(outcome, ActionCompleted):
        envelope["result"] = outcome.result
    elif isinstance(outcome, ActionFailed):
        envelope["error"] = render_error(outcome)
    return envelope
