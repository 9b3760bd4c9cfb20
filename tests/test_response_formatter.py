from datetime import datetime, timedelta, timezone

import pytest

from application.services.action_parser import parse_action
from application.services.response_formatter import format_timestamp, render_envelope
from domain.action import ActionExecution, ActionKind, ListFailure


def execution():
    return ActionExecution(kind=ActionKind.LIST, operation_id="op-1")


def test_format_timestamp_uses_utc_z():
    assert format_timestamp(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)) == "2024-05-01T12:00:00Z"
    cest = timezone(timedelta(hours=2))
    assert format_timestamp(datetime(2024, 5, 1, 14, 0, tzinfo=cest)) == "2024-05-01T12:00:00Z"
    assert format_timestamp(datetime(2024, 5, 1, 12, 0)) == "2024-05-01T12:00:00Z"
    assert format_timestamp(None) is None


def test_started_execution_is_potential():
    action = parse_action('{"@type": "SearchAction"}')
    ex = execution()
    ex.start()
    env = render_envelope(action, ex)
    assert env["actionStatus"] == "PotentialActionStatus"
    assert "startTime" in env
    assert "endTime" not in env
    assert "result" not in env and "error" not in env


def test_completed_execution_has_result_only():
    action = parse_action('{"@type": "SearchAction"}')
    ex = execution()
    ex.start()
    ex.complete([{"@type": "MediaObject", "identifier": "a"}])
    env = render_envelope(action, ex)
    assert env["actionStatus"] == "CompletedActionStatus"
    assert env["result"] == [{"@type": "MediaObject", "identifier": "a"}]
    assert "error" not in env
    assert env["startTime"] <= env["endTime"]


def test_failed_execution_has_error_only():
    action = parse_action('{"@type": "SearchAction"}')
    ex = execution()
    ex.start()
    ex.fail(ListFailure(cause=RuntimeError("AccessDenied")))
    env = render_envelope(action, ex)
    assert env["actionStatus"] == "FailedActionStatus"
    assert env["error"] == {
        "@type": "Thing",
        "name": "ListFailure",
        "description": "Failed to list objects: AccessDenied",
    }
    assert "result" not in env


def test_outcome_is_set_once():
    ex = execution()
    ex.complete([])
    with pytest.raises(RuntimeError):
        ex.fail(ListFailure())
    assert ex.status.value == "CompletedActionStatus"
