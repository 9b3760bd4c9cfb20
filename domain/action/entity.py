"""Domain model for a single semantic action execution."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from .errors import ActionError

# REST list-buckets requests travel as a SearchAction carrying this query
LIST_BUCKETS_QUERY = "list-buckets"


class ActionKind(str, Enum):
    """Supported action discriminators (`@type`), one per handler."""

    UPLOAD = "CreateAction"
    DOWNLOAD = "DownloadAction"
    DELETE = "DeleteAction"
    LIST = "SearchAction"


class ActionStatus(str, Enum):
    POTENTIAL = "PotentialActionStatus"
    COMPLETED = "CompletedActionStatus"
    FAILED = "FailedActionStatus"


@dataclass(frozen=True)
class ActionCompleted:
    """Terminal outcome carrying the affected object descriptor(s)."""

    result: Union[dict[str, Any], list[dict[str, Any]]]
    status: ActionStatus = field(default=ActionStatus.COMPLETED, init=False)


@dataclass(frozen=True)
class ActionFailed:
    """Terminal outcome carrying the error kind and human-readable message."""

    kind: str
    message: str
    status: ActionStatus = field(default=ActionStatus.FAILED, init=False)

    @classmethod
    def from_error(cls, error: ActionError) -> "ActionFailed":
        return cls(kind=error.kind, message=str(error))


ActionOutcome = Union[ActionCompleted, ActionFailed]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ActionExecution:
    """Lifecycle of one action: Potential, then exactly one terminal outcome."""

    kind: ActionKind
    operation_id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    outcome: Optional[ActionOutcome] = None

    @property
    def status(self) -> ActionStatus:
        if self.outcome is None:
            return ActionStatus.POTENTIAL
        return self.outcome.status

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = _utcnow()

    def complete(self, result: Union[dict[str, Any], list[dict[str, Any]]]) -> ActionCompleted:
        outcome = ActionCompleted(result=result)
        self._finish(outcome)
        return outcome

    def fail(self, error: ActionError) -> ActionFailed:
        outcome = ActionFailed.from_error(error)
        self._finish(outcome)
        return outcome

    def _finish(self, outcome: ActionOutcome) -> None:
        if self.outcome is not None:
            raise RuntimeError(
                f"action {self.operation_id} already finished with {self.outcome.status.value}"
            )
        self.start()
        self.outcome = outcome
        self.ended_at = _utcnow()
