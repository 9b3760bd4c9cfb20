"""Port for recording action executions (operation-state tracking)."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.action import ActionExecution


@runtime_checkable
class OperationRecorder(Protocol):
    def record_started(self, execution: ActionExecution, *, action_type: str) -> None: ...

    def record_finished(self, execution: ActionExecution) -> None: ...
