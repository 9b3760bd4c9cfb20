"""In-process operation state tracker.

Keeps the most recent action executions so that callers can poll
`/state/{operation_id}`. Only this process's history is visible; the
oldest record is evicted once the configured capacity is reached.
"""
from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from application.ports.operation_state import OperationRecorder
from core.logging_config import get_logger
from domain.action import ActionExecution, ActionFailed, ActionStatus


logger = get_logger(__name__)


@dataclass
class OperationRecord:
    operation_id: str
    action_type: str
    status: ActionStatus
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    error: Optional[str] = None


class OperationTracker(OperationRecorder):
    """Bounded, insertion-ordered store of operation records."""

    def __init__(self, max_operations: int = 100) -> None:
        self.max_operations = max(1, int(max_operations))
        # operation_id -> record, oldest first
        self._records: "OrderedDict[str, OperationRecord]" = OrderedDict()
        self._lock = threading.Lock()

    def record_started(self, execution: ActionExecution, *, action_type: str) -> None:
        record = OperationRecord(
            operation_id=execution.operation_id,
            action_type=action_type,
            status=execution.status,
            started_at=execution.started_at,
        )
        with self._lock:
            # a reused identifier replaces the earlier record and moves to the end
            self._records.pop(execution.operation_id, None)
            self._records[execution.operation_id] = record
            while len(self._records) > self.max_operations:
                evicted, _ = self._records.popitem(last=False)
                logger.debug("operation_evicted", operation_id=evicted)

    def record_finished(self, execution: ActionExecution) -> None:
        with self._lock:
            record = self._records.get(execution.operation_id)
            # a later run with the same identifier owns the record now
            if record is None or record.started_at != execution.started_at:
                return
            record.status = execution.status
            record.ended_at = execution.ended_at
            if isinstance(execution.outcome, ActionFailed):
                record.error = execution.outcome.message

    def get(self, operation_id: str) -> Optional[OperationRecord]:
        with self._lock:
            return self._records.get(operation_id)

    def list(self) -> list[OperationRecord]:
        """Newest first."""
        with self._lock:
            return list(reversed(self._records.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
