"""
操作状态路由 - 最近执行的动作
"""
from fastapi import APIRouter, Depends

from api.dependencies import get_operation_tracker, require_api_key
from application.dto import OperationRecordDTO
from core.response import Response as ApiResponse, success_response
from domain.common.exceptions import OperationNotFoundException
from infrastructure.state.operation_tracker import OperationRecord, OperationTracker

router = APIRouter(
    prefix="/state",
    tags=["State"],
    dependencies=[Depends(require_api_key)],
)


def _to_dto(record: OperationRecord) -> OperationRecordDTO:
    return OperationRecordDTO(
        operation_id=record.operation_id,
        action_type=record.action_type,
        status=record.status.value,
        started_at=record.started_at,
        ended_at=record.ended_at,
        error=record.error,
    )


@router.get("", summary="最近操作列表", response_model=ApiResponse[list[OperationRecordDTO]])
async def list_operations(tracker: OperationTracker = Depends(get_operation_tracker)):
    return success_response(data=[_to_dto(r) for r in tracker.list()])


@router.get("/{operation_id}", summary="查询单个操作", response_model=ApiResponse[OperationRecordDTO])
async def get_operation(
    operation_id: str,
    tracker: OperationTracker = Depends(get_operation_tracker),
):
    record = tracker.get(operation_id)
    if record is None:
        raise OperationNotFoundException(operation_id)
    return success_response(data=_to_dto(record))
