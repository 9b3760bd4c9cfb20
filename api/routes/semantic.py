"""
语义动作路由 - JSON-LD 动作入口
"""
from fastapi import APIRouter, Depends, Request

from api.dependencies import get_dispatcher, require_api_key
from application.services.action_dispatcher import ActionDispatcher

router = APIRouter(
    prefix="/semantic",
    tags=["Semantic Actions"],
    dependencies=[Depends(require_api_key)],
)


@router.post("/action", summary="执行语义动作")
async def execute_action(
    request: Request,
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    """
    执行 Schema.org 动作（CreateAction / DownloadAction / DeleteAction / SearchAction）

    - 业务成功与业务失败均返回 200，结果见 `actionStatus` 与 `result` / `error`
    - 载荷不合法或 `@type` 不支持返回 400
    """
    raw = await request.body()
    return await dispatcher.execute(raw)
