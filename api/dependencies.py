"""
API依赖项 - API Key 认证与应用服务注入
"""
import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from application.services.action_dispatcher import ActionDispatcher
from application.services.rest_adapter import RestActionAdapter
from core.config import settings
from core.exceptions import UnauthorizedException
from infrastructure.state.operation_tracker import OperationTracker

# X-API-Key 头
api_key_header = APIKeyHeader(
    name="X-API-Key",
    scheme_name="ApiKey",
    description="Static API key (S3_API_KEY)",
    auto_error=False,
)

# Authorization: Bearer <key>
http_bearer = HTTPBearer(
    scheme_name="Bearer",
    description="Static API key as bearer token",
    auto_error=False,
)


async def require_api_key(
    header_key: Optional[str] = Depends(api_key_header),
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
) -> None:
    """未配置 API_KEY 时放行；否则要求 X-API-Key 或 Bearer 与之相等"""
    expected = settings.API_KEY
    if not expected:
        return

    provided = header_key or (bearer.credentials if bearer else None)
    if not provided or not secrets.compare_digest(provided.encode(), expected.encode()):
        raise UnauthorizedException()


def get_dispatcher(request: Request) -> ActionDispatcher:
    return request.app.state.dispatcher


def get_rest_adapter(dispatcher: ActionDispatcher = Depends(get_dispatcher)) -> RestActionAdapter:
    return RestActionAdapter(dispatcher, settings.storage)


def get_operation_tracker(request: Request) -> OperationTracker:
    return request.app.state.operation_tracker
