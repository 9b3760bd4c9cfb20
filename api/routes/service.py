"""
服务文档路由 - 能力与端点清单
"""
from fastapi import APIRouter

from core.config import settings
from infrastructure.external.api_clients.registry import CAPABILITIES

router = APIRouter(tags=["Service"])


def _endpoints(prefix: str) -> list[dict]:
    return [
        {"method": "POST", "path": f"{prefix}/semantic/action",
         "description": "Execute S3 operations via semantic actions (primary interface)"},
        {"method": "POST", "path": f"{prefix}/objects",
         "description": "Upload object (REST convenience, converts to CreateAction)"},
        {"method": "GET", "path": f"{prefix}/objects/{{key}}",
         "description": "Find object (REST convenience, converts to SearchAction)"},
        {"method": "DELETE", "path": f"{prefix}/objects/{{key}}",
         "description": "Delete object (REST convenience, converts to DeleteAction)"},
        {"method": "GET", "path": f"{prefix}/buckets",
         "description": "List buckets (REST convenience, converts to SearchAction)"},
        {"method": "POST", "path": f"{prefix}/buckets",
         "description": "Create bucket (not supported, returns FailedActionStatus)"},
        {"method": "GET", "path": f"{prefix}/state",
         "description": "Recent operations"},
        {"method": "GET", "path": f"{prefix}/state/{{operation_id}}",
         "description": "Single operation state"},
        {"method": "GET", "path": "/health", "description": "Health check endpoint"},
    ]


@router.get("/docs", summary="服务文档")
async def service_docs():
    return {
        "id": settings.SERVICE_ID,
        "name": settings.PROJECT_NAME,
        "description": settings.DESCRIPTION,
        "version": settings.API_VERSION,
        "port": settings.PORT,
        "capabilities": list(CAPABILITIES),
        "endpoints": _endpoints(settings.API_PREFIX),
    }
