"""
FastAPI应用主入口
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry import trace

from api.middleware import LoggingMiddleware, RequestIDMiddleware, TracingMiddleware
from api.routes import objects as objects_routes
from api.routes import semantic as semantic_routes
from api.routes import service as service_routes
from api.routes import state as state_routes
from application.ports.object_store import ObjectStoreFactory
from application.services.action_dispatcher import ActionDispatcher
from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import configure_logging, get_logger
from infrastructure.adapters.storage_port import S3ObjectStoreFactory
from infrastructure.external.api_clients import RegistryClient, build_registration
from infrastructure.state.operation_tracker import OperationTracker


# 初始化日志：在入口处显式配置，避免模块导入时的副作用
configure_logging()
logger = get_logger(__name__)


def build_dispatcher(
    store_factory: Optional[ObjectStoreFactory] = None,
    tracker: Optional[OperationTracker] = None,
) -> ActionDispatcher:
    """按配置组装分发器；测试可注入内存版 store_factory"""
    tracer = trace.get_tracer(settings.tracing.service_name) if settings.tracing.enabled else None
    return ActionDispatcher(
        store_factory or S3ObjectStoreFactory(),
        tracker=tracker,
        tracer=tracer,
        download_dir=settings.storage.download_dir,
        default_region=settings.storage.default_region,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    tracker = OperationTracker(max_operations=settings.state.max_operations)
    app.state.operation_tracker = tracker
    app.state.dispatcher = build_dispatcher(tracker=tracker)
    logger.info(
        "service_started",
        port=settings.PORT,
        api_prefix=settings.API_PREFIX,
        auth_enabled=bool(settings.API_KEY),
        tracing_enabled=settings.tracing.enabled,
    )

    # 注册中心：失败只记日志，不影响启动
    registry: Optional[RegistryClient] = None
    if settings.REGISTRYSERVICE_API_URL:
        registry = RegistryClient(
            settings.REGISTRYSERVICE_API_URL,
            timeout=settings.registry.timeout,
            max_retries=settings.registry.max_retries,
        )
        await registry.register(build_registration(settings))

    yield

    if registry is not None:
        await registry.unregister(settings.SERVICE_ID)
        await registry.close()
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description=settings.DESCRIPTION,
)

# 添加中间件（注意顺序：从下往上执行）
# 1. Request ID中间件（最先执行，为后续中间件提供request_id）
app.add_middleware(RequestIDMiddleware)

# 2. 日志中间件（依赖request_id）
app.add_middleware(LoggingMiddleware)

# 3. 追踪中间件（可选）
if settings.tracing.enabled:
    app.add_middleware(TracingMiddleware, service_name=settings.tracing.service_name)

# 4. CORS中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册全局异常处理器
register_exception_handlers(app)


# 注册路由
app.include_router(semantic_routes.router, prefix=settings.API_PREFIX)
app.include_router(objects_routes.router, prefix=settings.API_PREFIX)
app.include_router(state_routes.router, prefix=settings.API_PREFIX)
app.include_router(service_routes.router, prefix=settings.API_PREFIX)


# 健康检查
@app.get("/health", tags=["Health"])
async def health_check():
    """健康检查端点"""
    return {
        "service": settings.SERVICE_ID,
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "healthy",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
