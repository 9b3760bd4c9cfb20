"""
OpenTelemetry 请求追踪中间件

从请求头提取上游 trace context，每个请求开启一个 SERVER span；
动作分发器在其下开启子 span。未安装 SDK 时 API 层为 no-op。
"""
from fastapi import Request
from opentelemetry import propagate, trace
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class TracingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, service_name: str = "s3service"):
        super().__init__(app)
        self.tracer = trace.get_tracer(service_name)

    async def dispatch(self, request: Request, call_next):
        ctx = propagate.extract(dict(request.headers))
        with self.tracer.start_as_current_span(
            f"{request.method} {request.url.path}",
            context=ctx,
            kind=SpanKind.SERVER,
            attributes={
                "http.method": request.method,
                "http.target": request.url.path,
            },
        ) as span:
            try:
                response = await call_next(request)
            except Exception as exc:
                span.record_exception(exc)
                span.set_status(Status(StatusCode.ERROR))
                raise
            span.set_attribute("http.status_code", response.status_code)
            if response.status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))
            return response
