"""
请求/响应日志中间件
记录 HTTP 请求与响应耗时；请求体中的凭据与文件内容会被脱敏
"""
import json
import time
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from core.config import settings
from core.logging_config import get_logger


logger = get_logger(__name__)

MASK = "***"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    日志记录中间件

    1. 记录请求信息（方法、路径、参数，按开关记录请求体）
    2. 记录响应状态码与耗时，并写入 X-Process-Time
    3. 记录未处理异常后重新抛出
    """

    SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

    # 敏感字段（小写比较）；既匹配 JSON 键名，也匹配 PropertyValue 的 name
    SENSITIVE_FIELDS = {
        "secretkey", "secret_key", "secretaccesskey", "secret_access_key",
        "aws_secret_access_key", "accesskey", "access_key", "accesskeyid",
        "access_key_id", "aws_access_key_id", "api_key", "apikey",
        "password", "token", "authorization", "content",
    }

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.enable_body_log_default: bool = settings.LOG_REQUEST_BODY_ENABLE_BY_DEFAULT
        self.max_body_log_bytes: int = settings.LOG_REQUEST_BODY_MAX_BYTES

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()
        request_info = await self._get_request_info(request)
        logger.info("request_started", **request_info)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                duration=time.time() - start_time,
                error=str(exc),
                error_type=type(exc).__name__,
                **request_info,
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        self._log_response(response, duration, request_info)
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        return response

    async def _get_request_info(self, request: Request) -> dict:
        info = {
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
        }
        if request.method in ("POST", "PUT", "PATCH", "DELETE") and self._should_log_body(request):
            body = await self._extract_and_sanitize_body(request)
            if body is not None:
                info["body"] = body
        user_agent = request.headers.get("User-Agent")
        if user_agent:
            info["user_agent"] = user_agent
        return info

    def _should_log_body(self, request: Request) -> bool:
        # X-Log-Body: true/false 可逐请求覆盖
        header = (request.headers.get("X-Log-Body") or "").lower()
        if header in {"true", "1", "yes"}:
            return True
        if header in {"false", "0", "no"}:
            return False
        return bool(self.enable_body_log_default and settings.DEBUG)

    async def _extract_and_sanitize_body(self, request: Request) -> Any:
        body = await request.body()
        if not body:
            return None

        snippet = body[: self.max_body_log_bytes]
        text = snippet.decode("utf-8", errors="ignore")
        content_type = request.headers.get("content-type", "").lower()
        if "json" not in content_type:
            return {"bytes": len(body)}
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            # 截断或非法 JSON：不记录原文，避免泄露凭据
            return {"bytes": len(body), "truncated": len(body) > len(snippet)}
        return self.sanitize(parsed)

    @classmethod
    def sanitize(cls, data: Any) -> Any:
        """递归脱敏；additionalProperty 形式的 {name, value} 按 name 判断"""
        if isinstance(data, dict):
            name = data.get("name")
            masked_pair = isinstance(name, str) and name.lower() in cls.SENSITIVE_FIELDS and "value" in data
            cleaned = {}
            for key, value in data.items():
                if key.lower() in cls.SENSITIVE_FIELDS or (masked_pair and key == "value"):
                    cleaned[key] = MASK
                else:
                    cleaned[key] = cls.sanitize(value)
            return cleaned
        if isinstance(data, list):
            return [cls.sanitize(v) for v in data]
        return data

    def _log_response(self, response: Response, duration: float, request_info: dict):
        status_code = response.status_code
        log_data = {"status_code": status_code, "duration": duration, **request_info}
        if status_code < 400:
            logger.info("request_completed", **log_data)
        elif status_code < 500:
            logger.warning("request_client_error", **log_data)
        else:
            logger.error("request_server_error", **log_data)
