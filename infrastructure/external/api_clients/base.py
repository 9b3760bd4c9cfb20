"""
REST API客户端基类

供注册中心等外部 HTTP 服务复用：
- 自动重试（tenacity，仅针对超时/网络错误/5xx/429）
- 错误映射为 APIError 层级
- 超时控制
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


@dataclass
class APIResponse:
    """API响应封装"""
    status_code: int
    headers: Dict[str, str]
    data: Any
    raw_content: bytes
    elapsed_ms: float

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400


class APIError(Exception):
    """API错误基类"""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[APIResponse] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)

    def __str__(self):
        if self.status_code:
            return f"{self.message} | Status: {self.status_code}"
        return self.message


class NotFoundError(APIError):
    """资源未找到错误"""


class RetryableAPIError(APIError):
    """可重试的API错误（5xx / 429）"""


RETRY_STATUS_CODES = {429, 500, 502, 503, 504}


class BaseAPIClient:
    """REST API客户端基类，子类实现具体的 API 调用"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        retry_delay: float = 0.5,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API基础URL
            timeout: 请求超时时间（秒）
            max_retries: 最大重试次数（总尝试次数 = max_retries + 1）
            retry_delay: 重试退避基数（秒）
            headers: 默认请求头
            transport: 自定义 httpx 传输层（测试时注入 MockTransport）
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._transport = transport

        self.default_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "s3service/1.0",
        }
        if headers:
            self.default_headers.update(headers)

        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """获取或创建HTTP客户端"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _raise_for_error(self, response: APIResponse):
        """把错误响应映射为异常"""
        error_class = NotFoundError if response.status_code == 404 else APIError
        message = f"API request failed with status {response.status_code}"
        if isinstance(response.data, dict):
            message = (
                response.data.get("message")
                or response.data.get("error")
                or response.data.get("detail")
                or message
            )
        raise error_class(message=str(message), status_code=response.status_code, response=response)

    async def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> APIResponse:
        """
        发送HTTP请求（带重试）

        Raises:
            APIError: 最终失败（含超时、网络错误、4xx/5xx）
        """
        url = self._build_url(endpoint)

        async def _send_once() -> APIResponse:
            start_time = datetime.now()
            response = await self.client.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                headers=self.default_headers,
            )
            elapsed = (datetime.now() - start_time).total_seconds() * 1000

            response_data = None
            if "application/json" in response.headers.get("content-type", ""):
                try:
                    response_data = response.json()
                except json.JSONDecodeError:
                    response_data = None

            api_response = APIResponse(
                status_code=response.status_code,
                headers=dict(response.headers),
                data=response_data,
                raw_content=response.content,
                elapsed_ms=elapsed,
            )
            if api_response.status_code in RETRY_STATUS_CODES:
                raise RetryableAPIError(
                    message=f"Transient API error with status {api_response.status_code}",
                    status_code=api_response.status_code,
                    response=api_response,
                )
            if api_response.is_error:
                self._raise_for_error(api_response)
            return api_response

        retrying = AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.retry_delay,
                min=self.retry_delay,
                max=self.retry_delay * 8,
            ),
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError, RetryableAPIError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await _send_once()
        except httpx.TimeoutException as exc:
            raise APIError(f"Request timeout after {self.timeout}s") from exc
        except httpx.NetworkError as exc:
            raise APIError(f"Network error: {exc}") from exc
        except RetryableAPIError as exc:
            raise APIError(exc.message, status_code=exc.status_code, response=exc.response) from exc

    async def get(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("POST", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("DELETE", endpoint, **kwargs)
