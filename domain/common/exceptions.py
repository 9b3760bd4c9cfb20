"""领域层请求异常定义，供领域、应用与接口层使用。

这些异常会被全局异常处理器转换为统一错误响应（HTTP 4xx）。
业务执行过程中的失败（凭据、存储、本地 IO）不走这里，而是以
FailedActionStatus 的形式写回 action 信封，见 domain.action.errors。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class MalformedPayloadException(BusinessException):
    """请求体不是合法 JSON 对象，或缺少 @type 判别字段。"""

    def __init__(self, reason: str, *, details: Optional[dict] = None):
        super().__init__(
            code=BusinessCode.MALFORMED_PAYLOAD,
            message=f"Failed to parse action: {reason}",
            error_type="MalformedPayload",
            details=details,
        )


class UnsupportedActionTypeException(BusinessException):
    def __init__(self, action_type: str, supported: Optional[list[str]] = None):
        details = {"type": action_type}
        if supported:
            details["supported"] = supported
        super().__init__(
            code=BusinessCode.UNSUPPORTED_ACTION_TYPE,
            message=f"Unsupported action type: {action_type}",
            error_type="UnsupportedActionType",
            details=details,
            field="@type",
        )


class MissingParameterException(BusinessException):
    def __init__(self, field: str):
        super().__init__(
            code=BusinessCode.PARAM_MISSING,
            message=f"{field} is required",
            error_type="MissingParameter",
            field=field,
        )


class InvalidParameterException(BusinessException):
    def __init__(self, field: str, reason: str):
        super().__init__(
            code=BusinessCode.PARAM_ERROR,
            message=f"Invalid {field}: {reason}",
            error_type="InvalidParameter",
            field=field,
        )


class OperationNotFoundException(BusinessException):
    def __init__(self, operation_id: str):
        super().__init__(
            code=BusinessCode.OPERATION_NOT_FOUND,
            message="Operation not found",
            error_type="OperationNotFound",
            details={"operation_id": operation_id},
        )
