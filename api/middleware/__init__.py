from .request_id import RequestIDMiddleware, get_request_id, get_client_ip
from .logging import LoggingMiddleware
from .tracing import TracingMiddleware

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
    "TracingMiddleware",
    "get_request_id",
    "get_client_ip",
]
