"""
API客户端模块

提供与外部REST API集成的客户端实现
"""
from .base import BaseAPIClient, APIResponse, APIError
from .registry import RegistryClient, build_registration

__all__ = [
    "BaseAPIClient",
    "APIResponse",
    "APIError",
    "RegistryClient",
    "build_registration",
]
