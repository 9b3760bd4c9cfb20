"""
Shared business codes used across layers (Domain/Core/API).

This package exposes BusinessCode at `shared.codes` so the domain,
the semantic action layer and the HTTP exception handlers agree on
one set of numeric codes.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Unified business status codes (single source of truth)."""

    # Success
    SUCCESS = 0

    # Parameter errors (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003

    # Semantic action request errors (11xxx)
    MALFORMED_PAYLOAD = 11001
    UNSUPPORTED_ACTION_TYPE = 11002

    # Business errors (2xxxx)
    BUSINESS_ERROR = 20000
    NOT_FOUND = 20006  # Generic resource not found
    OPERATION_NOT_FOUND = 20007

    # Authorization errors (3xxxx)
    PERMISSION_ERROR = 30000
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # System errors (4xxxx)
    SYSTEM_ERROR = 40000
    NETWORK_ERROR = 40002
    SERVICE_UNAVAILABLE = 40003
    NOT_IMPLEMENTED = 40004


__all__ = ["BusinessCode"]
