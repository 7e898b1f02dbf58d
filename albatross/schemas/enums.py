from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    BODY_READ_FAILED = "BODY_READ_FAILED"
    REQUEST_INVALID = "REQUEST_INVALID"
    NETWORK_ERROR = "NETWORK_ERROR"
    RETRIES_EXHAUSTED = "RETRIES_EXHAUSTED"
    CANCELLED = "CANCELLED"
    RESPONSE_READ_FAILED = "RESPONSE_READ_FAILED"
    RESPONSE_DECODE_FAILED = "RESPONSE_DECODE_FAILED"
    API_ERROR = "API_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
