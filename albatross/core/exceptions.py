from __future__ import annotations

from typing import TYPE_CHECKING

from albatross.schemas.enums import ErrorCode

if TYPE_CHECKING:
    import httpx


class AlbatrossError(Exception):
    """Base exception for all albatross client errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)


class BodyReadError(AlbatrossError):
    error_code = ErrorCode.BODY_READ_FAILED


class RequestConstructionError(AlbatrossError):
    error_code = ErrorCode.REQUEST_INVALID


class NetworkError(AlbatrossError):
    """The executor failed before a response status was obtained."""

    error_code = ErrorCode.NETWORK_ERROR

    @classmethod
    def from_exception(cls, exc: BaseException, url: str | None = None) -> NetworkError:
        error = cls(str(exc) or type(exc).__name__, detail=f"url={url}" if url else None)
        error.__cause__ = exc
        return error


class RetriesExhaustedError(AlbatrossError):
    error_code = ErrorCode.RETRIES_EXHAUSTED

    def __init__(self, last_error: NetworkError, attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(
            message=f"max retries exceeded: {last_error.message}",
            detail=f"attempts={attempts}",
        )


class CancellationError(AlbatrossError):
    error_code = ErrorCode.CANCELLED


class ResponseBodyReadError(AlbatrossError):
    """A response arrived but its body could not be drained."""

    error_code = ErrorCode.RESPONSE_READ_FAILED

    def __init__(
        self,
        message: str,
        status_code: int,
        response: httpx.Response | None = None,
        detail: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.response = response
        super().__init__(message, detail)


class InvalidRequestError(AlbatrossError):
    error_code = ErrorCode.REQUEST_INVALID


class ConfigurationError(AlbatrossError):
    error_code = ErrorCode.CONFIGURATION_ERROR


class APIError(AlbatrossError):
    """The albatross API answered with an error payload."""

    error_code = ErrorCode.API_ERROR

    def __init__(self, message: str, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, detail)


class ReleaseNotFoundError(AlbatrossError):
    error_code = ErrorCode.NOT_FOUND


class ResponseDecodeError(AlbatrossError):
    error_code = ErrorCode.RESPONSE_DECODE_FAILED

    def __init__(self, message: str, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, detail)
