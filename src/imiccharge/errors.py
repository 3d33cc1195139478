"""Error taxonomy for backend API calls."""

from enum import Enum


class ErrorKind(str, Enum):
    """Why an API operation produced no result."""

    NO_TOKEN = "no_token"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    DECODE = "decode"


class ApiError(Exception):
    """Base exception for backend API failures."""

    kind: ErrorKind


class NoTokenError(ApiError):
    """No access token is stored, so no request was sent."""

    kind = ErrorKind.NO_TOKEN

    def __init__(self, key: str = "access_token"):
        super().__init__(f"No stored credential under '{key}'")
        self.key = key


class TransportError(ApiError):
    """The request never produced an HTTP response (DNS, TLS, timeout, reset)."""

    kind = ErrorKind.TRANSPORT


class HttpStatusError(ApiError):
    """The backend answered with a non-success status code."""

    kind = ErrorKind.HTTP_STATUS

    def __init__(self, status: int, reason: str | None = None):
        message = f"HTTP {status}"
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.status = status
        self.reason = reason


class DecodeError(ApiError):
    """The response body could not be decoded into the expected shape."""

    kind = ErrorKind.DECODE
