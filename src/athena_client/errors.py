"""
Error taxonomy for calls against the athenahealth API.

Every failure surfaced by the client is an `ApiError` carrying a `kind`:
- TRANSPORT: DNS/connect/timeout and other httpx dispatch failures
- HTTP_STATUS: non-2xx response (status code + raw body)
- DECODE: payload did not have the expected shape
- EMPTY_RESULT: 200 with an empty array for a single-entity lookup
"""
from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    DECODE = "decode"
    EMPTY_RESULT = "empty_result"


class ApiError(Exception):
    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        http_status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.cause = cause

    def __str__(self) -> str:
        if self.http_status is not None:
            return f"{self.kind.value} ({self.http_status}): {self.message}"
        return f"{self.kind.value}: {self.message}"


class ApiTransportError(ApiError):
    kind = ErrorKind.TRANSPORT


class ApiStatusError(ApiError):
    kind = ErrorKind.HTTP_STATUS

    def __init__(self, status: int, body: str, *, cause: Optional[BaseException] = None):
        super().__init__(body or f"HTTP {status}", http_status=status, cause=cause)
        self.body = body


class ApiDecodeError(ApiError):
    kind = ErrorKind.DECODE

    def __init__(self, message: str, snippet: str = "", *, cause: Optional[BaseException] = None):
        super().__init__(f"{message}: {snippet}" if snippet else message, cause=cause)
        self.snippet = snippet


class EmptyResultError(ApiError):
    """A single-entity lookup came back as `[]` (the API's 200-level "not found")."""
    kind = ErrorKind.EMPTY_RESULT
