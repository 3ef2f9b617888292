"""Error kinds raised by the upstream client and request handlers.

Every error carries a ``kind``; ``STATUS_BY_KIND`` is the only place a kind is
turned into an HTTP status code.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Optional


class ErrorKind(str, Enum):
    UPSTREAM = "upstream"
    TRANSPORT = "transport"
    MISSING_PARAMETER = "missing_parameter"
    MALFORMED_ROW = "malformed_row"


STATUS_BY_KIND = MappingProxyType(
    {
        ErrorKind.UPSTREAM: 500,
        ErrorKind.TRANSPORT: 500,
        ErrorKind.MISSING_PARAMETER: 400,
        ErrorKind.MALFORMED_ROW: 500,
    }
)


class MeteorSpyError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.message}


class UpstreamError(MeteorSpyError):
    """The CAD API answered, but with a non-success status."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"HTTP error! status: {status_code}, details: {body}"
        )
        self.status_code = status_code
        self.body = body


class TransportError(MeteorSpyError):
    """The request never got a usable answer (DNS, connect, timeout, redirects)."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, cause: BaseException):
        super().__init__(
            f"Upstream request failed: {type(cause).__name__}: {cause}"
        )
        self.cause = cause


class MissingParameterError(MeteorSpyError):
    kind = ErrorKind.MISSING_PARAMETER

    def __init__(self, parameter: str):
        super().__init__(f"Missing required query parameter: {parameter}")
        self.parameter = parameter


class MalformedRowError(MeteorSpyError):
    # Never leaves the normalizer; the offending field becomes NaN.
    kind = ErrorKind.MALFORMED_ROW

    def __init__(self, field: str, value: Optional[Any]):
        super().__init__(f"Field {field!r} is not numeric: {value!r}")
        self.field = field
        self.value = value


def http_status_for(exc: MeteorSpyError) -> int:
    return STATUS_BY_KIND[exc.kind]
