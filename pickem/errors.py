"""
Internal failure taxonomy.

Every failure inside the client is one of seven tagged kinds. Transport code
classifies HTTP statuses with ``map_http_error``; the public client turns the
result into a ``PickEmError`` with ``convert_error`` before it reaches callers.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Optional

from pickem.exceptions import (
    PickEmConflictError,
    PickEmError,
    PickEmGoneError,
    PickEmPreconditionError,
    PickEmRateLimitError,
    PickEmValidationError,
)


class ErrorKind(str, Enum):
    API = "api"
    NETWORK = "network"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    PRECONDITION_FAILED = "precondition_failed"
    CONFLICT = "conflict"
    GONE = "gone"


class PickEmFailure(Exception):
    """Base for internal failures. ``kind`` is the tag callers dispatch on."""

    kind: ClassVar[ErrorKind]
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ApiError(PickEmFailure):
    """The upstream rejected the request with a specific HTTP status."""
    kind: ClassVar[ErrorKind] = ErrorKind.API
    status_code: int
    message: str
    cause: Any = None


@dataclass(eq=False)
class NetworkError(PickEmFailure):
    """The request never produced a status (DNS, reset, timeout, bad body)."""
    kind: ClassVar[ErrorKind] = ErrorKind.NETWORK
    message: str
    cause: Any = None


@dataclass(eq=False)
class ValidationError(PickEmFailure):
    """A local precondition failed before any network call."""
    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION
    message: str
    field: Optional[str] = None


@dataclass(eq=False)
class RateLimitError(PickEmFailure):
    kind: ClassVar[ErrorKind] = ErrorKind.RATE_LIMIT
    message: str
    retry_after: Optional[int] = None


@dataclass(eq=False)
class PreconditionFailedError(PickEmFailure):
    kind: ClassVar[ErrorKind] = ErrorKind.PRECONDITION_FAILED
    message: str


@dataclass(eq=False)
class ConflictError(PickEmFailure):
    kind: ClassVar[ErrorKind] = ErrorKind.CONFLICT
    message: str


@dataclass(eq=False)
class GoneError(PickEmFailure):
    kind: ClassVar[ErrorKind] = ErrorKind.GONE
    message: str


# =============================================================================
# HTTP STATUS CLASSIFICATION
# =============================================================================

_STATUS_TABLE: Dict[int, Callable[[int], PickEmFailure]] = {
    400: lambda code: ApiError(code, "Bad Request: Invalid tournament parameters or item IDs"),
    403: lambda code: ApiError(
        code,
        "Forbidden: Invalid Steam auth code - generate a new one at help.steampowered.com",
    ),
    404: lambda code: ApiError(
        code, "Not Found: Sticker item not owned by user or incorrect team/player ID"
    ),
    405: lambda code: ApiError(code, "Method Not Allowed: Endpoint not available for this tournament"),
    409: lambda code: ConflictError(
        "Predictions not allowed yet for this stage - wait for stage to unlock"
    ),
    410: lambda code: GoneError("Prediction window closed - matches have already started"),
    412: lambda code: PreconditionFailedError(
        "Cannot place pick: conflicts with existing predictions from previous stages"
    ),
    429: lambda code: RateLimitError("Too many requests - reduce API call frequency"),
    500: lambda code: ApiError(code, "Internal Server Error"),
    503: lambda code: ApiError(
        code, "Service Unavailable - Steam servers may be down or under maintenance"
    ),
    504: lambda code: ApiError(
        code, "Gateway Timeout - request may complete later, check predictions status"
    ),
}


def map_http_error(status_code: int, message: str) -> PickEmFailure:
    """
    Classify an HTTP failure.

    Known statuses get a canned, actionable message; anything else becomes an
    ``ApiError`` carrying the upstream text unchanged.

    Args:
        status_code: HTTP status of the response
        message: Upstream reason text

    Returns:
        The internal failure for that status
    """
    build = _STATUS_TABLE.get(status_code)
    if build is None:
        return ApiError(status_code, message)
    return build(status_code)


# =============================================================================
# USER-FACING CONVERSION
# =============================================================================

_CONVERTERS: Dict[ErrorKind, Callable[[Any], PickEmError]] = {
    ErrorKind.API: lambda e: PickEmError(e.message, e.status_code, e.cause),
    ErrorKind.NETWORK: lambda e: PickEmError(e.message, None, e.cause),
    ErrorKind.VALIDATION: lambda e: PickEmValidationError(e.message, e.field),
    ErrorKind.RATE_LIMIT: lambda e: PickEmRateLimitError(e.message, e.retry_after),
    ErrorKind.PRECONDITION_FAILED: lambda e: PickEmPreconditionError(e.message),
    ErrorKind.CONFLICT: lambda e: PickEmConflictError(e.message),
    ErrorKind.GONE: lambda e: PickEmGoneError(e.message),
}


def convert_error(error: Any) -> PickEmError:
    """Convert any failure into the single user-facing error shape."""
    if isinstance(error, PickEmError):
        return error
    if isinstance(error, PickEmFailure):
        return _CONVERTERS[error.kind](error)
    return PickEmError(str(error), None, error)


def is_rate_limited(error: BaseException) -> bool:
    """Default retry predicate: only rate-limit failures are retried."""
    return isinstance(error, PickEmFailure) and error.kind is ErrorKind.RATE_LIMIT
