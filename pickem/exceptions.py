"""
User-facing exceptions for the Pick'em client.

Everything raised out of ``PickEmClient`` is a ``PickEmError``. Internal
failure kinds live in ``pickem.errors`` and are converted at the boundary.
"""
from typing import Any, Optional


class PickEmError(Exception):
    """Base exception for all user-facing errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)


class PickEmValidationError(PickEmError):
    """Raised when an argument fails validation before any request is made."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class PickEmRateLimitError(PickEmError):
    """Raised when the API keeps rejecting calls as too frequent."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        self.retry_after = retry_after
        super().__init__(message)


class PickEmPreconditionError(PickEmError):
    """Raised when a pick conflicts with predictions from an earlier stage."""
    pass


class PickEmConflictError(PickEmError):
    """Raised when the stage is not open for predictions yet."""
    pass


class PickEmGoneError(PickEmError):
    """Raised when the prediction window has closed."""
    pass
