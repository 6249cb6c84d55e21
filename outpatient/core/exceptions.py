"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class ValidationException(AppException):
    """Malformed input, raised before anything is written."""

    def __init__(self, message: str = "Validation error"):
        """Initialize with 422 status code."""
        super().__init__(message, status_code=422)


class StateException(AppException):
    """Illegal queue status transition."""

    def __init__(self, message: str = "Illegal state transition"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class ConcurrencyException(AppException):
    """Sequence allocation could not be completed by the store."""

    def __init__(self, message: str = "Could not allocate sequence number"):
        """Initialize with 503 status code."""
        super().__init__(message, status_code=503)


class SideEffectWarning(Exception):
    """
    Record of a failed best-effort step.

    Collected and logged by the vitals coordinator, never raised to callers.
    """

    def __init__(self, step: str, message: str):
        """Initialize with the failing step name and error message."""
        self.step = step
        self.message = message
        super().__init__(f"{step}: {message}")
