"""Store error hierarchy for production backends.

Store implementations wrap backend-specific errors in one of these so callers
handle failures the same way regardless of backend.
"""


class StoreError(Exception):
    """Base exception for all store errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when the store backend is unreachable.

    Examples:
        - Redis server unavailable
        - Network errors or timeouts
    """

    pass


class ValidationError(StoreError):
    """Raised when data cannot be stored or read back in the expected shape."""

    pass
