"""Custom exceptions for the course audit."""

from typing import Optional


class AuditException(Exception):
    """Base exception for audit errors."""

    pass


class ConfigurationError(AuditException):
    """Raised when required configuration is missing or invalid."""

    pass


class TransportError(AuditException):
    """Raised when the remote service could not be reached at all."""

    pass


class FetchError(AuditException):
    """Raised when the service answered with a status the caller cannot use."""

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PaginationError(FetchError):
    """Raised when a paginated collection cannot be traversed completely."""

    pass


class DecodeError(AuditException):
    """Raised when a response body cannot be decoded into the expected shape."""

    pass
