"""Utility functions and configurations."""

from .logging_config import setup_logging, get_logger
from .exceptions import (
    AuditException,
    ConfigurationError,
    TransportError,
    FetchError,
    PaginationError,
    DecodeError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "AuditException",
    "ConfigurationError",
    "TransportError",
    "FetchError",
    "PaginationError",
    "DecodeError",
]
