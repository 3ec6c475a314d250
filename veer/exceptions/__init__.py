"""
Exception handlers and standard exceptions for the application.
"""
from veer.exceptions.errors import (
    ServiceError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    ConfigurationError,
    UpstreamError,
    CommandError,
    DatabaseError,
    RecordNotFoundError,
    to_error_body,
)

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "ConfigurationError",
    "UpstreamError",
    "CommandError",
    "DatabaseError",
    "RecordNotFoundError",
    "to_error_body",
]
