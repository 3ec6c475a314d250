"""
Standard exception hierarchy for the VEER services.

All service exceptions inherit from ServiceError and can be converted to the
JSON error body the web client expects: ``{"error": "<message>"}`` plus
optional context.
"""
from typing import Any


# ============================================================================
# Base Exception Class
# ============================================================================

class ServiceError(Exception):
    """Base exception for all VEER service errors.

    Attributes:
        message: Human-readable error message
        context: Dictionary of additional context
        original_error: Optional original exception that caused this error
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
        }
        if self.context:
            result["context"] = self.context
        if self.original_error:
            result["original_error"] = {
                "type": type(self.original_error).__name__,
                "message": str(self.original_error)
            }
        return result


# ============================================================================
# Common Exception Types
# ============================================================================

class NotFoundError(ServiceError):
    """Raised when a requested record is not found.

    Attributes:
        resource_type: Type of resource (e.g., "Note", "Task", "Session")
        resource_id: ID of the resource that was not found
    """

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        *,
        message: str | None = None,
        context: dict[str, Any] | None = None
    ):
        if message is None:
            message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message, context=context)
        self.resource_type = resource_type
        self.resource_id = str(resource_id)
        self.context.setdefault("resource_type", resource_type)
        self.context.setdefault("resource_id", str(resource_id))


class ValidationError(ServiceError):
    """Raised when input validation fails.

    Attributes:
        field: Optional field name that failed validation
        value: Optional value that failed validation
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None
    ):
        super().__init__(message, context=context)
        self.field = field
        self.value = value
        if field is not None:
            self.context.setdefault("field", field)
        if value is not None:
            self.context.setdefault("value", str(value))


class AuthenticationError(ServiceError):
    """Raised when the agent token is missing or wrong."""

    status_code = 401


class ConfigurationError(ServiceError):
    """Raised when a required setting (usually an API key) is missing.

    Attributes:
        setting: Name of the missing setting
    """

    def __init__(self, setting: str, *, message: str | None = None):
        super().__init__(message or f"{setting} not configured", context={"setting": setting})
        self.setting = setting


class UpstreamError(ServiceError):
    """Raised when a third-party API call fails.

    Attributes:
        provider: Display name of the upstream service
        upstream_status: HTTP status returned by the upstream, if any
    """

    def __init__(
        self,
        provider: str,
        *,
        upstream_status: int | None = None,
        message: str | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(
            message or f"{provider} request failed",
            context={"provider": provider},
            original_error=original_error,
        )
        self.provider = provider
        self.upstream_status = upstream_status
        if upstream_status is not None:
            self.context["upstream_status"] = upstream_status


class CommandError(ServiceError):
    """Raised when a shell command exits unsuccessfully.

    Attributes:
        command: The command line that was executed
        returncode: Process exit status
        stderr: Captured standard error
    """

    def __init__(self, command: str, returncode: int, stderr: str = "", stdout: str = ""):
        super().__init__(
            f"Command failed: {command} (exit {returncode})",
            context={"command": command, "returncode": returncode},
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout


class DatabaseError(ServiceError):
    """Raised when a table store operation fails.

    Attributes:
        operation: Optional database operation that failed (e.g., "INSERT")
    """

    def __init__(
        self,
        message: str,
        *,
        original_error: Exception | None = None,
        operation: str | None = None,
        context: dict[str, Any] | None = None
    ):
        super().__init__(message, context=context, original_error=original_error)
        self.operation = operation
        if operation is not None:
            self.context.setdefault("operation", operation)


# ============================================================================
# Record-Specific Exceptions
# ============================================================================

class RecordNotFoundError(NotFoundError):
    """Raised when a table row is not found."""

    def __init__(self, table: str, record_id: str, **kwargs):
        super().__init__(table.rstrip("s").replace("_", " ").title().replace(" ", ""), record_id, **kwargs)
        self.table = table


# ============================================================================
# Helper Functions for HTTP Integration
# ============================================================================

def to_error_body(exc: ServiceError, *, include_context: bool = False) -> dict[str, Any]:
    """Build the JSON error body for a ServiceError.

    The web client reads the ``error`` field and shows it in a toast.
    """
    body: dict[str, Any] = {"error": exc.message}
    if include_context and exc.context:
        body["context"] = exc.context
    return body


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
