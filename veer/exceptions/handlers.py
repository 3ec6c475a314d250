"""
Exception handlers for the FastAPI applications.
"""
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from veer.exceptions.errors import (
    ServiceError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    to_error_body,
)

logger = logging.getLogger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.
    """
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "method": request.method,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        }
    )
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors with clear messages.
    """
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append(f"{field}: {error['msg']}")

    logger.warning(
        f"Validation error in {request.method} {request.url.path}: {', '.join(errors)}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "errors": errors,
        }
    )
    return JSONResponse(
        status_code=422,
        content={"error": "Validation error", "errors": errors},
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """
    Handler for standard ServiceError exceptions.

    Client-side mistakes are logged at WARNING, everything else at ERROR.
    """
    quiet = (NotFoundError, ValidationError, AuthenticationError)
    log_level = logging.WARNING if isinstance(exc, quiet) else logging.ERROR
    logger.log(
        log_level,
        f"Service error in {request.method} {request.url.path}: {exc.message}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_type": exc.__class__.__name__,
            "error_context": exc.context,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=to_error_body(exc))


def setup_exception_handlers(app):
    """
    Register exception handlers with a FastAPI app.

    ServiceError is registered before the generic Exception handler so the
    more specific handler wins.
    """
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
