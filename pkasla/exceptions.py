"""Custom exception classes and global exception handlers."""

import logging
import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PkaslaException(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(PkaslaException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", 404)


class ForbiddenException(PkaslaException):
    """Access forbidden exception."""

    def __init__(self, message: str = "You don't have permission to perform this action"):
        super().__init__(message, 403)


class UnauthorizedException(PkaslaException):
    """Authentication required exception."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401)


class ValidationException(PkaslaException):
    """Validation error exception with field-level errors.

    Field-shape errors use 422; cross-field rule violations (missing
    credentials, incomplete storage config) are raised with 400.
    """

    def __init__(
        self,
        errors: list[dict] | str,
        message: str = "Validation failed",
        status_code: int = 422,
    ):
        if isinstance(errors, str):
            errors = [{"field": "general", "message": errors}]
        super().__init__(message, status_code)
        self.errors = errors


class UserContextError(PkaslaException):
    """User context not set error."""

    def __init__(self, message: str = "User context is required"):
        super().__init__(message, 401)


def field_errors(errors: list[dict]) -> list[dict]:
    """Flatten pydantic error dicts into ``{"field", "message"}`` pairs."""
    result = []
    for err in errors:
        # Drop the request location prefix ("body", "query") for API errors
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
        result.append({"field": ".".join(loc) or "general", "message": err.get("msg", "")})
    return result


def _error_content(exc: PkaslaException) -> dict:
    content = {
        "status": "error",
        "message": exc.message,
    }
    if hasattr(exc, "errors"):
        content["errors"] = exc.errors
    return content


def create_exception_handlers():
    """Create the JSON exception handlers registered on the application."""

    async def pkasla_exception_handler(request: Request, exc: PkaslaException):
        """Handle application exceptions."""
        logger.warning(
            f"{type(exc).__name__} on {request.method} {request.url.path}: "
            f"{exc.message} (status={exc.status_code})"
        )
        return JSONResponse(status_code=exc.status_code, content=_error_content(exc))

    async def validation_exception_handler(request: Request, exc: ValidationException):
        """Handle validation exceptions with field-level errors."""
        logger.warning(f"ValidationException on {request.method} {request.url.path}: {exc.errors}")
        return JSONResponse(status_code=exc.status_code, content=_error_content(exc))

    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Render FastAPI request validation errors in the standard envelope."""
        errors = field_errors(exc.errors())
        logger.warning(f"Request validation failed on {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=422,
            content={"status": "error", "message": "Validation failed", "errors": errors},
        )

    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}")
        logger.error(f"Exception: {type(exc).__name__}: {exc}")
        tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
        logger.error("".join(tb_lines))

        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "An unexpected error occurred",
            },
        )

    return {
        PkaslaException: pkasla_exception_handler,
        ValidationException: validation_exception_handler,
        RequestValidationError: request_validation_handler,
        Exception: generic_exception_handler,
    }
