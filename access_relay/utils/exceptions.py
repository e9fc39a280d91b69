"""
Exception handling utilities.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models.responses import FieldError, ProviderFailure


class AccessRelayException(Exception):
    """Base exception for access relay operations."""

    def __init__(self, message: str, details: dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InputValidationException(AccessRelayException):
    """Raised when inbound fields fail validation."""

    def __init__(self, errors: list[FieldError]):
        super().__init__("Request validation failed")
        self.errors = errors
        self.details = {"errors": [error.model_dump() for error in errors]}


class NotifierException(AccessRelayException):
    """Exception for notification transport failures."""

    pass


class ProviderException(AccessRelayException):
    """Exception for access provider failures."""

    def __init__(self, failure: ProviderFailure):
        super().__init__(f"Access provider call failed: {failure.kind}")
        self.failure = failure
        self.details = failure.model_dump()


class ConfigurationException(AccessRelayException):
    """Exception for configuration-related issues."""

    pass


def _field_errors_from_pydantic(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    field_errors = []
    for error in errors:
        location = error.get("loc") or ("request",)
        field_errors.append({"field": str(location[-1]), "message": error.get("msg", "Invalid value")})
    return field_errors


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Setup custom exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(InputValidationException)
    async def input_validation_exception_handler(request: Request, exc: InputValidationException) -> JSONResponse:
        """Handle field-level validation failures."""
        logger.warning("Validation error", path=request.url.path, errors=exc.details["errors"])

        return JSONResponse(status_code=400, content=exc.details)

    @app.exception_handler(AccessRelayException)
    async def access_relay_exception_handler(request: Request, exc: AccessRelayException) -> JSONResponse:
        """Handle custom access relay exceptions."""
        logger.error("Access relay error: {}", exc.message, details=exc.details)

        return JSONResponse(status_code=500, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")

        return JSONResponse(status_code=400, content={"errors": _field_errors_from_pydantic(exc.errors())})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions."""
        logger.warning(f"HTTP error {exc.status_code}: {exc.detail}")

        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle general exceptions."""
        logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")

        return JSONResponse(status_code=500, content={"message": "An unexpected error occurred"})
