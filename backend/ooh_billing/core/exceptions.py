"""
Application exceptions and the global exception handlers for the FastAPI app.
Pricing errors are raised by the pure calculation helpers and serialized
into structured error bodies here.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Any


logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""
    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class PricingValidationError(AppException, ValueError):
    """Invalid pricing input: bad date range, negative rate, unknown mode."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, details=details)


class InvalidDateRangeError(PricingValidationError):
    """End date falls before start date."""
    def __init__(self, start_date: Any, end_date: Any):
        super().__init__(
            "End date must be on or after start date",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )


class NegativeRateError(PricingValidationError):
    def __init__(self, rate: Any):
        super().__init__(f"Monthly rate must not be negative, got {rate}", details={"monthly_rate": str(rate)})


class InvalidBookedDaysError(PricingValidationError):
    def __init__(self, days: Any):
        super().__init__(f"Booked days must be at least 1, got {days}", details={"booked_days": days})


class UnsupportedBillingModeError(PricingValidationError):
    def __init__(self, mode: Any):
        super().__init__(f"Unsupported billing mode: {mode!r}", details={"billing_mode": str(mode)})


class InvalidBulkRequestError(PricingValidationError):
    """A bulk operation was rejected before any update was produced."""
    pass


class DateParseError(AppException, ValueError):
    """A stored date string is not a canonical YYYY-MM-DD value."""
    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Invalid date string {value!r}, expected YYYY-MM-DD",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"value": value if isinstance(value, str) else repr(value)},
        )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom application exceptions."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"Application exception: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "details": exc.details,
                "path": request.url.path,
            }
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.detail,
                "status_code": exc.status_code,
                "path": request.url.path,
            }
        },
    )


def _serialize_validation_errors(errors: list) -> list:
    """Convert validation errors to JSON-serializable format."""
    serialized = []
    for error in errors:
        serialized_error = {}
        for key, value in error.items():
            if key == "ctx" and isinstance(value, dict):
                # ctx may hold the raised exception object
                serialized_error[key] = {
                    ctx_key: str(ctx_value) if isinstance(ctx_value, Exception) else ctx_value
                    for ctx_key, ctx_value in value.items()
                }
            elif isinstance(value, Exception):
                serialized_error[key] = str(value)
            else:
                serialized_error[key] = value
        serialized.append(serialized_error)
    return serialized


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    serialized_errors = _serialize_validation_errors(exc.errors())

    logger.warning(
        f"Validation error: {serialized_errors}",
        extra={
            "path": request.url.path,
            "errors": serialized_errors,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "message": "Validation error",
                "details": serialized_errors,
                "path": request.url.path,
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "message": "Internal server error",
                "path": request.url.path,
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
