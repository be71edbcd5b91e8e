"""Exception handlers mapping the error taxonomy onto HTTP responses.

    ValidationError, malformed body  -> 400
    PaymentError                     -> 502 (+ transactionId of the FAILED record)
    ExternalServiceError             -> 502
    anything else                    -> 500
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from b2c_payments.domain.exceptions import ExternalServiceError, PaymentError, ValidationError
from b2c_payments.entrypoints.api.schemas import ErrorResponse

logger = structlog.get_logger(__name__)


def _error(status_code: int, detail: str, transaction_id: str | None = None) -> JSONResponse:
    body = ErrorResponse(detail=detail, transaction_id=transaction_id)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("request_rejected", error=str(exc), error_type=type(exc).__name__)
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = f"{location}: {first.get('msg', 'Invalid request')}" if location else "Invalid request"
    logger.warning("request_body_invalid", detail=detail, error_count=len(errors))
    return _error(status.HTTP_400_BAD_REQUEST, detail)


async def handle_payment_error(request: Request, exc: PaymentError) -> JSONResponse:
    logger.error(
        "payment_request_failed",
        error=str(exc),
        cause=str(exc.__cause__) if exc.__cause__ else None,
        transaction_id=exc.transaction_id,
    )
    return _error(status.HTTP_502_BAD_GATEWAY, str(exc), transaction_id=exc.transaction_id)


async def handle_external_service_error(
    request: Request, exc: ExternalServiceError
) -> JSONResponse:
    logger.error("external_service_error", error=str(exc))
    return _error(status.HTTP_502_BAD_GATEWAY, "Error communicating with external service.")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", error=str(exc), exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "An internal server error occurred.")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(PaymentError, handle_payment_error)
    app.add_exception_handler(ExternalServiceError, handle_external_service_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
