"""Payment routes under /api/v1/payments.

Handlers are plain (sync) functions: the use cases block on the provider
call and store writes, so FastAPI runs them in its threadpool.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from b2c_payments.application.dtos import InitiatePaymentRequest, ProviderStatusUpdate
from b2c_payments.bootstrap import PaymentsApplication
from b2c_payments.entrypoints.api.schemas import (
    ErrorResponse,
    InitiatePaymentBody,
    ProviderStatusCallbackBody,
    TransactionResponse,
)

logger = structlog.get_logger(__name__)

NOT_FOUND_DETAIL = "Payment transaction not found."

payment_router = APIRouter(prefix="/api/v1/payments", tags=["payments"])


def get_application(request: Request) -> PaymentsApplication:
    return request.app.state.payments


Application = Annotated[PaymentsApplication, Depends(get_application)]


def _not_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=ErrorResponse(detail=NOT_FOUND_DETAIL).model_dump(by_alias=True, exclude_none=True),
    )


@payment_router.post(
    "/initiate",
    status_code=status.HTTP_201_CREATED,
    response_model=TransactionResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def initiate_payment(body: InitiatePaymentBody, app: Application) -> TransactionResponse:
    """Initiate a B2C payment to a mobile-money wallet."""
    transaction = app.initiate_payment.execute(
        InitiatePaymentRequest(
            recipient_phone_number=body.recipient_phone_number,
            amount=body.amount,
            currency=body.currency,
            provider=body.provider,
            description=body.description,
        )
    )
    return TransactionResponse.from_transaction(transaction)


@payment_router.get(
    "/{transaction_id}/status",
    response_model=TransactionResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_payment_status(transaction_id: str, app: Application) -> TransactionResponse | JSONResponse:
    """Return the current state of a payment."""
    transaction = app.get_payment_status.execute(transaction_id)
    if transaction is None:
        return _not_found()
    return TransactionResponse.from_transaction(transaction)


@payment_router.post(
    "/{transaction_id}/refresh",
    response_model=TransactionResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def refresh_payment_status(
    transaction_id: str, app: Application
) -> TransactionResponse | JSONResponse:
    """Reconcile a payment with the provider's current status."""
    transaction = app.refresh_payment_status.execute(transaction_id)
    if transaction is None:
        return _not_found()
    return TransactionResponse.from_transaction(transaction)


@payment_router.post(
    "/callbacks/status",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def provider_status_callback(body: ProviderStatusCallbackBody, app: Application) -> Response:
    """Receive a status change pushed by a provider.

    Always 204 for a well-formed body, including unknown provider IDs,
    so providers do not keep re-delivering stale callbacks.
    """
    app.apply_provider_status_update.execute(
        ProviderStatusUpdate(
            provider_transaction_id=body.provider_transaction_id,
            status=body.new_status,
            failure_reason=body.failure_reason,
        )
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
