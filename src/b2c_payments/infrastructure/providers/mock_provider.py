from __future__ import annotations

import time
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from b2c_payments.application.ports import MobileMoneyProvider
from b2c_payments.domain.entities import TransactionStatus
from b2c_payments.domain.exceptions import ExternalServiceError

if TYPE_CHECKING:
    from b2c_payments.domain.entities import Transaction

logger = structlog.get_logger(__name__)


class MockMobileMoneyProvider(MobileMoneyProvider):
    """Provider adapter that simulates a mobile-money network.

    Makes no network calls. initiate() returns "MOCK_<uuid4>" and
    check_status() always reports SUCCESS, each after a simulated latency.
    When failure_message is set, every call raises ExternalServiceError
    with that message instead.
    """

    def __init__(
        self,
        latency_seconds: float = 0.0,
        failure_message: str | None = None,
        provider_type: str = "MOCK",
    ) -> None:
        self._latency_seconds = latency_seconds
        self._failure_message = failure_message
        self._provider_type = provider_type

    @property
    def provider_type(self) -> str:
        return self._provider_type

    def initiate(self, transaction: Transaction) -> str:
        logger.info("mock_provider_initiate", transaction_id=str(transaction.id))
        self._simulate_network()
        provider_transaction_id = f"{self._provider_type}_{uuid4()}"
        logger.info(
            "mock_provider_initiated",
            transaction_id=str(transaction.id),
            provider_transaction_id=provider_transaction_id,
        )
        return provider_transaction_id

    def check_status(self, provider_transaction_id: str) -> TransactionStatus:
        logger.info("mock_provider_check_status", provider_transaction_id=provider_transaction_id)
        self._simulate_network()
        return TransactionStatus.SUCCESS

    def _simulate_network(self) -> None:
        if self._latency_seconds > 0:
            time.sleep(self._latency_seconds)
        if self._failure_message:
            raise ExternalServiceError(self._failure_message)
