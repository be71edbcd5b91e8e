from __future__ import annotations

import time

import structlog

from b2c_payments.application.ports import SmsGateway
from b2c_payments.domain.value_objects import PhoneNumber

logger = structlog.get_logger(__name__)


class LoggingSmsGateway(SmsGateway):
    """SMS channel that logs messages instead of sending them.

    Stands in for a real SMS provider in development and tests.
    """

    def __init__(self, latency_seconds: float = 0.0) -> None:
        self._latency_seconds = latency_seconds

    def send(self, phone_number: str, message: str) -> None:
        if self._latency_seconds > 0:
            time.sleep(self._latency_seconds)
        logger.info(
            "sms_sent",
            recipient=PhoneNumber(value=phone_number).masked(),
            sms_body=message,
        )
