"""HTTP API - FastAPI routes, schemas and exception handlers."""

from b2c_payments.entrypoints.api.app import create_app

__all__ = [
    "create_app",
]
