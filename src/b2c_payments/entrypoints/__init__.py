"""Entrypoints layer - Delivery mechanisms.

This layer contains:
- API: HTTP endpoints (FastAPI routes)

Entrypoints translate external requests into use case calls
and format responses for the delivery mechanism.
"""
