"""Pydantic schemas for API responses."""

from .security import (
    PriceResponse,
    ProviderHealthResponse,
    ProviderUsageResponse,
    SecurityInfoResponse,
    SecurityResponse,
)

__all__ = [
    "PriceResponse",
    "ProviderHealthResponse",
    "ProviderUsageResponse",
    "SecurityInfoResponse",
    "SecurityResponse",
]
