"""Pydantic schemas for security search, metadata and price endpoints."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class SecurityResponse(BaseModel):
    """Security search result."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    name: str | None = None
    logo_url: str | None = None
    exchange_operating_mic: str | None = None
    country_code: str | None = None


class SecurityInfoResponse(BaseModel):
    """Security metadata."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    name: str | None = None
    links: str | None = Field(None, description="Primary homepage URL")
    logo_url: str | None = None
    description: str | None = None
    kind: str | None = None
    exchange_operating_mic: str | None = None


class PriceResponse(BaseModel):
    """Closing price for a single day."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    date: date
    price: Decimal
    currency: str
    exchange_operating_mic: str | None = None


class ProviderHealthResponse(BaseModel):
    provider: str
    healthy: bool


class ProviderUsageResponse(BaseModel):
    """API usage as reported by the provider."""

    model_config = ConfigDict(from_attributes=True)

    used: int
    limit: int
    utilization: float
    plan: str
