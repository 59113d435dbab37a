"""Securities API router - search, metadata and prices from the crypto provider."""

import logging
from datetime import date
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from pricefeed.rate_limiter import limiter
from pricefeed.schemas.security import (
    PriceResponse,
    ProviderHealthResponse,
    ProviderUsageResponse,
    SecurityInfoResponse,
    SecurityResponse,
)
from pricefeed.services.providers import (
    CoinGeckoProvider,
    InvalidSecurityPriceError,
    InvalidSymbolError,
    ProviderRegistry,
    ProviderResponse,
    RateLimitError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/securities", tags=["securities"])


@lru_cache(maxsize=1)
def get_securities_provider() -> CoinGeckoProvider:
    """Shared provider instance for the securities endpoints."""
    return ProviderRegistry.get_provider("coin_gecko")


def _unwrap(response: ProviderResponse):
    """Return response data or raise the matching HTTP error."""
    if response.success:
        return response.data

    error = response.error
    if isinstance(error, (InvalidSymbolError, InvalidSecurityPriceError)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, RateLimitError):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Price provider rate limit exceeded, try again later",
        )

    logger.error(f"Price provider error: {error}")
    raise HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Price provider error: {error}",
    )


@router.get("/search", response_model=list[SecurityResponse])
@limiter.limit("30/minute")
def search_securities(
    request: Request,
    symbol: str = Query(..., min_length=1, description="Ticker symbol to search for"),
    provider: CoinGeckoProvider = Depends(get_securities_provider),
) -> list[SecurityResponse]:
    """Search the provider for securities matching a ticker."""
    securities = _unwrap(provider.search_securities(symbol))
    return [SecurityResponse.model_validate(s) for s in securities]


@router.get("/provider/health", response_model=ProviderHealthResponse)
def provider_health(
    provider: CoinGeckoProvider = Depends(get_securities_provider),
) -> ProviderHealthResponse:
    return ProviderHealthResponse(provider=provider.provider_name, healthy=provider.healthy())


@router.get("/provider/usage", response_model=ProviderUsageResponse)
def provider_usage(
    provider: CoinGeckoProvider = Depends(get_securities_provider),
) -> ProviderUsageResponse:
    return ProviderUsageResponse.model_validate(_unwrap(provider.usage()))


@router.get("/{symbol}/info", response_model=SecurityInfoResponse)
def get_security_info(
    symbol: str,
    provider: CoinGeckoProvider = Depends(get_securities_provider),
) -> SecurityInfoResponse:
    """Get metadata (name, logo, description, homepage) for a ticker."""
    info = _unwrap(provider.fetch_security_info(symbol=symbol))
    return SecurityInfoResponse.model_validate(info)


@router.get("/{symbol}/price", response_model=PriceResponse)
def get_security_price(
    symbol: str,
    price_date: date | None = Query(None, alias="date", description="Defaults to today"),
    provider: CoinGeckoProvider = Depends(get_securities_provider),
) -> PriceResponse:
    """Get the price of a ticker on a date (current price for today)."""
    target_date = price_date if price_date is not None else provider.today()
    price = _unwrap(provider.fetch_security_price(symbol=symbol, date=target_date))
    return PriceResponse.model_validate(price)


@router.get("/{symbol}/prices", response_model=list[PriceResponse])
def get_security_prices(
    symbol: str,
    start_date: date,
    end_date: date,
    provider: CoinGeckoProvider = Depends(get_securities_provider),
) -> list[PriceResponse]:
    """Get daily closing prices for a date range."""
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be on or before end_date",
        )

    prices = _unwrap(
        provider.fetch_security_prices(symbol=symbol, start_date=start_date, end_date=end_date)
    )
    return [PriceResponse.model_validate(p) for p in prices]
