"""External data providers.

- Provider / ProviderResponse: uniform response wrapper shared by providers
- CoinGeckoProvider: cryptocurrency prices and metadata from CoinGecko
- ProviderRegistry: builds configured providers by name

Usage:
    from pricefeed.services.providers import ProviderRegistry

    provider = ProviderRegistry.get_provider("coin_gecko")
    response = provider.search_securities("ETH")
"""

from .base import Provider, ProviderError, ProviderResponse, UsageData
from .coingecko import (
    CoinGeckoError,
    CoinGeckoProvider,
    InvalidSecurityPriceError,
    InvalidSymbolError,
    RateLimitError,
)
from .registry import ProviderNotFoundError, ProviderRegistry
from .security_concept import Price, Security, SecurityConcept, SecurityInfo

__all__ = [
    "CoinGeckoError",
    "CoinGeckoProvider",
    "InvalidSecurityPriceError",
    "InvalidSymbolError",
    "Price",
    "Provider",
    "ProviderError",
    "ProviderNotFoundError",
    "ProviderRegistry",
    "ProviderResponse",
    "RateLimitError",
    "Security",
    "SecurityConcept",
    "SecurityInfo",
    "UsageData",
]
