"""Provider registry - builds configured providers by name."""

import logging
from collections.abc import Callable
from datetime import timedelta

from pricefeed.config import settings
from pricefeed.services.providers.base import Provider
from pricefeed.services.providers.coingecko import CoinGeckoProvider

logger = logging.getLogger(__name__)


class ProviderNotFoundError(Exception):
    """Raised when no provider is registered under a name or concept."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Provider not found: {name}")


def _build_coin_gecko() -> CoinGeckoProvider:
    return CoinGeckoProvider(
        api_key=settings.coingecko_api_key or None,
        timeout=settings.coingecko_timeout,
        max_retries=settings.coingecko_max_retries,
        cache_duration=timedelta(seconds=settings.provider_cache_ttl_seconds),
    )


class ProviderRegistry:
    """Lookup of provider factories by name and by concept.

    Example:
        provider = ProviderRegistry.get_provider("coin_gecko")
        names = ProviderRegistry.for_concept("securities")
    """

    _factories: dict[str, Callable[[], Provider]] = {
        "coin_gecko": _build_coin_gecko,
    }

    _concepts: dict[str, list[str]] = {
        "securities": ["coin_gecko"],
    }

    @classmethod
    def get_provider(cls, name: str) -> Provider:
        factory = cls._factories.get(name)
        if factory is None:
            raise ProviderNotFoundError(name)

        logger.debug(f"Building provider {name}")
        return factory()

    @classmethod
    def for_concept(cls, concept: str) -> list[str]:
        """Names of the providers serving a concept, in preference order."""
        if concept not in cls._concepts:
            raise ProviderNotFoundError(concept)
        return list(cls._concepts[concept])
