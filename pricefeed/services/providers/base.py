"""Provider base class and the uniform response wrapper.

Every public provider call returns a ProviderResponse instead of raising, so
callers (importers, routers, scripts) handle failures in one way:

    response = provider.fetch_security_prices(symbol="BTC", start_date=..., end_date=...)
    if response.success:
        prices = response.data
    else:
        logger.warning(response.error)
"""

import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pricefeed.services.shared.http_client import HTTPClientError

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


@dataclass(frozen=True)
class ProviderResponse:
    """Result of a provider call."""

    success: bool
    data: Any | None = None
    error: ProviderError | None = None


@dataclass(frozen=True)
class UsageData:
    """API usage reported by a provider."""

    used: int
    limit: int
    utilization: float
    plan: str


def provider_response(method: Callable) -> Callable:
    """Wrap a provider method so it returns a ProviderResponse.

    Exceptions raised by the method are converted with the provider's
    ``transform_error`` and returned as a failed response.
    """

    @functools.wraps(method)
    def wrapper(self: "Provider", *args, **kwargs) -> ProviderResponse:
        try:
            data = method(self, *args, **kwargs)
        except Exception as e:
            error = self.transform_error(e)
            logger.warning(f"{self.provider_name} {method.__name__} failed: {error}")
            return ProviderResponse(success=False, error=error)
        return ProviderResponse(success=True, data=data)

    return wrapper


class Provider(ABC):
    """Base class for external data providers.

    Subclasses set ``Error`` to their own ProviderError subclass so that
    errors caught in the provider are raised as that type.
    """

    Error: type[ProviderError] = ProviderError
    provider_name: str = "provider"

    def transform_error(self, error: Exception) -> ProviderError:
        """Convert any exception into this provider's error family."""
        if isinstance(error, self.Error):
            return error
        if isinstance(error, HTTPClientError):
            return self.Error(str(error), details=error.response_body)
        return self.Error(str(error))

    @abstractmethod
    def healthy(self) -> bool:
        """Whether the provider API is reachable."""

    @abstractmethod
    def usage(self) -> ProviderResponse:
        """API usage for the current plan. Data: UsageData."""
