"""Data shapes and interface for providers that serve securities."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date as date_type
from decimal import Decimal

from pricefeed.services.providers.base import ProviderResponse


@dataclass(frozen=True)
class Security:
    """Search result for a security."""

    symbol: str
    name: str | None
    logo_url: str | None
    exchange_operating_mic: str | None
    country_code: str | None = None


@dataclass(frozen=True)
class SecurityInfo:
    """Descriptive metadata for a security."""

    symbol: str
    name: str | None
    links: str | None
    logo_url: str | None
    description: str | None
    kind: str | None
    exchange_operating_mic: str | None


@dataclass(frozen=True)
class Price:
    """Single closing price for a security.

    security_id is left unset by providers and populated by the caller.
    """

    symbol: str
    date: date_type
    price: Decimal
    currency: str
    exchange_operating_mic: str | None = None
    security_id: int | None = None


class SecurityConcept(ABC):
    """Interface for providers that can search and price securities."""

    @abstractmethod
    def search_securities(
        self,
        symbol: str,
        country_code: str | None = None,
        exchange_operating_mic: str | None = None,
    ) -> ProviderResponse:
        """Search for securities matching a ticker. Data: list[Security]."""

    @abstractmethod
    def fetch_security_info(
        self, symbol: str, exchange_operating_mic: str | None = None
    ) -> ProviderResponse:
        """Fetch metadata for a ticker. Data: SecurityInfo."""

    @abstractmethod
    def fetch_security_price(
        self,
        symbol: str,
        date: date_type,
        exchange_operating_mic: str | None = None,
    ) -> ProviderResponse:
        """Fetch the price of a ticker on a date. Data: Price."""

    @abstractmethod
    def fetch_security_prices(
        self,
        symbol: str,
        start_date: date_type,
        end_date: date_type,
        exchange_operating_mic: str | None = None,
    ) -> ProviderResponse:
        """Fetch daily closing prices for a date range. Data: list[Price]."""
