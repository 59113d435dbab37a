"""CoinGecko provider for cryptocurrency prices and metadata.

Resolves ticker symbols to CoinGecko coin IDs through the search endpoint,
then fetches current prices, historical prices and coin metadata. Search
results are cached in the shared cache store for five minutes.
"""

import logging
import threading
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any

from pricefeed.services.providers.base import (
    Provider,
    ProviderError,
    UsageData,
    provider_response,
)
from pricefeed.services.providers.security_concept import (
    Price,
    Security,
    SecurityConcept,
    SecurityInfo,
)
from pricefeed.services.shared.cache import MemoryCache
from pricefeed.services.shared.cache import cache as shared_cache
from pricefeed.services.shared.http_client import HTTPClient, HTTPClientError

logger = logging.getLogger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com"
COINGECKO_PRO_URL = "https://pro-api.coingecko.com"

# Crypto trades on no single exchange and has no country
CRYPTO_MIC = "CRYPTO"
QUOTE_CURRENCY = "usd"

# Cache duration for repeated requests
CACHE_DURATION = timedelta(minutes=5)


class CoinGeckoError(ProviderError):
    """Exception raised for CoinGecko provider errors."""


class InvalidSecurityPriceError(CoinGeckoError):
    """No price available for the requested symbol/date."""


class InvalidSymbolError(CoinGeckoError):
    """Symbol could not be resolved to a CoinGecko coin ID."""


class RateLimitError(CoinGeckoError):
    """CoinGecko rejected the request with HTTP 429."""


class CoinGeckoProvider(Provider, SecurityConcept):
    """Securities provider backed by the CoinGecko API.

    Uses the Pro API when an API key is given, the public API otherwise.

    Usage:
        provider = CoinGeckoProvider()
        response = provider.fetch_security_price(symbol="BTC", date=date(2024, 1, 15))
        if response.success:
            print(response.data.price)
    """

    Error = CoinGeckoError
    provider_name = "coingecko"

    def __init__(
        self,
        api_key: str | None = None,
        cache: MemoryCache | None = None,
        http_client: HTTPClient | None = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        cache_duration: timedelta = CACHE_DURATION,
    ):
        """Initialize CoinGecko provider.

        Args:
            api_key: Optional Pro API key
            cache: Cache store (defaults to the shared store)
            http_client: Preconfigured HTTP client, mainly for tests
            timeout: Request timeout in seconds
            max_retries: Retries on timeouts and connection failures
            cache_duration: How long search results stay cached
        """
        self.api_key = api_key or None
        self.timeout = timeout
        self.max_retries = max_retries
        self.cache_duration = cache_duration
        self._cache = cache if cache is not None else shared_cache
        self._cache_prefix = "coingecko"
        self._client = http_client
        self._client_lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return COINGECKO_PRO_URL if self.api_key else COINGECKO_BASE_URL

    @property
    def client(self) -> HTTPClient:
        """Lazy initialization of the HTTP client."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    headers = {"Accept": "application/json"}
                    if self.api_key:
                        headers["x-cg-pro-api-key"] = self.api_key
                    self._client = HTTPClient(
                        base_url=self.base_url,
                        timeout=self.timeout,
                        max_retries=self.max_retries,
                        headers=headers,
                    )
        return self._client

    def transform_error(self, error: Exception) -> ProviderError:
        if isinstance(error, HTTPClientError) and error.status_code == 429:
            return RateLimitError("Rate limit exceeded", details=error.response_body)
        return super().transform_error(error)

    def healthy(self) -> bool:
        """Check that the API answers its ping endpoint."""
        response = self._ping()
        return response.success and bool(response.data)

    @provider_response
    def _ping(self) -> bool:
        response = self.client.get("/api/v3/ping")
        return response.status_code == 200

    @provider_response
    def usage(self) -> UsageData:
        # CoinGecko has no usage endpoint on the free tier
        return UsageData(
            used=0,
            limit=0,
            utilization=0,
            plan="Pro" if self.api_key else "Free",
        )

    # ================================
    #           Securities
    # ================================

    @provider_response
    def search_securities(
        self,
        symbol: str,
        country_code: str | None = None,
        exchange_operating_mic: str | None = None,
    ) -> list[Security]:
        coins = self._search_coins(symbol)
        return [
            Security(
                symbol=(coin.get("symbol") or "").upper(),
                name=coin.get("name"),
                logo_url=coin.get("thumb"),
                exchange_operating_mic=CRYPTO_MIC,
                country_code=None,
            )
            for coin in coins
        ]

    @provider_response
    def fetch_security_info(
        self, symbol: str, exchange_operating_mic: str | None = None
    ) -> SecurityInfo:
        coin_id = self._require_coin_id(symbol)

        params = {
            "tickers": "false",
            "market_data": "false",
            "community_data": "false",
            "developer_data": "false",
            "sparkline": "false",
        }
        data = self.client.get_json(f"/api/v3/coins/{coin_id}", params=params)

        homepages = (data.get("links") or {}).get("homepage") or []
        coin_symbol = data.get("symbol")

        return SecurityInfo(
            symbol=coin_symbol.upper() if coin_symbol else symbol,
            name=data.get("name"),
            links=homepages[0] if homepages else None,
            logo_url=(data.get("image") or {}).get("large"),
            description=(data.get("description") or {}).get("en"),
            kind="cryptocurrency",
            exchange_operating_mic=CRYPTO_MIC,
        )

    @provider_response
    def fetch_security_price(
        self,
        symbol: str,
        date: date,
        exchange_operating_mic: str | None = None,
    ) -> Price:
        coin_id = self._require_coin_id(symbol)

        if date == self.today():
            return self._fetch_current_price(coin_id, symbol)
        return self._fetch_historical_price(coin_id, symbol, date)

    @provider_response
    def fetch_security_prices(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
        exchange_operating_mic: str | None = None,
    ) -> list[Price]:
        if start_date > end_date:
            raise CoinGeckoError(f"Start date {start_date} is after end date {end_date}")

        coin_id = self._require_coin_id(symbol)

        # Convert dates to UNIX timestamps
        from_ts = int(datetime.combine(start_date, datetime.min.time(), tzinfo=UTC).timestamp())
        to_ts = int(datetime.combine(end_date, datetime.max.time(), tzinfo=UTC).timestamp())

        params = {"vs_currency": QUOTE_CURRENCY, "from": from_ts, "to": to_ts}
        data = self.client.get_json(f"/api/v3/coins/{coin_id}/market_chart/range", params=params)

        # prices is [[timestamp_ms, price], ...], possibly several points per day.
        # The last point of each day is its close.
        closes: dict[date, Any] = {}
        for timestamp_ms, price in data.get("prices") or []:
            if price is None:
                continue
            day = datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC).date()
            closes[day] = price

        prices = [
            Price(
                symbol=symbol,
                date=day,
                price=Decimal(str(close)),
                currency="USD",
                exchange_operating_mic=CRYPTO_MIC,
            )
            for day, close in sorted(closes.items())
            if start_date <= day <= end_date
        ]

        logger.info(f"Fetched {len(prices)} daily prices for {symbol} ({coin_id})")
        return prices

    # ================================
    #         Coin resolution
    # ================================

    def resolve_coin_id(self, symbol: str) -> str | None:
        """Map a ticker to a CoinGecko coin ID.

        Prefers an exact (case-insensitive) symbol match among the search
        results, falling back to the top result.
        """
        coins = self._search_coins(symbol)

        for coin in coins:
            if (coin.get("symbol") or "").upper() == symbol.upper():
                return coin.get("id")

        return coins[0].get("id") if coins else None

    def _require_coin_id(self, symbol: str) -> str:
        coin_id = self.resolve_coin_id(symbol)
        if not coin_id:
            raise InvalidSymbolError(f"Could not resolve CoinGecko ID for {symbol}")
        return coin_id

    def _search_coins(self, symbol: str) -> list[dict]:
        cache_key = f"search_{symbol}"
        cached = self._get_cached_result(cache_key)
        if cached is not None:
            return cached

        data = self.client.get_json("/api/v3/search", params={"query": symbol})
        coins = data.get("coins") or []

        self._cache_result(cache_key, coins)
        return coins

    # ================================
    #             Prices
    # ================================

    def today(self) -> date:
        return datetime.now(UTC).date()

    def _fetch_current_price(self, coin_id: str, symbol: str) -> Price:
        params = {"ids": coin_id, "vs_currencies": QUOTE_CURRENCY}
        data = self.client.get_json("/api/v3/simple/price", params=params)

        price = (data.get(coin_id) or {}).get(QUOTE_CURRENCY)
        if price is None:
            raise InvalidSecurityPriceError(f"No price found for {symbol}")

        return Price(
            symbol=symbol,
            date=self.today(),
            price=Decimal(str(price)),
            currency="USD",
            exchange_operating_mic=CRYPTO_MIC,
        )

    def _fetch_historical_price(self, coin_id: str, symbol: str, target_date: date) -> Price:
        # CoinGecko expects date in dd-mm-yyyy format
        params = {"date": target_date.strftime("%d-%m-%Y"), "localization": "false"}
        data = self.client.get_json(f"/api/v3/coins/{coin_id}/history", params=params)

        price = ((data.get("market_data") or {}).get("current_price") or {}).get(QUOTE_CURRENCY)
        if price is None:
            raise InvalidSecurityPriceError(
                f"No historical price found for {symbol} on {target_date}"
            )

        return Price(
            symbol=symbol,
            date=target_date,
            price=Decimal(str(price)),
            currency="USD",
            exchange_operating_mic=CRYPTO_MIC,
        )

    # ================================
    #             Caching
    # ================================

    def _get_cached_result(self, key: str) -> Any | None:
        return self._cache.read(f"{self._cache_prefix}_{key}")

    def _cache_result(self, key: str, data: Any) -> None:
        self._cache.write(f"{self._cache_prefix}_{key}", data, expires_in=self.cache_duration)


__all__ = [
    "CACHE_DURATION",
    "CoinGeckoError",
    "CoinGeckoProvider",
    "InvalidSecurityPriceError",
    "InvalidSymbolError",
    "RateLimitError",
]
