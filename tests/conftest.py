"""Shared test fixtures for provider tests."""

from typing import Any

import httpx
import pytest

from pricefeed.services.providers.coingecko import COINGECKO_BASE_URL, CoinGeckoProvider
from pricefeed.services.shared.cache import MemoryCache
from pricefeed.services.shared.http_client import HTTPClient

SEARCH_ETH = {
    "coins": [
        {
            "id": "ethereum-wormhole",
            "symbol": "WETH",
            "name": "Wrapped Ether (Wormhole)",
            "thumb": "https://assets.coingecko.com/coins/images/weth/thumb.png",
        },
        {
            "id": "ethereum",
            "symbol": "eth",
            "name": "Ethereum",
            "thumb": "https://assets.coingecko.com/coins/images/279/thumb/ethereum.png",
        },
    ]
}


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCoinGeckoAPI:
    """Records requests and answers them from a path -> response table.

    A route value may be a JSON-serializable payload (served with 200), an
    httpx.Response, or a callable taking the request.
    """

    def __init__(self):
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "coin not found"})
        if callable(route):
            return route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Isolated cache store so tests never share cached results."""
    return MemoryCache(clock=clock)


@pytest.fixture
def api():
    fake = FakeCoinGeckoAPI()
    fake.routes["/api/v3/search"] = SEARCH_ETH
    return fake


@pytest.fixture
def provider(api, cache):
    """CoinGecko provider wired to the fake API with no retry delay."""
    http_client = HTTPClient(
        base_url=COINGECKO_BASE_URL,
        timeout=10.0,
        transport=httpx.MockTransport(api),
        retry_interval=0,
    )
    yield CoinGeckoProvider(cache=cache, http_client=http_client)
    http_client.close()
