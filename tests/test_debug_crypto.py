"""Tests for the crypto debug script."""

from datetime import date
from unittest.mock import patch

import httpx
import pytest

from scripts.debug_crypto import main, parse_args

MARKET_CHART = {
    "prices": [
        [1705449600000, 2550.0],
        [1705536000000, 2600.0],
    ]
}


@pytest.fixture
def registry(provider):
    """Make the registry hand out the fake-API provider."""
    with (
        patch("scripts.debug_crypto.ProviderRegistry.get_provider", return_value=provider),
        patch.object(provider, "today", return_value=date(2024, 1, 18)),
    ):
        yield provider


def test_parse_args_defaults():
    args = parse_args([])

    assert args.symbol == "ETH"
    assert args.days == 5
    assert args.provider == "coin_gecko"


def test_reports_prices(registry, api, capsys):
    api.routes["/api/v3/ping"] = {"gecko_says": "(V3) To the Moon!"}
    api.routes["/api/v3/coins/ethereum"] = {"symbol": "eth", "name": "Ethereum"}
    api.routes["/api/v3/coins/ethereum/market_chart/range"] = MARKET_CHART

    exit_code = main(["eth", "--days", "1"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Healthy: True" in out
    assert "Name: Ethereum" in out
    assert "Fetching prices for 2024-01-17 to 2024-01-18" in out
    assert "Prices found: 2" in out
    assert "Date: 2024-01-18, Close: 2600.0 USD" in out


def test_reports_error_details(registry, api, capsys):
    api.routes["/api/v3/coins/ethereum/market_chart/range"] = httpx.Response(
        401, text='{"error": "invalid api key"}'
    )

    exit_code = main(["ETH"])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "Response Success: false" in out
    assert "Error Message: HTTP 401: Unauthorized" in out
    assert 'Error Details: {"error": "invalid api key"}' in out


def test_no_prices_is_an_error(registry, api, capsys):
    api.routes["/api/v3/coins/ethereum/market_chart/range"] = {"prices": []}

    assert main(["ETH"]) == 1
    assert "ERROR: No prices returned" in capsys.readouterr().out
