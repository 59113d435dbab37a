"""Debug crypto price sync against CoinGecko.

Walks the same provider calls the market data import makes for one ticker
and prints what comes back, so a missing-prices report can be narrowed down
to symbol resolution, the API, or the caller.

Run from the repository root:
    python scripts/debug_crypto.py [SYMBOL] [--days N] [--provider NAME]
"""

import argparse
import logging
import sys
from datetime import timedelta

from pricefeed.config import settings
from pricefeed.services.providers import ProviderRegistry, ProviderResponse

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def print_response(response: ProviderResponse) -> None:
    """Print success flag and error details of a provider response."""
    if response.success:
        print("Response Success: true")
        return

    print("Response Success: false")
    print(f"Error Message: {response.error.message}")
    if response.error.details:
        print(f"Error Details: {response.error.details}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Debug crypto price fetching for one ticker")
    parser.add_argument("symbol", nargs="?", default="ETH", help="Ticker symbol (default: ETH)")
    parser.add_argument("--days", type=int, default=5, help="Days of history to fetch")
    parser.add_argument("--provider", default="coin_gecko", help="Registered provider name")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    provider = ProviderRegistry.get_provider(args.provider)
    symbol = args.symbol.upper()

    print(f"Provider: {provider.provider_name}")
    print(f"Healthy: {provider.healthy()}")

    print(f"\nSearching for {symbol}...")
    search = provider.search_securities(symbol)
    print_response(search)
    if search.success:
        for security in search.data[:5]:
            print(f"  {security.symbol}: {security.name} ({security.exchange_operating_mic})")

    print(f"\nResolving CoinGecko ID for {symbol}...")
    info = provider.fetch_security_info(symbol=symbol)
    print_response(info)
    if info.success:
        print(f"  Name: {info.data.name}")
        print(f"  Homepage: {info.data.links}")

    end_date = provider.today()
    start_date = end_date - timedelta(days=args.days)

    print(f"\nFetching prices for {start_date} to {end_date}...")
    response = provider.fetch_security_prices(
        symbol=symbol,
        start_date=start_date,
        end_date=end_date,
    )
    print_response(response)

    if not response.success:
        return 1

    prices = response.data
    print(f"Prices found: {len(prices)}")
    for price in prices:
        print(f"  Price: {price.symbol}, Date: {price.date}, Close: {price.price} {price.currency}")

    if not prices:
        print("ERROR: No prices returned for the range")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
