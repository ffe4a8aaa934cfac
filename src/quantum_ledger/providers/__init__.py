"""Market data providers.

All providers implement MarketProviderABC and return MarketQuote objects.
Failures are raised as FeedError so callers handle one exception type.

Example:
    async with CoinGeckoProvider() as provider:
        quotes = await provider.get_markets(["bitcoin", "ethereum"])
        for quote in quotes:
            print(f"{quote.symbol}: ${quote.current_price}")
"""
from quantum_ledger.providers.core import MarketProviderABC
from quantum_ledger.providers.crypto import CoinGeckoProvider

__all__ = [
    "CoinGeckoProvider",
    "MarketProviderABC",
]
