"""CoinGecko provider package."""
from quantum_ledger.providers.crypto.coingecko.coin_gecko_provider import (
    CoinGeckoProvider,
)

__all__ = ["CoinGeckoProvider"]
