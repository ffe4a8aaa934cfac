"""Cryptocurrency market data providers."""
from quantum_ledger.providers.crypto.coingecko import CoinGeckoProvider

__all__ = ["CoinGeckoProvider"]
