"""Shared utilities for market data providers."""

DECIMALS = 2


def normalize_crypto_id(symbol: str) -> str:
    """Normalize a CoinGecko/crypto ID (lowercase, trimmed)."""
    return symbol.strip().lower()


def round2(x: float | None) -> float | None:
    """Round a value to 2 decimal places; preserve None."""
    if x is None:
        return None
    return round(float(x), DECIMALS)
