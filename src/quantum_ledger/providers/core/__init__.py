"""Core provider abstractions."""
from quantum_ledger.providers.core.market_provider_abc import MarketProviderABC
from quantum_ledger.providers.core.utils import normalize_crypto_id, round2

__all__ = [
    "MarketProviderABC",
    "normalize_crypto_id",
    "round2",
]
