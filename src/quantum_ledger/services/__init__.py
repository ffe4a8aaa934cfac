"""Service layer: authentication and portfolio valuation."""
from quantum_ledger.services.auth_service import AuthService
from quantum_ledger.services.portfolio_service import (DEMO_HOLDINGS,
                                                       FALLBACK_QUOTES,
                                                       PortfolioService,
                                                       acknowledge_trade,
                                                       compute_snapshot,
                                                       join_market_listing)

__all__ = [
    "AuthService",
    "DEMO_HOLDINGS",
    "FALLBACK_QUOTES",
    "PortfolioService",
    "acknowledge_trade",
    "compute_snapshot",
    "join_market_listing",
]
