"""API routers.

Includes routes for:
- /api - Registration, login and token verification
- /portfolio - Valuation of the demo holdings (bearer token required)
- /markets - Public market listing (CoinGecko)
"""
from quantum_ledger.routers.auth import router as auth_router
from quantum_ledger.routers.markets import router as markets_router
from quantum_ledger.routers.portfolio import router as portfolio_router

__all__ = [
    "auth_router",
    "markets_router",
    "portfolio_router",
]
