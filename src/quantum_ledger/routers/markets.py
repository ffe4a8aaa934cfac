"""Public market listing (the landing page price table)."""
import logging

from fastapi import APIRouter

from quantum_ledger.deps import ErrorMapperDep, MarketProviderDep
from quantum_ledger.errors import FeedError
from quantum_ledger.schemas import MarketQuote

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/markets", tags=["markets"])


@router.get("/overview", response_model=list[MarketQuote])
async def get_market_overview(
    provider: MarketProviderDep,
    error_mapper: ErrorMapperDep,
) -> list[MarketQuote]:
    """Top coins by market cap with current price and 24h change.

    Unlike the portfolio routes there is no fallback here; a feed failure
    is reported as 502 (504 on timeout).
    """
    try:
        return await provider.get_overview_quotes()
    except FeedError as exc:
        logger.warning("Markets overview failed: %s", exc)
        error_mapper.raise_http(exc)
