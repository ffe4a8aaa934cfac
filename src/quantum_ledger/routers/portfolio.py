"""Portfolio routes for the signed-in user's dashboard.

Feed failures never reach these handlers: the portfolio service answers
with fallback prices instead, visible through the snapshot's source field.
"""
import logging

from fastapi import APIRouter

from quantum_ledger.deps import CurrentUser, ErrorMapperDep, PortfolioServiceDep
from quantum_ledger.errors import ValidationError
from quantum_ledger.schemas import (MarketPosition, PortfolioSnapshot,
                                    TradeAck, TradeRequest)
from quantum_ledger.services import acknowledge_trade

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("", response_model=PortfolioSnapshot)
async def get_portfolio(
    user: CurrentUser,
    portfolio_service: PortfolioServiceDep,
) -> PortfolioSnapshot:
    """Value the demo holdings against live prices (or fallback prices)."""
    snapshot = await portfolio_service.get_snapshot()
    logger.debug(
        "Portfolio for user %s: total=%.2f source=%s",
        user.id,
        snapshot.total_value,
        snapshot.source.value,
    )
    return snapshot


@router.get("/markets", response_model=list[MarketPosition])
async def get_market_positions(
    _user: CurrentUser,
    portfolio_service: PortfolioServiceDep,
) -> list[MarketPosition]:
    """Market listing with the user's amount attached to each asset held."""
    return await portfolio_service.get_market_positions()


@router.post("/trade", response_model=TradeAck)
async def trade(
    body: TradeRequest,
    _user: CurrentUser,
    error_mapper: ErrorMapperDep,
) -> TradeAck:
    """Acknowledge a buy/sell request. No order is placed and holdings do not change."""
    try:
        return acknowledge_trade(body)
    except ValidationError as exc:
        error_mapper.raise_http(exc)
