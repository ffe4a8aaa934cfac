"""Portfolio valuation: merge fixed holdings with a market quote batch.

compute_snapshot() and join_market_listing() are pure. PortfolioService is the
only part that talks to the market data feed, and it never lets a feed
failure reach its caller: it values the portfolio against FALLBACK_QUOTES
instead and tags the snapshot with source="fallback".
"""
import logging
from collections.abc import Iterable, Sequence

from quantum_ledger.errors import FeedError, ValidationError
from quantum_ledger.providers import MarketProviderABC
from quantum_ledger.schemas import (EnrichedHolding, Holding, MarketPosition,
                                    MarketQuote, PortfolioSnapshot,
                                    PriceSource, TradeAck, TradeRequest)

logger = logging.getLogger(__name__)

DEMO_HOLDINGS: tuple[Holding, ...] = (
    Holding(asset_id="bitcoin", symbol="BTC", label="Bitcoin (BTC)", amount=0.35),
    Holding(asset_id="ethereum", symbol="ETH", label="Ethereum (ETH)", amount=4.8),
    Holding(asset_id="tether", symbol="USDT", label="Tether (USDT)", amount=3000),
    Holding(asset_id="solana", symbol="SOL", label="Solana (SOL)", amount=45),
)

# Static approximations (USD price, 24h change %) used when the feed is down.
FALLBACK_QUOTES: tuple[MarketQuote, ...] = (
    MarketQuote(asset_id="bitcoin", symbol="BTC", name="Bitcoin",
                current_price=26000.0, change_24h_percent=3.2),
    MarketQuote(asset_id="ethereum", symbol="ETH", name="Ethereum",
                current_price=1800.0, change_24h_percent=1.4),
    MarketQuote(asset_id="tether", symbol="USDT", name="Tether",
                current_price=1.0, change_24h_percent=0.0),
    MarketQuote(asset_id="solana", symbol="SOL", name="Solana",
                current_price=150.0, change_24h_percent=5.1),
)


def _index_by_asset(quotes: Iterable[MarketQuote]) -> dict[str, MarketQuote]:
    """Last quote wins if the feed repeats an asset."""
    return {q.asset_id: q for q in quotes}


def enrich_holding(holding: Holding, quote: MarketQuote | None) -> EnrichedHolding:
    """Price one holding; an unpriced holding is worth 0, not an error."""
    price = quote.current_price if quote is not None else 0.0
    change = quote.change_24h_percent if quote is not None else None
    return EnrichedHolding(
        **holding.model_dump(),
        price=price,
        value=price * holding.amount,
        change_24h_percent=change or 0.0,
    )


def compute_snapshot(
    holdings: Sequence[Holding],
    quotes: Iterable[MarketQuote],
    source: PriceSource = PriceSource.LIVE,
) -> PortfolioSnapshot:
    """Value holdings against a quote batch.

    Holdings are processed in order: total_value is summed in that order and
    the top asset is the first holding to reach the maximum value (strict >).

    Args:
        holdings: The fixed holdings list.
        quotes: Quote batch keyed by asset_id; may omit assets or include extras.
        source: Tag recording whether quotes are live or fallback data.

    Returns:
        PortfolioSnapshot; top_asset is None only when holdings is empty.
    """
    by_asset = _index_by_asset(quotes)
    enriched: list[EnrichedHolding] = []
    total_value = 0.0
    top_asset: EnrichedHolding | None = None
    for holding in holdings:
        item = enrich_holding(holding, by_asset.get(holding.asset_id))
        total_value += item.value
        if top_asset is None or item.value > top_asset.value:
            top_asset = item
        enriched.append(item)
    return PortfolioSnapshot(
        holdings=enriched,
        total_value=total_value,
        top_asset=top_asset,
        source=source,
    )


def join_market_listing(
    market: Iterable[MarketQuote], holdings: Sequence[Holding]
) -> list[MarketPosition]:
    """Attach the user's amount and label to each market listing entry.

    Entries the user does not hold get amount 0. This is presentation
    enrichment only; no valuation happens here.
    """
    held = {h.asset_id: h for h in holdings}
    positions: list[MarketPosition] = []
    for quote in market:
        holding = held.get(quote.asset_id)
        positions.append(
            MarketPosition(
                **quote.model_dump(),
                label=holding.label if holding else None,
                amount=holding.amount if holding else 0.0,
            )
        )
    return positions


def acknowledge_trade(request: TradeRequest) -> TradeAck:
    """Acknowledge a buy/sell request without executing or recording it."""
    if not request.asset_id.strip():
        raise ValidationError("Asset is required")
    if request.amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    logger.info(
        "Trade request acknowledged (not executed): %s %s %s",
        request.side,
        request.amount,
        request.asset_id,
    )
    return TradeAck(
        side=request.side,
        asset_id=request.asset_id.strip().lower(),
        amount=request.amount,
        message="Trading is not available in this demo; no order was placed.",
    )


class PortfolioService:
    """Values a fixed holdings list against the market data feed.

    Stateless per call: nothing fetched is kept between calls.
    """

    def __init__(
        self,
        provider: MarketProviderABC,
        holdings: Sequence[Holding] = DEMO_HOLDINGS,
        fallback_quotes: Sequence[MarketQuote] = FALLBACK_QUOTES,
    ) -> None:
        self._provider = provider
        self._holdings = tuple(holdings)
        self._fallback_quotes = tuple(fallback_quotes)

    @property
    def holdings(self) -> tuple[Holding, ...]:
        return self._holdings

    async def get_snapshot(self) -> PortfolioSnapshot:
        """Fetch live quotes and value the holdings; fall back on feed failure."""
        asset_ids = [h.asset_id for h in self._holdings]
        try:
            quotes = await self._provider.get_markets(asset_ids)
        except FeedError as exc:
            logger.warning("Market feed unavailable, using fallback prices: %s", exc)
            return compute_snapshot(
                self._holdings, self._fallback_quotes, PriceSource.FALLBACK
            )
        return compute_snapshot(self._holdings, quotes, PriceSource.LIVE)

    async def get_market_positions(
        self, listing: Sequence[MarketQuote] | None = None
    ) -> list[MarketPosition]:
        """Join a market listing with the holdings.

        Pass the listing the caller already has to avoid a second feed call;
        otherwise the overview listing is fetched, or the fallback table is
        used when the feed fails.
        """
        if listing is None:
            try:
                listing = await self._provider.get_overview_quotes()
            except FeedError as exc:
                logger.warning("Market feed unavailable, using fallback listing: %s", exc)
                listing = self._fallback_quotes
        return join_market_listing(listing, self._holdings)
