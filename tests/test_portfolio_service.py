"""Tests for portfolio valuation, the fallback policy and the market join."""
import asyncio

import pytest

from quantum_ledger.errors import ValidationError
from quantum_ledger.schemas import Holding, PriceSource, TradeRequest
from quantum_ledger.services import (DEMO_HOLDINGS, PortfolioService,
                                     acknowledge_trade, compute_snapshot,
                                     join_market_listing)

from conftest import LIVE_QUOTES, FakeMarketProvider, quote

BTC = Holding(asset_id="bitcoin", symbol="BTC", label="Bitcoin (BTC)", amount=0.35)
ETH = Holding(asset_id="ethereum", symbol="ETH", label="Ethereum (ETH)", amount=4.8)


class TestComputeSnapshot:
    def test_single_holding_example(self):
        snapshot = compute_snapshot([BTC], [quote("bitcoin", "BTC", 26000.0)])
        assert snapshot.holdings[0].value == pytest.approx(9100.00)
        assert snapshot.total_value == pytest.approx(9100.00)
        assert snapshot.top_asset.symbol == "BTC"
        assert snapshot.source == PriceSource.LIVE

    def test_empty_quotes_values_everything_at_zero(self):
        snapshot = compute_snapshot([BTC, ETH], [])
        assert [h.value for h in snapshot.holdings] == [0.0, 0.0]
        assert [h.price for h in snapshot.holdings] == [0.0, 0.0]
        assert snapshot.total_value == 0.0
        assert snapshot.top_asset == snapshot.holdings[0]

    def test_total_is_sum_and_top_is_max(self):
        snapshot = compute_snapshot(DEMO_HOLDINGS, LIVE_QUOTES)
        values = [h.value for h in snapshot.holdings]
        assert snapshot.total_value == pytest.approx(sum(values), abs=1e-6)
        assert snapshot.top_asset.value == max(values)
        assert snapshot.top_asset in snapshot.holdings

    def test_preserves_holdings_order(self):
        snapshot = compute_snapshot(DEMO_HOLDINGS, list(reversed(LIVE_QUOTES)))
        assert [h.asset_id for h in snapshot.holdings] == [h.asset_id for h in DEMO_HOLDINGS]

    def test_tie_goes_to_first_holding(self):
        a = Holding(asset_id="a", symbol="A", label="A", amount=2)
        b = Holding(asset_id="b", symbol="B", label="B", amount=1)
        snapshot = compute_snapshot([a, b], [quote("a", "A", 50.0), quote("b", "B", 100.0)])
        assert snapshot.top_asset.asset_id == "a"

    def test_unpriced_holding_is_zero_not_error(self):
        snapshot = compute_snapshot([BTC, ETH], [quote("ethereum", "ETH", 2000.0, 1.0)])
        btc, eth = snapshot.holdings
        assert (btc.price, btc.value, btc.change_24h_percent) == (0.0, 0.0, 0.0)
        assert eth.value == pytest.approx(9600.0)
        assert snapshot.top_asset.symbol == "ETH"

    def test_missing_change_becomes_zero(self):
        snapshot = compute_snapshot([BTC], [quote("bitcoin", "BTC", 100.0, None)])
        assert snapshot.holdings[0].change_24h_percent == 0.0

    def test_negative_change_is_kept(self):
        snapshot = compute_snapshot([BTC], [quote("bitcoin", "BTC", 100.0, -4.25)])
        assert snapshot.holdings[0].change_24h_percent == -4.25

    def test_empty_holdings(self):
        snapshot = compute_snapshot([], LIVE_QUOTES)
        assert snapshot.holdings == []
        assert snapshot.total_value == 0.0
        assert snapshot.top_asset is None

    def test_does_not_change_holding_amounts(self):
        compute_snapshot(DEMO_HOLDINGS, LIVE_QUOTES)
        assert [h.amount for h in DEMO_HOLDINGS] == [0.35, 4.8, 3000, 45]


class TestPortfolioService:
    def test_live_snapshot(self, live_provider: FakeMarketProvider):
        service = PortfolioService(live_provider)
        snapshot = asyncio.run(service.get_snapshot())
        assert snapshot.source == PriceSource.LIVE
        assert live_provider.requested == [["bitcoin", "ethereum", "tether", "solana"]]
        # 0.35*60000 + 4.8*3000 + 3000*1 + 45*140
        assert snapshot.total_value == pytest.approx(21000 + 14400 + 3000 + 6300)
        assert snapshot.top_asset.symbol == "BTC"

    def test_feed_failure_uses_fallback(self, failing_provider: FakeMarketProvider):
        service = PortfolioService(failing_provider)
        snapshot = asyncio.run(service.get_snapshot())
        assert snapshot.source == PriceSource.FALLBACK
        # 0.35*26000 + 4.8*1800 + 3000*1 + 45*150
        assert snapshot.total_value == pytest.approx(9100 + 8640 + 3000 + 6750)
        assert snapshot.top_asset is not None
        assert snapshot.top_asset.symbol == "BTC"
        assert [h.change_24h_percent for h in snapshot.holdings] == [3.2, 1.4, 0.0, 5.1]

    def test_feed_omitting_assets_is_still_live(self):
        provider = FakeMarketProvider(quotes=[quote("bitcoin", "BTC", 26000.0)])
        snapshot = asyncio.run(PortfolioService(provider).get_snapshot())
        assert snapshot.source == PriceSource.LIVE
        assert snapshot.total_value == pytest.approx(9100.0)

    def test_unexpected_errors_propagate(self):
        provider = FakeMarketProvider(error=RuntimeError("bug"))
        with pytest.raises(RuntimeError):
            asyncio.run(PortfolioService(provider).get_snapshot())

    def test_market_positions_from_overview(self, live_provider: FakeMarketProvider):
        positions = asyncio.run(PortfolioService(live_provider).get_market_positions())
        by_id = {p.asset_id: p for p in positions}
        assert by_id["bitcoin"].amount == 0.35
        assert by_id["ripple"].amount == 0.0
        assert by_id["ripple"].label is None

    def test_market_positions_fallback(self, failing_provider: FakeMarketProvider):
        positions = asyncio.run(PortfolioService(failing_provider).get_market_positions())
        assert [p.asset_id for p in positions] == ["bitcoin", "ethereum", "tether", "solana"]

    def test_market_positions_use_supplied_listing(self, failing_provider: FakeMarketProvider):
        listing = [quote("solana", "SOL", 99.0)]
        positions = asyncio.run(
            PortfolioService(failing_provider).get_market_positions(listing)
        )
        assert len(positions) == 1
        assert positions[0].amount == 45


class TestJoinMarketListing:
    def test_attaches_amount_and_label(self):
        positions = join_market_listing(LIVE_QUOTES, [BTC])
        assert positions[0].amount == 0.35
        assert positions[0].label == "Bitcoin (BTC)"
        assert all(p.amount == 0.0 for p in positions[1:])

    def test_keeps_listing_order_and_prices(self):
        positions = join_market_listing(LIVE_QUOTES, DEMO_HOLDINGS)
        assert [p.asset_id for p in positions] == [q.asset_id for q in LIVE_QUOTES]
        assert [p.current_price for p in positions] == [q.current_price for q in LIVE_QUOTES]

    def test_does_not_alter_snapshot_total(self):
        before = compute_snapshot(DEMO_HOLDINGS, LIVE_QUOTES).total_value
        join_market_listing(LIVE_QUOTES, DEMO_HOLDINGS)
        assert compute_snapshot(DEMO_HOLDINGS, LIVE_QUOTES).total_value == before


class TestAcknowledgeTrade:
    def test_acknowledges_without_executing(self):
        ack = acknowledge_trade(TradeRequest(side="buy", asset_id="Bitcoin", amount=0.1))
        assert ack.executed is False
        assert ack.asset_id == "bitcoin"
        assert ack.side == "buy"
        assert DEMO_HOLDINGS[0].amount == 0.35

    @pytest.mark.parametrize("amount", [0, -1])
    def test_rejects_non_positive_amount(self, amount):
        with pytest.raises(ValidationError):
            acknowledge_trade(TradeRequest(side="sell", asset_id="bitcoin", amount=amount))

    def test_rejects_blank_asset(self):
        with pytest.raises(ValidationError):
            acknowledge_trade(TradeRequest(side="sell", asset_id="  ", amount=1))
