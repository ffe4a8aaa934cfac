"""Shared fixtures: fast bcrypt settings, a scriptable market provider, an API client."""
import pytest
from fastapi.testclient import TestClient

from quantum_ledger.config import Settings
from quantum_ledger.errors import FeedError
from quantum_ledger.main import create_app
from quantum_ledger.providers import MarketProviderABC
from quantum_ledger.schemas import MarketQuote
from quantum_ledger.services import AuthService
from quantum_ledger.store import CredentialStore

TEST_SECRET = "quantum-ledger-test-signing-key-0001"


class FakeMarketProvider(MarketProviderABC):
    """Returns canned quotes, or raises the configured error on every call."""

    def __init__(
        self,
        quotes: list[MarketQuote] | None = None,
        overview: list[MarketQuote] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.quotes = quotes or []
        self.overview = overview if overview is not None else self.quotes
        self.error = error
        self.requested: list[list[str]] = []
        self.closed = False

    async def get_markets(self, asset_ids: list[str]) -> list[MarketQuote]:
        self.requested.append(list(asset_ids))
        if self.error is not None:
            raise self.error
        return [q for q in self.quotes if q.asset_id in asset_ids]

    async def get_overview_quotes(self) -> list[MarketQuote]:
        if self.error is not None:
            raise self.error
        return list(self.overview)

    async def close(self) -> None:
        self.closed = True


def quote(asset_id: str, symbol: str, price: float, change: float | None = 0.0) -> MarketQuote:
    return MarketQuote(
        asset_id=asset_id,
        symbol=symbol,
        name=asset_id.title(),
        current_price=price,
        change_24h_percent=change,
    )


LIVE_QUOTES = [
    quote("bitcoin", "BTC", 60000.0, 1.5),
    quote("ethereum", "ETH", 3000.0, -2.0),
    quote("tether", "USDT", 1.0, 0.01),
    quote("solana", "SOL", 140.0, None),
    quote("ripple", "XRP", 0.5, 4.0),
]


@pytest.fixture
def settings() -> Settings:
    # 4 is bcrypt's minimum cost; keeps the suite fast.
    return Settings(jwt_secret=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore()


@pytest.fixture
def auth_service(store: CredentialStore, settings: Settings) -> AuthService:
    return AuthService(store, settings)


@pytest.fixture
def live_provider() -> FakeMarketProvider:
    return FakeMarketProvider(quotes=LIVE_QUOTES)


@pytest.fixture
def failing_provider() -> FakeMarketProvider:
    return FakeMarketProvider(error=FeedError("CoinGecko returned status 503"))


@pytest.fixture
def client(settings: Settings, live_provider: FakeMarketProvider):
    with TestClient(create_app(settings, live_provider)) as test_client:
        yield test_client


@pytest.fixture
def failing_client(settings: Settings, failing_provider: FakeMarketProvider):
    with TestClient(create_app(settings, failing_provider)) as test_client:
        yield test_client
