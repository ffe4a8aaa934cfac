"""Pydantic schemas for API and runtime use. Not persisted."""
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PriceSource(str, Enum):
    """Where the prices in a snapshot came from."""

    LIVE = "live"
    FALLBACK = "fallback"


class MarketQuote(BaseModel):
    """One asset's current price as reported by the market data feed."""

    model_config = ConfigDict(frozen=True)

    asset_id: str  # CoinGecko id, e.g. "bitcoin"
    symbol: str
    name: str | None = None
    current_price: float = Field(ge=0)
    change_24h_percent: float | None = None
    volume: float | None = None
    market_cap: float | None = None


class Holding(BaseModel):
    """A fixed quantity of one asset held by the demo user."""

    model_config = ConfigDict(frozen=True)

    asset_id: str
    symbol: str
    label: str
    amount: float


class EnrichedHolding(Holding):
    """A holding priced against one quote batch."""

    price: float
    value: float
    change_24h_percent: float


class PortfolioSnapshot(BaseModel):
    """Valuation of a holdings list at one point in time."""

    holdings: list[EnrichedHolding]
    total_value: float
    top_asset: EnrichedHolding | None
    as_of: datetime = Field(default_factory=datetime.utcnow)
    source: PriceSource = PriceSource.LIVE


class MarketPosition(MarketQuote):
    """A market listing entry joined with the user's position in it."""

    label: str | None = None
    amount: float = 0.0


class TradeRequest(BaseModel):
    """Buy/sell form input. Accepted for acknowledgement only."""

    side: Literal["buy", "sell"]
    asset_id: str
    amount: float


class TradeAck(BaseModel):
    """Acknowledgement of a trade request; nothing is executed."""

    side: Literal["buy", "sell"]
    asset_id: str
    amount: float
    executed: bool = False
    message: str
    received_at: datetime = Field(default_factory=datetime.utcnow)


class RegisterRequest(BaseModel):
    """Body of POST /api/register. Presence is checked by the auth service."""

    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    """Body of POST /api/login."""

    email: str | None = None
    password: str | None = None


class PublicUser(BaseModel):
    """Redacted user view returned to clients."""

    id: int
    name: str
    email: str


class UserClaims(PublicUser):
    """Identity claims embedded in a session token."""


class AuthResponse(BaseModel):
    """Token plus the user it was issued for."""

    token: str
    user: PublicUser


class MeResponse(BaseModel):
    """Body of GET /api/me."""

    user: UserClaims


__all__ = [
    "AuthResponse",
    "EnrichedHolding",
    "Holding",
    "LoginRequest",
    "MarketPosition",
    "MarketQuote",
    "MeResponse",
    "PortfolioSnapshot",
    "PriceSource",
    "PublicUser",
    "RegisterRequest",
    "TradeAck",
    "TradeRequest",
    "UserClaims",
]
