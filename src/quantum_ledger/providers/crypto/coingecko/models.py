"""Models for CoinGecko provider (API params and response rows)."""
from pydantic import BaseModel, Field


class CoinGeckoMarketsParams(BaseModel):
    """Params for /coins/markets. Merge with 'ids' at call site for a fixed set."""

    vs_currency: str = "usd"
    order: str = "market_cap_desc"
    per_page: int = 10
    page: int = 1
    sparkline: str = "false"


class CoinGeckoMarketItem(BaseModel):
    """One row of a /coins/markets response. Extra fields are ignored."""

    id: str
    symbol: str
    name: str | None = None
    current_price: float | None = Field(default=None, ge=0)
    price_change_percentage_24h: float | None = None
    total_volume: float | None = None
    market_cap: float | None = None
