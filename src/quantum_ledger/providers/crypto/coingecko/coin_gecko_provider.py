"""CoinGecko market data provider for cryptocurrencies."""
import os

import httpx
from pydantic import ValidationError as PydanticValidationError

from quantum_ledger.errors import FeedError
from quantum_ledger.providers.core import (MarketProviderABC,
                                           normalize_crypto_id, round2)
from quantum_ledger.providers.crypto.coingecko.models import (
    CoinGeckoMarketItem, CoinGeckoMarketsParams)
from quantum_ledger.schemas import MarketQuote

# Payload problems we report as FeedError; anything else is a bug and propagates.
_MALFORMED_PAYLOAD_EXCEPTIONS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    TypeError,
    PydanticValidationError,
)


class CoinGeckoProvider(MarketProviderABC):
    """Market data provider for cryptocurrencies via CoinGecko API.

    Uses CoinGecko IDs as asset ids (e.g., "bitcoin", "ethereum", "solana").
    See https://api.coingecko.com/api/v3/coins/list for all available IDs.
    """

    BASE_URL = "https://api.coingecko.com/api/v3"
    PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"
    API_NAME = "CoinGecko"

    def __init__(
        self,
        api_key: str | None = None,
        use_pro_api: bool = False,
        timeout: float = 10.0,
        overview_size: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the CoinGecko provider.

        Args:
            api_key: CoinGecko API key. Defaults to COINGECKO_API_KEY env var.
            use_pro_api: Whether to use the Pro API endpoint.
            timeout: Per-request timeout in seconds; expiry is a feed failure.
            overview_size: Number of coins returned by get_overview_quotes().
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self._api_key = api_key or os.getenv("COINGECKO_API_KEY")
        self._use_pro_api = use_pro_api or bool(self._api_key)
        self._overview_size = overview_size

        headers: dict[str, str] = {"Accept": "application/json"}
        if self._api_key:
            headers["x-cg-pro-api-key"] = self._api_key

        base = self.PRO_BASE_URL if self._use_pro_api else self.BASE_URL
        self._client = httpx.AsyncClient(
            base_url=base, headers=headers, timeout=timeout, transport=transport
        )

    async def get_markets(self, asset_ids: list[str]) -> list[MarketQuote]:
        """Fetch current quotes for the given CoinGecko IDs in one call."""
        ids = [normalize_crypto_id(a) for a in asset_ids]
        if not ids:
            return []
        params = CoinGeckoMarketsParams(per_page=len(ids)).model_dump() | {
            "ids": ",".join(ids),
        }
        return await self._fetch_markets(params)

    async def get_overview_quotes(self) -> list[MarketQuote]:
        """Fetch top coins by market cap (single API call)."""
        params = CoinGeckoMarketsParams(per_page=self._overview_size).model_dump()
        return await self._fetch_markets(params)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _fetch_markets(self, params: dict) -> list[MarketQuote]:
        """GET /coins/markets and parse the rows; every failure becomes FeedError."""
        try:
            response = await self._client.get("/coins/markets", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            raise FeedError(
                f"Request to {self.API_NAME} timed out", timed_out=True
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise FeedError(
                f"{self.API_NAME} returned status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FeedError(f"{self.API_NAME} request failed: {exc}") from exc
        except ValueError as exc:
            raise FeedError(f"{self.API_NAME} returned invalid JSON") from exc

        if not isinstance(payload, list):
            raise FeedError(f"{self.API_NAME} returned an unexpected payload")
        try:
            return [
                self._quote_from_market_item(CoinGeckoMarketItem.model_validate(item))
                for item in payload
            ]
        except _MALFORMED_PAYLOAD_EXCEPTIONS as exc:
            raise FeedError(f"{self.API_NAME} returned a malformed market row") from exc

    def _quote_from_market_item(self, item: CoinGeckoMarketItem) -> MarketQuote:
        """Build a MarketQuote from a /coins/markets response item."""
        return MarketQuote(
            asset_id=item.id,
            symbol=item.symbol.upper(),
            name=item.name,
            current_price=float(item.current_price or 0.0),
            change_24h_percent=item.price_change_percentage_24h,
            volume=round2(item.total_volume),
            market_cap=round2(item.market_cap),
        )
