"""Abstract base class for market data providers."""
from abc import ABC, abstractmethod

from quantum_ledger.schemas import MarketQuote


class MarketProviderABC(ABC):
    """Read-only price feed keyed by asset id.

    Implementations are treated as unreliable: any failure (transport error,
    non-success status, timeout, malformed payload) must surface as FeedError,
    and the returned batch may omit requested assets.
    """

    @abstractmethod
    async def get_markets(self, asset_ids: list[str]) -> list[MarketQuote]:
        """Fetch current quotes for the given asset ids.

        Args:
            asset_ids: Asset ids to price (e.g. ["bitcoin", "ethereum"]).

        Returns:
            Quotes in feed order; assets the feed does not know are omitted.

        Raises:
            FeedError: The feed could not be queried or parsed.
        """

    @abstractmethod
    async def get_overview_quotes(self) -> list[MarketQuote]:
        """Fetch the provider's default listing (e.g. top coins by market cap).

        Raises:
            FeedError: The feed could not be queried or parsed.
        """

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "MarketProviderABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
