"""
CoinMarketCap Market Data Source - Pro API adapter.

Implements quotes, listings and global metrics from the
CoinMarketCap Pro API. Requires an API key.
"""

import logging
from typing import Any, Optional

import aiohttp

from core.exceptions import ConfigurationError
from data_sources.base import MarketDataSource
from data_sources.exceptions import NormalizationError, SymbolNotFoundError
from data_sources.models import AssetSnapshot, ListingSort, SortDirection


logger = logging.getLogger(__name__)


class CoinMarketCapSource(MarketDataSource):
    """
    CoinMarketCap Pro API data source.

    Endpoints used:
    - /v1/cryptocurrency/quotes/latest - Quote by symbol
    - /v1/cryptocurrency/listings/latest - Ranked listings
    - /v1/global-metrics/quotes/latest - BTC dominance

    Rate limits depend on the plan; the basic plan allows
    30 requests/minute.
    """

    BASE_URL = "https://pro-api.coinmarketcap.com"
    API_KEY_HEADER = "X-CMC_PRO_API_KEY"

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        convert: str = "USD",
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError(
                "CoinMarketCap API key is required",
                config_key="CMC_API_KEY",
            )
        super().__init__(timeout, session)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._convert = convert

    @property
    def name(self) -> str:
        return "coinmarketcap"

    def _auth_headers(self) -> dict[str, str]:
        return {self.API_KEY_HEADER: self._api_key}

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self._make_request(
            "GET",
            f"{self._base_url}{path}",
            params=params,
            headers=self._auth_headers(),
        )

    async def fetch_quote(self, symbol: str) -> AssetSnapshot:
        """Fetch the latest quote for one symbol."""
        symbol = symbol.upper()
        payload = await self._get(
            "/v1/cryptocurrency/quotes/latest",
            params={"symbol": symbol, "convert": self._convert},
        )

        data = payload.get("data") or {}
        coin = data.get(symbol) if isinstance(data, dict) else None
        # Some plans answer with a list per symbol
        if isinstance(coin, list):
            coin = coin[0] if coin else None
        if not coin:
            raise SymbolNotFoundError(symbol, source_name=self.name)

        return AssetSnapshot.from_coinmarketcap(coin, self._convert, self.name)

    async def fetch_listings(
        self,
        limit: int = 100,
        sort: ListingSort = ListingSort.MARKET_CAP,
        sort_dir: SortDirection = SortDirection.DESC,
    ) -> list[AssetSnapshot]:
        """Fetch ranked listings, skipping entries that fail to normalize."""
        payload = await self._get(
            "/v1/cryptocurrency/listings/latest",
            params={
                "start": "1",
                "limit": str(limit),
                "convert": self._convert,
                "sort": sort.value,
                "sort_dir": sort_dir.value,
            },
        )

        raw_coins = payload.get("data")
        if not isinstance(raw_coins, list):
            raise NormalizationError(
                message="Listings response has no data array",
                source_name=self.name,
                raw_data=payload,
                field_name="data",
            )

        snapshots: list[AssetSnapshot] = []
        for raw in raw_coins:
            try:
                snapshots.append(AssetSnapshot.from_coinmarketcap(raw, self._convert, self.name))
            except NormalizationError as e:
                symbol = raw.get("symbol", "?") if isinstance(raw, dict) else "?"
                logger.warning(f"[{self.name}] Skipping listing entry {symbol}: {e}")

        logger.debug(f"[{self.name}] Normalized {len(snapshots)}/{len(raw_coins)} listings")
        return snapshots

    async def fetch_dominance(self) -> float:
        """Fetch BTC dominance from global metrics."""
        payload = await self._get(
            "/v1/global-metrics/quotes/latest",
            params={"convert": self._convert},
        )

        value = (payload.get("data") or {}).get("btc_dominance")
        try:
            dominance = float(value)
        except (TypeError, ValueError) as e:
            raise NormalizationError(
                message=f"Invalid btc_dominance: {value!r}",
                source_name=self.name,
                raw_data=payload,
                field_name="btc_dominance",
                original_error=e,
            ) from e

        logger.debug(f"[{self.name}] BTC dominance {dominance:.2f}%")
        return dominance
