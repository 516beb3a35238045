"""
Base Data Sources - Abstract interfaces for market-data collaborators.

All providers MUST implement one of these interfaces so that the
scanner depends on behaviour, never on a specific vendor:

- MarketDataSource: quotes, listings, BTC dominance
- ExchangeListingSource: exchange membership lookup

Network calls are single-shot. A failed request surfaces as a
FetchError (an UpstreamFailureError) and is never retried here.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import aiohttp

from data_sources.exceptions import FetchError, RateLimitError
from data_sources.models import AssetSnapshot, ListingSort, SortDirection


logger = logging.getLogger(__name__)


class BaseHttpSource(ABC):
    """
    Shared aiohttp plumbing for HTTP data sources.

    A session passed in by the caller is borrowed and never closed;
    otherwise the source creates and owns one lazily.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this data source."""
        pass

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=self._get_default_headers(),
            )
            self._owns_session = True
        return self._session

    def _get_default_headers(self) -> dict[str, str]:
        """Get default HTTP headers."""
        return {
            "Accept": "application/json",
            "User-Agent": "CryptoOpportunityScanner/1.0",
        }

    async def _make_request(
        self,
        method: str,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """Make HTTP request with error handling."""
        session = await self._get_session()

        start_time = time.time()
        try:
            async with session.request(
                method,
                url,
                params=params,
                headers=headers,
            ) as response:
                latency_ms = (time.time() - start_time) * 1000

                if response.status == 429:
                    retry_after = response.headers.get("Retry-After")
                    raise RateLimitError(
                        message="Rate limit exceeded",
                        source_name=self.name,
                        retry_after_seconds=int(retry_after) if retry_after and retry_after.isdigit() else None,
                        request_url=url,
                    )

                if response.status >= 400:
                    body = await response.text()
                    raise FetchError(
                        message=f"HTTP {response.status}",
                        source_name=self.name,
                        status_code=response.status,
                        response_body=body[:1000],
                        request_url=url,
                    )

                data = await response.json()
                logger.debug(f"[{self.name}] {url} completed in {latency_ms:.1f}ms")
                return data

        except aiohttp.ClientError as e:
            raise FetchError(
                message=f"Connection error: {e}",
                source_name=self.name,
                request_url=url,
                original_error=e,
            ) from e
        except asyncio.TimeoutError as e:
            raise FetchError(
                message=f"Request timed out after {self._timeout}s",
                source_name=self.name,
                request_url=url,
                original_error=e,
            ) from e

    async def close(self) -> None:
        """Close resources."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "BaseHttpSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"


class MarketDataSource(BaseHttpSource):
    """
    Abstract market-data collaborator.

    Each implementation must:
    1. fetch_quote() - one snapshot, SymbolNotFoundError if absent
    2. fetch_listings() - ordered snapshots
    3. fetch_dominance() - BTC share of total market cap, percent
    """

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> AssetSnapshot:
        """
        Fetch the latest quote for a symbol.

        Raises:
            SymbolNotFoundError: If the symbol is absent from the response
            FetchError: If the request fails
        """
        pass

    @abstractmethod
    async def fetch_listings(
        self,
        limit: int = 100,
        sort: ListingSort = ListingSort.MARKET_CAP,
        sort_dir: SortDirection = SortDirection.DESC,
    ) -> list[AssetSnapshot]:
        """
        Fetch an ordered page of listings.

        Entries that cannot be normalized are skipped with a warning.

        Raises:
            FetchError: If the request fails
        """
        pass

    @abstractmethod
    async def fetch_dominance(self) -> float:
        """
        Fetch BTC dominance in percent (0-100).

        Raises:
            FetchError: If the request fails
            NormalizationError: If the payload has no dominance value
        """
        pass


class ExchangeListingSource(BaseHttpSource):
    """
    Abstract exchange-membership collaborator.

    The membership set is loaded on first use and kept until
    refresh() is called.
    """

    def __init__(
        self,
        timeout: float = BaseHttpSource.DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__(timeout, session)
        self._listed: Optional[frozenset[str]] = None
        self._load_lock = asyncio.Lock()

    @abstractmethod
    async def load_listed_symbols(self) -> frozenset[str]:
        """
        Fetch the full set of listed symbols (upper case).

        Raises:
            FetchError: If the request fails
        """
        pass

    async def listed_symbols(self) -> frozenset[str]:
        """Return the cached membership set, loading it once."""
        async with self._load_lock:
            if self._listed is None:
                self._listed = await self.load_listed_symbols()
                logger.info(f"[{self.name}] Loaded {len(self._listed)} listed symbols")
            return self._listed

    async def is_listed(self, symbol: str) -> bool:
        """Check membership of a symbol in the exchange listing."""
        return symbol.upper() in await self.listed_symbols()

    async def refresh(self) -> frozenset[str]:
        """Drop the cached set and load it again."""
        async with self._load_lock:
            self._listed = None
        return await self.listed_symbols()
