"""
Opportunity Scanner - Scan Pipeline.

============================================================
PURPOSE
============================================================
Wires the market-data and exchange-listing sources to the
scorer, the market-cycle analyzer and the ranker.

============================================================
PER-SCAN GUARANTEES
============================================================
- BTC dominance is fetched exactly once and shared by every
  asset in the scan.
- A dominance failure aborts the scan.
- A failure for one asset never aborts the others.
- Quote fan-out is bounded by a semaphore.

============================================================
"""

import asyncio
import logging
from typing import FrozenSet, Iterable, List, Optional

from core.exceptions import NotFoundError, UpstreamFailureError
from data_sources.base import ExchangeListingSource, MarketDataSource
from data_sources.models import AssetSnapshot
from investment_scoring.scorer import InvestmentScorer
from market_cycle.adjuster import DominanceAdjuster
from market_cycle.analyzer import MarketCycleAnalyzer
from market_cycle.types import AdjustedAnalysis, DominanceState

from .config import ListingFilter, ScannerConfig
from .ranker import OpportunityRanker


logger = logging.getLogger(__name__)


def passes_liquidity_filter(snapshot: AssetSnapshot, listing_filter: ListingFilter) -> bool:
    """Check the minimum market cap, volume and volume ratio."""
    if not listing_filter.enabled:
        return True
    if snapshot.market_cap <= listing_filter.min_market_cap:
        return False
    if snapshot.volume_24h <= listing_filter.min_volume_24h:
        return False
    return snapshot.volume_24h / snapshot.market_cap > listing_filter.min_volume_ratio


class OpportunityScanner:
    """
    Fetch, score and rank crypto assets.

    ============================================================
    USAGE
    ============================================================
        async with CoinMarketCapSource(api_key) as cmc, CoinbaseListingSource() as cb:
            scanner = OpportunityScanner(cmc, cb)
            top = await scanner.scan_top_opportunities(k=10)

    ============================================================
    """

    def __init__(
        self,
        market_data: MarketDataSource,
        exchange_listings: Optional[ExchangeListingSource] = None,
        config: Optional[ScannerConfig] = None,
        scorer: Optional[InvestmentScorer] = None,
        analyzer: Optional[MarketCycleAnalyzer] = None,
        adjuster: Optional[DominanceAdjuster] = None,
    ):
        self.market_data = market_data
        self.exchange_listings = exchange_listings
        self.config = config or ScannerConfig()
        self.analyzer = analyzer or MarketCycleAnalyzer()
        self.adjuster = adjuster or DominanceAdjuster(self.analyzer.config)
        self.ranker = OpportunityRanker(scorer=scorer, adjuster=self.adjuster)

    # --------------------------------------------------------
    # Dominance
    # --------------------------------------------------------

    async def fetch_dominance_state(self) -> DominanceState:
        """
        Fetch BTC dominance once and classify it.

        Raises:
            UpstreamFailureError: If the fetch fails
        """
        dominance = await self.market_data.fetch_dominance()
        state = self.analyzer.classify(dominance)
        logger.info(
            f"BTC dominance {state.current_dominance:.2f}% -> {state.phase.name.value} "
            f"({state.recommendation.type})"
        )
        return state

    # --------------------------------------------------------
    # Exchange membership
    # --------------------------------------------------------

    async def _listed_symbols(self) -> Optional[FrozenSet[str]]:
        if self.exchange_listings is None:
            return None
        try:
            return await self.exchange_listings.listed_symbols()
        except UpstreamFailureError as e:
            logger.warning(f"Exchange listing lookup failed, treating all assets as not listed: {e.message}")
            return frozenset()

    async def _is_listed(self, symbol: str) -> bool:
        listed = await self._listed_symbols()
        return listed is not None and symbol.upper() in listed

    # --------------------------------------------------------
    # Single token
    # --------------------------------------------------------

    async def analyze_token(self, symbol: str) -> AdjustedAnalysis:
        """
        Full adjusted analysis of one symbol.

        Raises:
            NotFoundError: If the symbol is unknown upstream
            UpstreamFailureError: If a fetch fails
            InvalidInputError: If the asset cannot be scored
        """
        dominance_state = await self.fetch_dominance_state()
        snapshot = await self.market_data.fetch_quote(symbol)
        self.ranker.scorer.validate_snapshot(snapshot)
        is_on_exchange = await self._is_listed(snapshot.symbol)

        analysis = self.ranker.scorer.analyze(snapshot, is_on_exchange=is_on_exchange)
        return self.adjuster.adjust(analysis, dominance_state)

    # --------------------------------------------------------
    # Scans
    # --------------------------------------------------------

    async def scan_top_opportunities(self, k: Optional[int] = None) -> List[AdjustedAnalysis]:
        """
        Rank the top listings by adjusted score.

        Args:
            k: Number of results (config top_k if not provided)

        Raises:
            UpstreamFailureError: If dominance or listings cannot be fetched
        """
        k = self.config.top_k if k is None else k

        dominance_state = await self.fetch_dominance_state()

        listings = await self.market_data.fetch_listings(
            limit=self.config.listings_limit,
            sort=self.config.listings_sort,
            sort_dir=self.config.listings_sort_dir,
        )
        candidates = [s for s in listings if passes_liquidity_filter(s, self.config.listing_filter)]

        logger.info(
            f"Fetched {len(listings)} listings, {len(candidates)} passed the liquidity filter"
        )

        listed = await self._listed_symbols()
        return self.ranker.rank(candidates, dominance_state, k, listed)

    async def scan_symbols(self, symbols: Iterable[str], k: Optional[int] = None) -> List[AdjustedAnalysis]:
        """
        Rank an explicit set of symbols.

        Quotes are fetched concurrently; a symbol whose quote
        fails is logged and skipped.

        Raises:
            UpstreamFailureError: If dominance cannot be fetched
        """
        symbols = list(symbols)
        k = self.config.top_k if k is None else k

        dominance_state = await self.fetch_dominance_state()

        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def fetch(symbol: str) -> Optional[AssetSnapshot]:
            async with semaphore:
                try:
                    return await self.market_data.fetch_quote(symbol)
                except (NotFoundError, UpstreamFailureError) as e:
                    logger.warning(f"Skipping {symbol}: {e.message}")
                    return None

        results = await asyncio.gather(*(fetch(s) for s in symbols), return_exceptions=True)

        snapshots = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, Exception):
                logger.warning(f"Skipping {symbol}: unexpected {type(result).__name__}: {result}")
            elif result is not None:
                snapshots.append(result)

        logger.info(f"Fetched {len(snapshots)}/{len(symbols)} quotes")

        listed = await self._listed_symbols()
        return self.ranker.rank(snapshots, dominance_state, k, listed)
