"""
Opportunity Scanner - Ranker.

============================================================
PURPOSE
============================================================
Scores a batch of snapshots against one shared dominance
state and returns the top-k by adjusted score.

============================================================
FAILURE ISOLATION
============================================================
An asset that cannot be scored (non-positive market cap,
malformed numbers, ...) is logged and dropped. It never
aborts the batch.

============================================================
ORDERING
============================================================
Descending adjusted_score. The sort is stable, so assets
with equal scores keep their input order.

============================================================
"""

import logging
from typing import AbstractSet, Iterable, List, Optional

from core.exceptions import InvalidInputError, ScannerException
from data_sources.models import AssetSnapshot
from investment_scoring.scorer import InvestmentScorer
from market_cycle.adjuster import DominanceAdjuster
from market_cycle.types import AdjustedAnalysis, DominanceState


logger = logging.getLogger(__name__)


DEFAULT_TOP_K = 10


class OpportunityRanker:
    """
    Analyze, adjust and rank a batch of assets.

    ============================================================
    USAGE
    ============================================================
        ranker = OpportunityRanker()
        top = ranker.rank(snapshots, dominance_state, k=5)

        for item in top:
            print(item.symbol, item.adjusted_score)

    ============================================================
    """

    def __init__(
        self,
        scorer: Optional[InvestmentScorer] = None,
        adjuster: Optional[DominanceAdjuster] = None,
    ):
        self.scorer = scorer or InvestmentScorer()
        self.adjuster = adjuster or DominanceAdjuster()

    def rank(
        self,
        snapshots: Iterable[AssetSnapshot],
        dominance_state: DominanceState,
        k: int = DEFAULT_TOP_K,
        listed_symbols: Optional[AbstractSet[str]] = None,
    ) -> List[AdjustedAnalysis]:
        """
        Rank assets by adjusted score.

        Args:
            snapshots: Assets to rank, in the order they were fetched
            dominance_state: Dominance state shared by the whole batch
            k: Maximum number of results
            listed_symbols: Upper-case exchange membership set, if known

        Returns:
            At most k AdjustedAnalysis, best first

        Raises:
            InvalidInputError: If k is negative
        """
        if isinstance(k, bool) or not isinstance(k, int) or k < 0:
            raise InvalidInputError("k must be a non-negative integer", field_name="k", value=k)

        if k == 0:
            return []

        analyses = []
        dropped = 0

        for snapshot in snapshots:
            adjusted = self.score_one(snapshot, dominance_state, listed_symbols)
            if adjusted is None:
                dropped += 1
                continue
            analyses.append(adjusted)

        ranked = sorted(analyses, key=lambda a: a.adjusted_score, reverse=True)

        logger.info(
            f"Ranked {len(analyses)} assets ({dropped} dropped) "
            f"in phase {dominance_state.phase.name.value}, returning top {min(k, len(ranked))}"
        )

        return ranked[:k]

    def score_one(
        self,
        snapshot: AssetSnapshot,
        dominance_state: DominanceState,
        listed_symbols: Optional[AbstractSet[str]] = None,
    ) -> Optional[AdjustedAnalysis]:
        """Analyze and adjust one asset, None if it cannot be scored."""
        try:
            self.scorer.validate_snapshot(snapshot)
            is_on_exchange = listed_symbols is not None and snapshot.symbol.upper() in listed_symbols
            analysis = self.scorer.analyze(snapshot, is_on_exchange=is_on_exchange)
            return self.adjuster.adjust(analysis, dominance_state)
        except ScannerException as e:
            logger.warning(f"Dropping {getattr(snapshot, 'symbol', None) or '<unknown>'}: {e.message}")
            return None


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

_default_ranker = OpportunityRanker()


def rank_opportunities(
    snapshots: Iterable[AssetSnapshot],
    dominance_state: DominanceState,
    k: int = DEFAULT_TOP_K,
    listed_symbols: Optional[AbstractSet[str]] = None,
) -> List[AdjustedAnalysis]:
    """Rank a batch with the default scorer and adjuster."""
    return _default_ranker.rank(snapshots, dominance_state, k, listed_symbols)
