"""
Market Cycle - Dominance Adjuster.

Scales a base investment score by the phase impact:
BTC gets btc_impact, every other asset gets altcoin_impact.
"""

import logging
from typing import Optional

from investment_scoring.types import InvestmentAnalysis

from .config import MarketCycleConfig
from .types import AdjustedAnalysis, DominanceState


logger = logging.getLogger(__name__)


class DominanceAdjuster:
    """Produces AdjustedAnalysis values from base analyses."""

    def __init__(self, config: Optional[MarketCycleConfig] = None):
        self.config = config or MarketCycleConfig()

    def adjust(self, analysis: InvestmentAnalysis, dominance: DominanceState) -> AdjustedAnalysis:
        """
        Attach the dominance state and compute the adjusted score.

        Args:
            analysis: Base analysis
            dominance: Dominance state shared by the whole scan

        Returns:
            AdjustedAnalysis with adjusted_score = investment_score * impact
        """
        impact = dominance.impact.for_symbol(analysis.symbol, self.config.btc_symbol)
        adjusted_score = analysis.investment_score * impact

        logger.debug(
            f"{analysis.symbol}: {analysis.investment_score:.3f} x {impact} = {adjusted_score:.3f} "
            f"({dominance.phase.name.value})"
        )

        return AdjustedAnalysis(
            base=analysis,
            dominance=dominance,
            impact=impact,
            adjusted_score=adjusted_score,
        )


_default_adjuster = DominanceAdjuster()


def adjust(analysis: InvestmentAnalysis, dominance: DominanceState) -> AdjustedAnalysis:
    """Adjust one analysis with the default BTC symbol."""
    return _default_adjuster.adjust(analysis, dominance)
