"""
Market Cycle - Type Definitions.

Data contracts for the dominance classification and the
dominance-adjusted analysis variant.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from investment_scoring.types import AnalysisKind, InvestmentAnalysis


# ============================================================
# ENUMS
# ============================================================


class MarketPhase(str, Enum):
    """Market-cycle phase derived from BTC dominance."""

    BTC_DOMINANCE = "btc_dominance"
    ALTCOIN_SEASON = "altcoin_season"
    TRANSITION = "transition"
    ACCUMULATION = "accumulation"


class PhaseStrength(str, Enum):
    """How decisive the phase signal is."""

    HIGH = "high"
    MEDIUM = "medium"


# ============================================================
# DOMINANCE STATE
# ============================================================


@dataclass(frozen=True)
class PhaseInfo:
    """Classified phase with a human-readable description."""

    name: MarketPhase
    strength: PhaseStrength
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name.value,
            "strength": self.strength.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class MarketImpact:
    """
    Score multipliers for BTC and for altcoins.

    Zero-sum rotation: btc_impact + altcoin_impact == 2.
    """

    btc_impact: float
    altcoin_impact: float

    def for_symbol(self, symbol: str, btc_symbol: str = "BTC") -> float:
        """
        Multiplier that applies to the given asset.

        The BTC match ignores case, so "btc" gets btc_impact too.
        """
        return self.btc_impact if symbol.upper() == btc_symbol.upper() else self.altcoin_impact

    def to_dict(self) -> Dict[str, Any]:
        return {"btc_impact": self.btc_impact, "altcoin_impact": self.altcoin_impact}


@dataclass(frozen=True)
class Recommendation:
    """Fixed positioning advice attached to a phase."""

    type: str
    action: str
    confidence: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "action": self.action, "confidence": self.confidence}


@dataclass(frozen=True)
class DominanceState:
    """
    Macro market-cycle signal shared by every asset of a scan.
    """

    current_dominance: float
    phase: PhaseInfo
    impact: MarketImpact
    recommendation: Recommendation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_dominance": self.current_dominance,
            "phase": self.phase.to_dict(),
            "impact": self.impact.to_dict(),
            "recommendation": self.recommendation.to_dict(),
        }


# ============================================================
# ADJUSTED ANALYSIS
# ============================================================


@dataclass(frozen=True)
class AdjustedAnalysis:
    """
    An InvestmentAnalysis scaled by the market-cycle impact.

    Once a dominance state exists, ranking and display read
    adjusted_score, never base.investment_score.
    """

    base: InvestmentAnalysis
    dominance: DominanceState
    impact: float
    adjusted_score: float

    kind: AnalysisKind = field(default=AnalysisKind.ADJUSTED, init=False)

    @property
    def symbol(self) -> str:
        return self.base.symbol

    @property
    def name(self) -> str:
        return self.base.name

    @property
    def investment_score(self) -> float:
        return self.base.investment_score

    def to_dict(self) -> Dict[str, Any]:
        data = self.base.to_dict()
        data.update({
            "kind": self.kind.value,
            "btc_dominance": self.dominance.to_dict(),
            "impact": self.impact,
            "adjusted_score": self.adjusted_score,
        })
        return data
