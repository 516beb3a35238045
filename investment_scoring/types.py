"""
Investment Scoring - Type Definitions.

============================================================
PURPOSE
============================================================
Data contracts for the metric calculators and the scorer.

============================================================
DESIGN PRINCIPLES
============================================================
- All types are immutable value objects
- Enums for discrete categories
- Analyses are tagged with AnalysisKind; the adjusted
  variant lives in market_cycle.types and wraps this one

============================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from data_sources.models import AssetSnapshot


# ============================================================
# ENUMS
# ============================================================


class RiskLevel(str, Enum):
    """Overall risk classification of an asset."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def from_score(
        cls,
        score: float,
        high_threshold: float = 0.66,
        medium_threshold: float = 0.33,
    ) -> "RiskLevel":
        """Classify a 0-1 risk score (strict greater-than cut-offs)."""
        if score > high_threshold:
            return cls.HIGH
        elif score > medium_threshold:
            return cls.MEDIUM
        return cls.LOW


class AnalysisKind(str, Enum):
    """Tag distinguishing base analyses from dominance-adjusted ones."""

    BASE = "base"
    ADJUSTED = "adjusted"


# ============================================================
# METRICS
# ============================================================


@dataclass(frozen=True)
class MarketMaturity:
    """Market-cap bucket. Score in {1, 1.5, 2, 2.5, 3}, lower = more mature."""

    score: float
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "category": self.category}


@dataclass(frozen=True)
class VolumeHealth:
    """Liquidity health from the volume/market-cap ratio. Score in [0, 1]."""

    score: float
    category: str
    ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "category": self.category, "ratio": self.ratio}


@dataclass(frozen=True)
class Volatility:
    """Dispersion of the percent-change series. Score in [0, 1]."""

    score: float
    category: str
    std_dev: float

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "category": self.category, "std_dev": self.std_dev}


@dataclass(frozen=True)
class MetricSet:
    """All per-asset sub-metrics."""

    market_maturity: MarketMaturity
    volume_health: VolumeHealth
    momentum: float
    volatility: Volatility

    def to_dict(self) -> Dict[str, Any]:
        return {
            "market_maturity": self.market_maturity.to_dict(),
            "volume_health": self.volume_health.to_dict(),
            "momentum": self.momentum,
            "volatility": self.volatility.to_dict(),
        }


@dataclass(frozen=True)
class Performance:
    """Percent price changes over the standard windows."""

    change_1h: Optional[float] = None
    change_24h: Optional[float] = None
    change_7d: Optional[float] = None
    change_30d: Optional[float] = None

    @classmethod
    def from_snapshot(cls, snapshot: AssetSnapshot) -> "Performance":
        return cls(
            change_1h=snapshot.percent_change_1h,
            change_24h=snapshot.percent_change_24h,
            change_7d=snapshot.percent_change_7d,
            change_30d=snapshot.percent_change_30d,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "change_1h": self.change_1h,
            "change_24h": self.change_24h,
            "change_7d": self.change_7d,
            "change_30d": self.change_30d,
        }


@dataclass(frozen=True)
class RiskAssessment:
    """Risk level plus the 0-1 score it was derived from."""

    level: RiskLevel
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level.value, "score": self.score}


# ============================================================
# ANALYSIS OUTPUT
# ============================================================


@dataclass(frozen=True)
class InvestmentAnalysis:
    """
    Base analysis of one asset, before any dominance adjustment.

    investment_score and potential_return are always in [1, 10].
    """

    symbol: str
    name: str
    price: float
    market_cap: float
    volume_24h: float
    metrics: MetricSet
    performance: Performance
    investment_score: float
    risk: RiskAssessment
    potential_return: float
    is_on_exchange: bool = False

    kind: AnalysisKind = field(default=AnalysisKind.BASE, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "basic": {
                "symbol": self.symbol,
                "name": self.name,
                "price": self.price,
                "market_cap": self.market_cap,
                "volume_24h": self.volume_24h,
                "is_on_exchange": self.is_on_exchange,
            },
            "metrics": self.metrics.to_dict(),
            "performance": self.performance.to_dict(),
            "investment_score": self.investment_score,
            "risk": self.risk.to_dict(),
            "potential_return": self.potential_return,
        }
