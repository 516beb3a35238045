"""
Investment Scoring - Configuration.

============================================================
PURPOSE
============================================================
Defines every threshold and weight used by the metric
calculators and the investment scorer.

The algorithms read these values; they never hardcode them.
Tests build a modified config instead of patching code.

============================================================
DESIGN PRINCIPLES
============================================================
- Immutable (frozen dataclasses)
- Defaults reproduce the production scoring model
- Market-cap tiers are ordered, first match wins

============================================================
COMPOSITE SCORE WEIGHTS
============================================================
    maturity        0.20
    volume health   0.20
    momentum        0.25
    volatility      0.15
    size            0.10
    liquidity       0.10

Result is clamped to [1, 10].

============================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


# ============================================================
# MARKET MATURITY
# ============================================================


@dataclass(frozen=True)
class MaturityTier:
    """One market-cap bucket: caps at or above min_market_cap."""

    min_market_cap: float
    score: float
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_market_cap": self.min_market_cap,
            "score": self.score,
            "category": self.category,
        }


DEFAULT_MATURITY_TIERS: Tuple[MaturityTier, ...] = (
    MaturityTier(min_market_cap=10_000_000_000, score=1.0, category="Established"),
    MaturityTier(min_market_cap=1_000_000_000, score=1.5, category="Mature"),
    MaturityTier(min_market_cap=250_000_000, score=2.0, category="Developing"),
    MaturityTier(min_market_cap=50_000_000, score=2.5, category="Emerging"),
)


@dataclass(frozen=True)
class MarketMaturityConfig:
    """
    Market-cap buckets, evaluated in descending order.

    Lower score = more mature. Anything below the last tier
    falls back to Speculative.
    """

    tiers: Tuple[MaturityTier, ...] = DEFAULT_MATURITY_TIERS
    fallback_score: float = 3.0
    fallback_category: str = "Speculative"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tiers": [tier.to_dict() for tier in self.tiers],
            "fallback_score": self.fallback_score,
            "fallback_category": self.fallback_category,
        }


# ============================================================
# VOLUME HEALTH
# ============================================================


@dataclass(frozen=True)
class VolumeHealthConfig:
    """
    Volume/market-cap ratio thresholds.

    The exceptional ratio is also the saturation ceiling of the
    logarithmic score: any ratio at or above it scores 1.0.
    """

    healthy_ratio: float = 0.15
    strong_ratio: float = 0.30
    exceptional_ratio: float = 0.50

    def to_dict(self) -> Dict[str, Any]:
        return {
            "healthy_ratio": self.healthy_ratio,
            "strong_ratio": self.strong_ratio,
            "exceptional_ratio": self.exceptional_ratio,
        }


# ============================================================
# VOLATILITY
# ============================================================


@dataclass(frozen=True)
class VolatilityConfig:
    """Standard deviation bands over the percent-change series."""

    std_dev_ceiling: float = 25.0      # std dev that maps to score 1.0
    high_std_dev: float = 25.0         # High if std dev > 25
    medium_std_dev: float = 15.0       # Medium if std dev > 15

    def to_dict(self) -> Dict[str, Any]:
        return {
            "std_dev_ceiling": self.std_dev_ceiling,
            "high_std_dev": self.high_std_dev,
            "medium_std_dev": self.medium_std_dev,
        }


# ============================================================
# COMPOSITE SCORE
# ============================================================


@dataclass(frozen=True)
class ScoringWeights:
    """Weights and constants of the composite investment score."""

    maturity_weight: float = 0.20
    volume_health_weight: float = 0.20
    momentum_weight: float = 0.25
    volatility_weight: float = 0.15
    size_weight: float = 0.10
    liquidity_weight: float = 0.10

    maturity_offset: float = 4.0             # (offset - maturity) inverts the scale
    maturity_multiplier: float = 2.0
    component_scale: float = 10.0            # volume health and momentum are 0-1
    reference_market_cap: float = 1e11       # size bonus is log10(reference / cap)
    size_multiplier: float = 2.0
    liquidity_multiplier: float = 5.0
    component_cap: float = 10.0              # cap on size and liquidity components

    min_score: float = 1.0
    max_score: float = 10.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maturity_weight": self.maturity_weight,
            "volume_health_weight": self.volume_health_weight,
            "momentum_weight": self.momentum_weight,
            "volatility_weight": self.volatility_weight,
            "size_weight": self.size_weight,
            "liquidity_weight": self.liquidity_weight,
            "maturity_offset": self.maturity_offset,
            "maturity_multiplier": self.maturity_multiplier,
            "component_scale": self.component_scale,
            "reference_market_cap": self.reference_market_cap,
            "size_multiplier": self.size_multiplier,
            "liquidity_multiplier": self.liquidity_multiplier,
            "component_cap": self.component_cap,
            "min_score": self.min_score,
            "max_score": self.max_score,
        }


# ============================================================
# RISK LEVEL
# ============================================================


@dataclass(frozen=True)
class RiskLevelConfig:
    """
    Weights and cut-offs of the 0-1 risk score.

    High if score > high_threshold, Medium if > medium_threshold.
    """

    volatility_weight: float = 0.4
    maturity_weight: float = 0.3
    volume_weight: float = 0.3
    maturity_scale: float = 3.0        # maturity / 3 maps Speculative to 1.0

    high_threshold: float = 0.66
    medium_threshold: float = 0.33

    def to_dict(self) -> Dict[str, Any]:
        return {
            "volatility_weight": self.volatility_weight,
            "maturity_weight": self.maturity_weight,
            "volume_weight": self.volume_weight,
            "maturity_scale": self.maturity_scale,
            "high_threshold": self.high_threshold,
            "medium_threshold": self.medium_threshold,
        }


# ============================================================
# POTENTIAL RETURN
# ============================================================


@dataclass(frozen=True)
class PotentialReturnConfig:
    """Weights of the potential-return multiplier (1x-10x)."""

    size_weight: float = 0.4
    size_multiplier: float = 0.5
    volume_health_weight: float = 0.2
    momentum_weight: float = 0.2
    maturity_weight: float = 0.2
    maturity_offset: float = 4.0
    maturity_scale: float = 3.0
    reference_market_cap: float = 1e11
    scale: float = 10.0

    min_return: float = 1.0
    max_return: float = 10.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size_weight": self.size_weight,
            "size_multiplier": self.size_multiplier,
            "volume_health_weight": self.volume_health_weight,
            "momentum_weight": self.momentum_weight,
            "maturity_weight": self.maturity_weight,
            "maturity_offset": self.maturity_offset,
            "maturity_scale": self.maturity_scale,
            "reference_market_cap": self.reference_market_cap,
            "scale": self.scale,
            "min_return": self.min_return,
            "max_return": self.max_return,
        }


# ============================================================
# MASTER CONFIGURATION
# ============================================================


@dataclass(frozen=True)
class InvestmentScoringConfig:
    """
    Master configuration for metric calculation and scoring.
    """

    market_maturity: MarketMaturityConfig = field(default_factory=MarketMaturityConfig)
    volume_health: VolumeHealthConfig = field(default_factory=VolumeHealthConfig)
    volatility: VolatilityConfig = field(default_factory=VolatilityConfig)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    risk: RiskLevelConfig = field(default_factory=RiskLevelConfig)
    potential_return: PotentialReturnConfig = field(default_factory=PotentialReturnConfig)

    engine_version: str = "2.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "market_maturity": self.market_maturity.to_dict(),
            "volume_health": self.volume_health.to_dict(),
            "volatility": self.volatility.to_dict(),
            "weights": self.weights.to_dict(),
            "risk": self.risk.to_dict(),
            "potential_return": self.potential_return.to_dict(),
            "engine_version": self.engine_version,
        }


def get_default_config() -> InvestmentScoringConfig:
    """Return the default scoring configuration."""
    return InvestmentScoringConfig()
