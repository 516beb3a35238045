"""
Investment Scoring - Metric Calculators.

============================================================
PURPOSE
============================================================
Per-asset sub-metrics computed from raw snapshot fields:

1. Market maturity  - market-cap bucket
2. Volume health    - log-scaled volume/market-cap ratio
3. Momentum         - RSI-style oscillator over % changes
4. Volatility       - std dev of % changes

============================================================
DESIGN PRINCIPLES
============================================================
- Pure functions: same input = same output
- Out-of-range values are clamped, never raised
- Non-finite inputs are rejected as InvalidInputError
- Empty change series yield defined neutral values

============================================================
"""

import math
from numbers import Real
from typing import Optional, Sequence

from core.exceptions import InvalidInputError
from data_sources.models import AssetSnapshot

from .config import (
    InvestmentScoringConfig,
    MarketMaturityConfig,
    VolatilityConfig,
    VolumeHealthConfig,
)
from .types import MarketMaturity, MetricSet, Volatility, VolumeHealth


def validate_change_series(changes: Sequence[float]) -> list[float]:
    """
    Check that every change is a finite real number.

    Raises:
        InvalidInputError: On None, non-numeric or non-finite entries
    """
    if changes is None:
        raise InvalidInputError("Change series is required", field_name="changes", value=None)

    validated: list[float] = []
    for index, change in enumerate(changes):
        if isinstance(change, bool) or not isinstance(change, Real):
            raise InvalidInputError(
                f"Change at position {index} is not numeric",
                field_name="changes",
                value=change,
            )
        if not math.isfinite(change):
            raise InvalidInputError(
                f"Change at position {index} is not finite",
                field_name="changes",
                value=change,
            )
        validated.append(float(change))
    return validated


class MetricCalculator:
    """
    Computes the MetricSet of an asset.

    ============================================================
    USAGE
    ============================================================
        calculator = MetricCalculator()
        metrics = calculator.calculate(snapshot)

        calculator.market_maturity(2e9).category      # "Mature"
        calculator.volume_health(0.2).category        # "Healthy"
        calculator.momentum([1.0, -2.0, 3.0])         # 0.666...

    ============================================================
    """

    def __init__(self, config: Optional[InvestmentScoringConfig] = None):
        self.config = config or InvestmentScoringConfig()

    @property
    def _maturity(self) -> MarketMaturityConfig:
        return self.config.market_maturity

    @property
    def _volume(self) -> VolumeHealthConfig:
        return self.config.volume_health

    @property
    def _volatility(self) -> VolatilityConfig:
        return self.config.volatility

    # --------------------------------------------------
    # Market maturity
    # --------------------------------------------------

    def market_maturity(self, market_cap: float) -> MarketMaturity:
        """
        Bucket a market cap. Tiers are checked in order and the
        first tier whose floor is reached wins.
        """
        for tier in self._maturity.tiers:
            if market_cap >= tier.min_market_cap:
                return MarketMaturity(score=tier.score, category=tier.category)
        return MarketMaturity(
            score=self._maturity.fallback_score,
            category=self._maturity.fallback_category,
        )

    # --------------------------------------------------
    # Volume health
    # --------------------------------------------------

    def volume_health(self, ratio: float) -> VolumeHealth:
        """
        Score a volume/market-cap ratio on a log scale that
        saturates at the exceptional ratio.

        The category uses the unclamped ratio.
        """
        if ratio is None or not math.isfinite(ratio):
            raise InvalidInputError("Volume ratio must be finite", field_name="ratio", value=ratio)

        ceiling = self._volume.exceptional_ratio
        clamped = min(max(ratio, 0.0), ceiling)
        score = math.log10(clamped * 100 + 1) / math.log10(ceiling * 100 + 1)

        if ratio >= self._volume.exceptional_ratio:
            category = "Exceptional"
        elif ratio >= self._volume.strong_ratio:
            category = "Strong"
        elif ratio >= self._volume.healthy_ratio:
            category = "Healthy"
        else:
            category = "Low"

        return VolumeHealth(score=score, category=category, ratio=ratio)

    # --------------------------------------------------
    # Momentum
    # --------------------------------------------------

    def momentum(self, changes: Sequence[float]) -> float:
        """
        RSI-style momentum rescaled to [0, 1].

        With no observed losses the result is 1.0, which also
        covers the empty series.
        """
        values = validate_change_series(changes)

        gains = [c for c in values if c > 0]
        losses = [-c for c in values if c < 0]

        avg_gain = sum(gains) / len(gains) if gains else 0.0
        avg_loss = sum(losses) / len(losses) if losses else 0.0

        if avg_loss == 0:
            return 1.0

        relative_strength = avg_gain / avg_loss
        return (100 - 100 / (1 + relative_strength)) / 100

    # --------------------------------------------------
    # Volatility
    # --------------------------------------------------

    def volatility(self, changes: Sequence[float]) -> Volatility:
        """Population standard deviation of the change series."""
        values = validate_change_series(changes)

        if values:
            mean = sum(values) / len(values)
            variance = sum((c - mean) ** 2 for c in values) / len(values)
            std_dev = math.sqrt(variance)
        else:
            std_dev = 0.0

        score = min(std_dev / self._volatility.std_dev_ceiling, 1.0)

        if std_dev > self._volatility.high_std_dev:
            category = "High"
        elif std_dev > self._volatility.medium_std_dev:
            category = "Medium"
        else:
            category = "Low"

        return Volatility(score=score, category=category, std_dev=std_dev)

    # --------------------------------------------------
    # Full metric set
    # --------------------------------------------------

    def calculate(self, snapshot: AssetSnapshot) -> MetricSet:
        """
        Compute every sub-metric for a snapshot.

        Raises:
            InvalidInputError: If market cap is not positive or the
                change series is malformed
        """
        changes = snapshot.change_series
        return MetricSet(
            market_maturity=self.market_maturity(snapshot.market_cap),
            volume_health=self.volume_health(snapshot.volume_ratio),
            momentum=self.momentum(changes),
            volatility=self.volatility(changes),
        )


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

_default_calculator = MetricCalculator()


def calculate_market_maturity(market_cap: float) -> MarketMaturity:
    return _default_calculator.market_maturity(market_cap)


def calculate_volume_health(ratio: float) -> VolumeHealth:
    return _default_calculator.volume_health(ratio)


def calculate_momentum(changes: Sequence[float]) -> float:
    return _default_calculator.momentum(changes)


def calculate_volatility(changes: Sequence[float]) -> Volatility:
    return _default_calculator.volatility(changes)


def calculate_metrics(snapshot: AssetSnapshot) -> MetricSet:
    return _default_calculator.calculate(snapshot)
