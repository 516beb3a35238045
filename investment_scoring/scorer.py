"""
Investment Scoring - Scorer.

============================================================
PURPOSE
============================================================
The InvestmentScorer combines the sub-metrics of an asset into:

1. investment score  (1-10 composite desirability)
2. risk assessment   (Low / Medium / High + 0-1 score)
3. potential return  (1x-10x multiplier estimate)

============================================================
DESIGN PRINCIPLES
============================================================
- Pure and deterministic per call, no hidden state
- Validates the snapshot before any logarithm: a
  non-positive market cap is InvalidInputError, never
  -inf or NaN
- Results clamped to their documented bounds

============================================================
USAGE
============================================================
    from investment_scoring import InvestmentScorer

    scorer = InvestmentScorer()
    analysis = scorer.analyze(snapshot, is_on_exchange=True)

    print(f"{analysis.symbol}: {analysis.investment_score:.2f}/10")
    print(f"Risk: {analysis.risk.level.value}")

============================================================
"""

import math
from numbers import Real
from typing import Optional

from core.exceptions import InvalidInputError
from data_sources.models import AssetSnapshot

from .config import InvestmentScoringConfig
from .metrics import MetricCalculator
from .types import (
    InvestmentAnalysis,
    MetricSet,
    Performance,
    RiskAssessment,
    RiskLevel,
)


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _is_finite_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _require_positive_market_cap(market_cap: float, symbol: str = "") -> None:
    if not _is_finite_number(market_cap) or market_cap <= 0:
        raise InvalidInputError(
            f"Market cap must be a positive finite number{' for ' + symbol if symbol else ''}",
            field_name="market_cap",
            value=market_cap,
        )


class InvestmentScorer:
    """
    Main entry point for single-asset analysis.

    ============================================================
    RESPONSIBILITIES
    ============================================================
    1. Validate snapshot fields
    2. Delegate sub-metrics to MetricCalculator
    3. Compute composite score, risk and potential return
    4. Package an InvestmentAnalysis

    ============================================================
    """

    def __init__(
        self,
        config: Optional[InvestmentScoringConfig] = None,
        calculator: Optional[MetricCalculator] = None,
    ):
        """
        Initialize the scorer.

        Args:
            config: Thresholds and weights. Uses defaults if not provided.
            calculator: Metric calculator; built from config if not provided.
        """
        self.config = config or InvestmentScoringConfig()
        self.calculator = calculator or MetricCalculator(self.config)

    def analyze(self, snapshot: AssetSnapshot, is_on_exchange: bool = False) -> InvestmentAnalysis:
        """
        Perform a complete base analysis of one asset.

        Args:
            snapshot: Market-data snapshot
            is_on_exchange: Result of the exchange-listing lookup

        Returns:
            InvestmentAnalysis (the base, unadjusted variant)

        Raises:
            InvalidInputError: On non-positive market cap or
                malformed numeric fields
        """
        self.validate_snapshot(snapshot)

        metrics = self.calculator.calculate(snapshot)

        return InvestmentAnalysis(
            symbol=snapshot.symbol,
            name=snapshot.name,
            price=snapshot.price,
            market_cap=snapshot.market_cap,
            volume_24h=snapshot.volume_24h,
            metrics=metrics,
            performance=Performance.from_snapshot(snapshot),
            investment_score=self.investment_score(metrics, snapshot.market_cap, snapshot.volume_24h),
            risk=self.risk_level(metrics),
            potential_return=self.potential_return(metrics, snapshot.market_cap),
            is_on_exchange=is_on_exchange,
        )

    def validate_snapshot(self, snapshot: AssetSnapshot) -> None:
        """
        Reject snapshots that cannot be scored.

        Raises:
            InvalidInputError: If a required field is missing or invalid
        """
        if snapshot is None:
            raise InvalidInputError("Snapshot is None")

        if not isinstance(snapshot.symbol, str) or not snapshot.symbol:
            raise InvalidInputError("Snapshot symbol is required", field_name="symbol", value=snapshot.symbol)

        _require_positive_market_cap(snapshot.market_cap, snapshot.symbol)

        for field_name in ("price", "volume_24h"):
            value = getattr(snapshot, field_name)
            if not _is_finite_number(value) or value < 0:
                raise InvalidInputError(
                    f"{field_name} must be a non-negative finite number for {snapshot.symbol}",
                    field_name=field_name,
                    value=value,
                )

    # --------------------------------------------------
    # Composite score
    # --------------------------------------------------

    def investment_score(self, metrics: MetricSet, market_cap: float, volume_24h: float) -> float:
        """
        Weighted composite of the six components, clamped to [1, 10].

        Components:
            maturity      (offset - maturity) * 2
            volume health score * 10
            momentum      momentum * 10
            volatility    max(0, 1 - volatility)
            size          min(cap, log10(reference / market_cap) * 2)
            liquidity     min(cap, volume / market_cap * 5)
        """
        _require_positive_market_cap(market_cap)
        w = self.config.weights

        maturity = (w.maturity_offset - metrics.market_maturity.score) * w.maturity_multiplier
        volume = metrics.volume_health.score * w.component_scale
        momentum = metrics.momentum * w.component_scale
        stability = max(0.0, 1 - metrics.volatility.score)
        size = min(w.component_cap, math.log10(w.reference_market_cap / market_cap) * w.size_multiplier)
        liquidity = min(w.component_cap, (volume_24h / market_cap) * w.liquidity_multiplier)

        score = (
            w.maturity_weight * maturity
            + w.volume_health_weight * volume
            + w.momentum_weight * momentum
            + w.volatility_weight * stability
            + w.size_weight * size
            + w.liquidity_weight * liquidity
        )

        return _clamp(score, w.min_score, w.max_score)

    # --------------------------------------------------
    # Risk
    # --------------------------------------------------

    def risk_level(self, metrics: MetricSet) -> RiskAssessment:
        """Blend volatility, immaturity and illiquidity into a 0-1 risk score."""
        r = self.config.risk

        score = (
            r.volatility_weight * metrics.volatility.score
            + r.maturity_weight * (metrics.market_maturity.score / r.maturity_scale)
            + r.volume_weight * (1 - metrics.volume_health.score)
        )

        level = RiskLevel.from_score(score, r.high_threshold, r.medium_threshold)
        return RiskAssessment(level=level, score=score)

    # --------------------------------------------------
    # Potential return
    # --------------------------------------------------

    def potential_return(self, metrics: MetricSet, market_cap: float) -> float:
        """Estimated upside multiplier, clamped to [1, 10]."""
        _require_positive_market_cap(market_cap)
        p = self.config.potential_return

        size = math.log10(p.reference_market_cap / market_cap) * p.size_multiplier
        maturity = (p.maturity_offset - metrics.market_maturity.score) / p.maturity_scale

        raw = p.scale * (
            p.size_weight * size
            + p.volume_health_weight * metrics.volume_health.score
            + p.momentum_weight * metrics.momentum
            + p.maturity_weight * maturity
        )

        return _clamp(raw, p.min_return, p.max_return)


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================


def analyze_base(
    snapshot: AssetSnapshot,
    is_on_exchange: bool = False,
    config: Optional[InvestmentScoringConfig] = None,
) -> InvestmentAnalysis:
    """
    Analyze one snapshot in a single call.

    For repeated scoring, prefer a persistent InvestmentScorer.
    """
    return InvestmentScorer(config=config).analyze(snapshot, is_on_exchange)
