"""
Investment Scoring - Package.

============================================================
PURPOSE
============================================================
Scores a single crypto asset from a market-data snapshot.

============================================================
OUTPUTS
============================================================
- MetricSet: maturity, volume health, momentum, volatility
- Investment score: 1-10 composite
- Risk assessment: Low / Medium / High with a 0-1 score
- Potential return: 1x-10x estimate

The score is NOT adjusted for the market cycle here; see
market_cycle for the dominance adjustment.

============================================================
USAGE
============================================================
    from investment_scoring import InvestmentScorer

    scorer = InvestmentScorer()
    analysis = scorer.analyze(snapshot)

============================================================
"""

from .config import (
    InvestmentScoringConfig,
    MarketMaturityConfig,
    MaturityTier,
    PotentialReturnConfig,
    RiskLevelConfig,
    ScoringWeights,
    VolatilityConfig,
    VolumeHealthConfig,
    get_default_config,
)
from .metrics import (
    MetricCalculator,
    calculate_market_maturity,
    calculate_metrics,
    calculate_momentum,
    calculate_volatility,
    calculate_volume_health,
    validate_change_series,
)
from .scorer import InvestmentScorer, analyze_base
from .types import (
    AnalysisKind,
    InvestmentAnalysis,
    MarketMaturity,
    MetricSet,
    Performance,
    RiskAssessment,
    RiskLevel,
    Volatility,
    VolumeHealth,
)


__all__ = [
    # Config
    "InvestmentScoringConfig",
    "MarketMaturityConfig",
    "MaturityTier",
    "VolumeHealthConfig",
    "VolatilityConfig",
    "ScoringWeights",
    "RiskLevelConfig",
    "PotentialReturnConfig",
    "get_default_config",

    # Types
    "AnalysisKind",
    "RiskLevel",
    "MarketMaturity",
    "VolumeHealth",
    "Volatility",
    "MetricSet",
    "Performance",
    "RiskAssessment",
    "InvestmentAnalysis",

    # Calculators
    "MetricCalculator",
    "validate_change_series",
    "calculate_market_maturity",
    "calculate_volume_health",
    "calculate_momentum",
    "calculate_volatility",
    "calculate_metrics",

    # Scorer
    "InvestmentScorer",
    "analyze_base",
]
