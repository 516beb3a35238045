"""
Market Cycle - Package.

============================================================
PURPOSE
============================================================
Turns BTC dominance into a macro signal and applies it to
per-asset investment scores.

============================================================
FOUR PHASES
============================================================
1. BTC_DOMINANCE  (>= 60%): BTC favoured
2. ALTCOIN_SEASON (<= 35%): altcoins favoured
3. TRANSITION     (< 45%):  rotation under way
4. ACCUMULATION   (otherwise)

============================================================
USAGE
============================================================
    from market_cycle import classify_dominance, adjust

    state = classify_dominance(62.0)
    adjusted = adjust(analysis, state)

============================================================
"""

from .adjuster import DominanceAdjuster, adjust
from .analyzer import (
    PHASE_DESCRIPTIONS,
    PHASE_RECOMMENDATIONS,
    MarketCycleAnalyzer,
    PhaseRule,
    classify_dominance,
)
from .config import (
    ALTCOIN_SEASON_CEILING,
    BTC_DOMINANCE_FLOOR,
    TRANSITION_CEILING,
    MarketCycleConfig,
    get_default_config,
)
from .types import (
    AdjustedAnalysis,
    DominanceState,
    MarketImpact,
    MarketPhase,
    PhaseInfo,
    PhaseStrength,
    Recommendation,
)


__all__ = [
    # Config
    "MarketCycleConfig",
    "get_default_config",
    "BTC_DOMINANCE_FLOOR",
    "ALTCOIN_SEASON_CEILING",
    "TRANSITION_CEILING",

    # Types
    "MarketPhase",
    "PhaseStrength",
    "PhaseInfo",
    "MarketImpact",
    "Recommendation",
    "DominanceState",
    "AdjustedAnalysis",

    # Analyzer
    "MarketCycleAnalyzer",
    "PhaseRule",
    "PHASE_DESCRIPTIONS",
    "PHASE_RECOMMENDATIONS",
    "classify_dominance",

    # Adjuster
    "DominanceAdjuster",
    "adjust",
]
