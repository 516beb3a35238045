"""
Market Cycle - Analyzer.

============================================================
PURPOSE
============================================================
Classifies a BTC dominance percentage into a market phase,
the score impact for BTC and altcoins, and a recommendation.

============================================================
CLASSIFICATION
============================================================
An ordered rule table, evaluated top-down, first match wins:

    1. dominance >= 60  -> btc_dominance   (high)
    2. dominance <= 35  -> altcoin_season  (high)
    3. dominance <  45  -> transition      (medium)
    4. otherwise        -> accumulation    (medium)

Stateless: no transition history is kept between calls.

============================================================
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from core.exceptions import ConfigurationError, InvalidInputError

from .config import MarketCycleConfig
from .types import (
    DominanceState,
    MarketImpact,
    MarketPhase,
    PhaseInfo,
    PhaseStrength,
    Recommendation,
)


logger = logging.getLogger(__name__)


PHASE_DESCRIPTIONS: Dict[MarketPhase, str] = {
    MarketPhase.BTC_DOMINANCE: "Capital concentrated in Bitcoin; altcoins underperform",
    MarketPhase.ALTCOIN_SEASON: "Capital rotating into altcoins; Bitcoin share shrinking",
    MarketPhase.TRANSITION: "Dominance falling toward altcoin territory; rotation under way",
    MarketPhase.ACCUMULATION: "Balanced market; capital building positions across majors",
}

PHASE_RECOMMENDATIONS: Dict[MarketPhase, Recommendation] = {
    MarketPhase.BTC_DOMINANCE: Recommendation(
        type="defensive",
        action="Favour BTC exposure and trim speculative altcoin positions",
        confidence="high",
    ),
    MarketPhase.ALTCOIN_SEASON: Recommendation(
        type="aggressive",
        action="Rotate into liquid altcoins with strong momentum",
        confidence="high",
    ),
    MarketPhase.TRANSITION: Recommendation(
        type="selective",
        action="Add altcoins gradually while dominance keeps falling",
        confidence="medium",
    ),
    MarketPhase.ACCUMULATION: Recommendation(
        type="neutral",
        action="Build core BTC and large-cap positions; wait for a clear rotation",
        confidence="medium",
    ),
}


@dataclass(frozen=True)
class PhaseRule:
    """One row of the classification table."""

    phase: MarketPhase
    strength: PhaseStrength
    matches: Callable[[float], bool]
    condition: str


class MarketCycleAnalyzer:
    """
    Classifies BTC dominance into a DominanceState.

    ============================================================
    USAGE
    ============================================================
        analyzer = MarketCycleAnalyzer()
        state = analyzer.classify(58.3)

        state.phase.name              # MarketPhase.ACCUMULATION
        state.impact.altcoin_impact   # 1.0

    ============================================================
    """

    def __init__(self, config: Optional[MarketCycleConfig] = None):
        self.config = config or MarketCycleConfig()

        errors = self.config.validate()
        if errors:
            raise ConfigurationError(f"Invalid market cycle config: {'; '.join(errors)}")

        self._rules = self._build_rules()

    def _build_rules(self) -> Tuple[PhaseRule, ...]:
        c = self.config
        return (
            PhaseRule(
                phase=MarketPhase.BTC_DOMINANCE,
                strength=PhaseStrength.HIGH,
                matches=lambda d: d >= c.btc_dominance_floor,
                condition=f">= {c.btc_dominance_floor:g}",
            ),
            PhaseRule(
                phase=MarketPhase.ALTCOIN_SEASON,
                strength=PhaseStrength.HIGH,
                matches=lambda d: d <= c.altcoin_season_ceiling,
                condition=f"<= {c.altcoin_season_ceiling:g}",
            ),
            PhaseRule(
                phase=MarketPhase.TRANSITION,
                strength=PhaseStrength.MEDIUM,
                matches=lambda d: d < c.transition_ceiling,
                condition=f"< {c.transition_ceiling:g}",
            ),
            PhaseRule(
                phase=MarketPhase.ACCUMULATION,
                strength=PhaseStrength.MEDIUM,
                matches=lambda d: True,
                condition="otherwise",
            ),
        )

    @property
    def rules(self) -> Tuple[PhaseRule, ...]:
        """The classification table in evaluation order."""
        return self._rules

    def classify(self, dominance: float) -> DominanceState:
        """
        Build the full dominance state for a percentage.

        Out-of-range percentages are clamped into [0, 100].

        Raises:
            InvalidInputError: If dominance is not a finite number
        """
        dominance = self._normalize(dominance)

        phase = self.determine_phase(dominance)
        impact = self.assess_impact(dominance)

        logger.debug(
            f"Dominance {dominance:.2f}% -> {phase.name.value} "
            f"(btc {impact.btc_impact}, alt {impact.altcoin_impact})"
        )

        return DominanceState(
            current_dominance=dominance,
            phase=phase,
            impact=impact,
            recommendation=PHASE_RECOMMENDATIONS[phase.name],
        )

    def determine_phase(self, dominance: float) -> PhaseInfo:
        """First matching rule wins."""
        for rule in self._rules:
            if rule.matches(dominance):
                return PhaseInfo(
                    name=rule.phase,
                    strength=rule.strength,
                    description=PHASE_DESCRIPTIONS[rule.phase],
                )
        # The last rule always matches
        raise AssertionError("Phase rule table has no fallback")

    def assess_impact(self, dominance: float) -> MarketImpact:
        """Zero-sum impact multipliers for BTC and altcoins."""
        c = self.config
        if dominance >= c.btc_dominance_floor:
            btc_impact = c.btc_favoured_impact
        elif dominance <= c.altcoin_season_ceiling:
            btc_impact = c.altcoin_favoured_impact
        else:
            btc_impact = c.neutral_impact

        return MarketImpact(btc_impact=btc_impact, altcoin_impact=c.impact_total - btc_impact)

    def _normalize(self, dominance: float) -> float:
        if isinstance(dominance, bool) or not isinstance(dominance, (int, float)):
            raise InvalidInputError("Dominance must be numeric", field_name="dominance", value=dominance)
        if not math.isfinite(dominance):
            raise InvalidInputError("Dominance must be finite", field_name="dominance", value=dominance)
        if not 0 <= dominance <= 100:
            logger.warning(f"Dominance {dominance} outside [0, 100], clamping")
        return float(min(max(dominance, 0.0), 100.0))


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

_default_analyzer = MarketCycleAnalyzer()


def classify_dominance(dominance: float) -> DominanceState:
    """Classify a dominance percentage with the default boundaries."""
    return _default_analyzer.classify(dominance)
