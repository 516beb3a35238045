"""
Tests for the market-cycle analyzer.

Tests cover:
- Phase classification and boundary values
- Zero-sum impact multipliers
- Clamping and rejection of bad dominance values
- Rule table order and config validation
"""

import logging

import pytest

from core.exceptions import ConfigurationError, InvalidInputError
from market_cycle import (
    PHASE_RECOMMENDATIONS,
    MarketCycleAnalyzer,
    MarketCycleConfig,
    MarketPhase,
    PhaseStrength,
    classify_dominance,
)


# =============================================================
# TEST: Phase Classification
# =============================================================

class TestPhaseClassification:
    """Ordered rule table, first match wins."""

    @pytest.mark.parametrize("dominance,phase,strength", [
        (100.0, MarketPhase.BTC_DOMINANCE, PhaseStrength.HIGH),
        (65.0, MarketPhase.BTC_DOMINANCE, PhaseStrength.HIGH),
        (60.0, MarketPhase.BTC_DOMINANCE, PhaseStrength.HIGH),
        (59.99, MarketPhase.ACCUMULATION, PhaseStrength.MEDIUM),
        (50.0, MarketPhase.ACCUMULATION, PhaseStrength.MEDIUM),
        (45.0, MarketPhase.ACCUMULATION, PhaseStrength.MEDIUM),
        (44.99, MarketPhase.TRANSITION, PhaseStrength.MEDIUM),
        (40.0, MarketPhase.TRANSITION, PhaseStrength.MEDIUM),
        (35.01, MarketPhase.TRANSITION, PhaseStrength.MEDIUM),
        (35.0, MarketPhase.ALTCOIN_SEASON, PhaseStrength.HIGH),
        (0.0, MarketPhase.ALTCOIN_SEASON, PhaseStrength.HIGH),
    ])
    def test_phase(self, dominance, phase, strength):
        state = classify_dominance(dominance)
        assert state.phase.name == phase
        assert state.phase.strength == strength

    def test_state_fields(self):
        state = classify_dominance(65.0)

        assert state.current_dominance == 65.0
        assert state.phase.description
        assert state.recommendation == PHASE_RECOMMENDATIONS[MarketPhase.BTC_DOMINANCE]
        assert state.recommendation.type == "defensive"

    def test_every_phase_has_recommendation(self):
        for phase in MarketPhase:
            assert phase in PHASE_RECOMMENDATIONS

    def test_integer_input(self):
        assert classify_dominance(70).current_dominance == 70.0

    def test_stateless(self):
        analyzer = MarketCycleAnalyzer()
        first = analyzer.classify(40.0)
        analyzer.classify(70.0)
        assert analyzer.classify(40.0) == first


# =============================================================
# TEST: Impact
# =============================================================

class TestImpact:
    """BTC and altcoin multipliers."""

    @pytest.mark.parametrize("dominance,btc,alt", [
        (65.0, 1.2, 0.8),
        (30.0, 0.8, 1.2),
        (50.0, 1.0, 1.0),
        (40.0, 1.0, 1.0),
    ])
    def test_multipliers(self, dominance, btc, alt):
        impact = classify_dominance(dominance).impact
        assert impact.btc_impact == pytest.approx(btc)
        assert impact.altcoin_impact == pytest.approx(alt)

    @pytest.mark.parametrize("dominance", [0.0, 20.0, 35.0, 44.0, 45.0, 59.0, 60.0, 99.0])
    def test_zero_sum(self, dominance):
        impact = classify_dominance(dominance).impact
        assert impact.btc_impact + impact.altcoin_impact == pytest.approx(2.0)

    def test_for_symbol(self):
        impact = classify_dominance(65.0).impact

        assert impact.for_symbol("BTC") == 1.2
        assert impact.for_symbol("btc") == 1.2
        assert impact.for_symbol("ETH") == pytest.approx(0.8)


# =============================================================
# TEST: Input Handling
# =============================================================

class TestInputHandling:
    """Out-of-range values clamp, non-numbers raise."""

    def test_above_range_clamped(self, caplog):
        with caplog.at_level(logging.WARNING):
            state = classify_dominance(120.0)

        assert state.current_dominance == 100.0
        assert state.phase.name == MarketPhase.BTC_DOMINANCE
        assert "clamping" in caplog.text

    def test_below_range_clamped(self):
        state = classify_dominance(-5.0)
        assert state.current_dominance == 0.0
        assert state.phase.name == MarketPhase.ALTCOIN_SEASON

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "55", None, True])
    def test_rejected(self, value):
        with pytest.raises(InvalidInputError):
            classify_dominance(value)


# =============================================================
# TEST: Rule Table and Config
# =============================================================

class TestRulesAndConfig:
    """Rule order and configurable boundaries."""

    def test_rule_order(self):
        phases = [rule.phase for rule in MarketCycleAnalyzer().rules]
        assert phases == [
            MarketPhase.BTC_DOMINANCE,
            MarketPhase.ALTCOIN_SEASON,
            MarketPhase.TRANSITION,
            MarketPhase.ACCUMULATION,
        ]

    def test_custom_boundaries(self):
        analyzer = MarketCycleAnalyzer(MarketCycleConfig(btc_dominance_floor=55.0))
        assert analyzer.classify(56.0).phase.name == MarketPhase.BTC_DOMINANCE

    def test_invalid_boundaries(self):
        with pytest.raises(ConfigurationError):
            MarketCycleAnalyzer(MarketCycleConfig(transition_ceiling=70.0))

    def test_invalid_impact(self):
        with pytest.raises(ConfigurationError):
            MarketCycleAnalyzer(MarketCycleConfig(btc_favoured_impact=2.5))

    def test_config_to_dict(self):
        data = MarketCycleConfig().to_dict()
        assert data["btc_dominance_floor"] == 60.0
        assert data["impact_total"] == 2.0
