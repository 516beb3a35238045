"""
Market Cycle - Configuration.

============================================================
BOUNDARY CONSTANTS
============================================================
BTC dominance (% of total crypto market cap):

    >= 60   btc_dominance   (BTC favoured, impact 1.2 / 0.8)
    <= 35   altcoin_season  (alts favoured, impact 0.8 / 1.2)
    <  45   transition
    else    accumulation    (45 <= dominance < 60)

Rules are evaluated in that order. Dominance exactly 45 is
NOT below the transition ceiling and so resolves to
accumulation.

============================================================
"""

from dataclasses import dataclass
from typing import Any, Dict


BTC_DOMINANCE_FLOOR = 60.0
ALTCOIN_SEASON_CEILING = 35.0
TRANSITION_CEILING = 45.0

BTC_FAVOURED_IMPACT = 1.2
ALTCOIN_FAVOURED_IMPACT = 0.8
NEUTRAL_IMPACT = 1.0

# btc_impact + altcoin_impact always equals this total
IMPACT_TOTAL = 2.0


@dataclass(frozen=True)
class MarketCycleConfig:
    """Dominance boundaries and impact multipliers."""

    btc_dominance_floor: float = BTC_DOMINANCE_FLOOR
    altcoin_season_ceiling: float = ALTCOIN_SEASON_CEILING
    transition_ceiling: float = TRANSITION_CEILING

    btc_favoured_impact: float = BTC_FAVOURED_IMPACT
    altcoin_favoured_impact: float = ALTCOIN_FAVOURED_IMPACT
    neutral_impact: float = NEUTRAL_IMPACT
    impact_total: float = IMPACT_TOTAL

    btc_symbol: str = "BTC"

    def validate(self) -> list:
        """Return a list of configuration errors (empty if valid)."""
        errors = []
        if not self.altcoin_season_ceiling < self.transition_ceiling < self.btc_dominance_floor:
            errors.append(
                "Boundaries must satisfy altcoin_season_ceiling < transition_ceiling < btc_dominance_floor"
            )
        for name in ("btc_favoured_impact", "altcoin_favoured_impact", "neutral_impact"):
            value = getattr(self, name)
            if not 0 <= value <= self.impact_total:
                errors.append(f"{name} must be within [0, {self.impact_total}]")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "btc_dominance_floor": self.btc_dominance_floor,
            "altcoin_season_ceiling": self.altcoin_season_ceiling,
            "transition_ceiling": self.transition_ceiling,
            "btc_favoured_impact": self.btc_favoured_impact,
            "altcoin_favoured_impact": self.altcoin_favoured_impact,
            "neutral_impact": self.neutral_impact,
            "impact_total": self.impact_total,
            "btc_symbol": self.btc_symbol,
        }


def get_default_config() -> MarketCycleConfig:
    """Return the default market-cycle configuration."""
    return MarketCycleConfig()
