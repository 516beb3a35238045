"""
Shared fixtures for scanner tests.
"""

import pytest

from data_sources.models import AssetSnapshot
from market_cycle.analyzer import classify_dominance


def build_snapshot(symbol: str = "ETH", **overrides) -> AssetSnapshot:
    """Snapshot that passes the default liquidity filter."""
    fields = {
        "symbol": symbol,
        "name": f"{symbol} Token",
        "price": 100.0,
        "market_cap": 2e9,
        "volume_24h": 4e8,
        "percent_change_1h": 0.5,
        "percent_change_24h": 2.0,
        "percent_change_7d": -3.0,
        "percent_change_30d": 8.0,
    }
    fields.update(overrides)
    return AssetSnapshot(**fields)


@pytest.fixture
def make_snapshot():
    return build_snapshot


@pytest.fixture
def large_cap_snapshot() -> AssetSnapshot:
    """$1T cap, 5% volume ratio, changes 1/5/10/20."""
    return AssetSnapshot(
        symbol="ETH",
        name="Ethereum",
        price=3000.0,
        market_cap=1e12,
        volume_24h=5e10,
        percent_change_1h=1.0,
        percent_change_24h=5.0,
        percent_change_7d=10.0,
        percent_change_30d=20.0,
    )


@pytest.fixture
def btc_dominance_state():
    return classify_dominance(65.0)


@pytest.fixture
def accumulation_state():
    return classify_dominance(50.0)


@pytest.fixture
def altcoin_season_state():
    return classify_dominance(30.0)
