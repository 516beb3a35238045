"""
Tests for the opportunity ranker.

Tests cover:
- Ordering by adjusted score and top-k truncation
- Dropping of unscorable assets with a warning
- Stable ordering of equal scores
- Exchange membership flag
"""

import logging

import pytest

from core.exceptions import InvalidInputError
from opportunity_scanner.ranker import OpportunityRanker, rank_opportunities


@pytest.fixture
def batch(make_snapshot):
    return [
        make_snapshot("AAA", market_cap=5e10, volume_24h=5e9),
        make_snapshot("BBB", market_cap=0.0),
        make_snapshot("CCC", market_cap=8e7, volume_24h=4e7),
        make_snapshot("DDD", market_cap=3e8, volume_24h=6e7),
        make_snapshot("EEE", market_cap=2e9, volume_24h=2e8),
    ]


# =============================================================
# TEST: Ordering
# =============================================================

class TestOrdering:
    """Descending adjusted score."""

    def test_sorted_descending(self, batch, accumulation_state):
        ranked = rank_opportunities(batch, accumulation_state)
        scores = [a.adjusted_score for a in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_top_k(self, batch, accumulation_state):
        ranked = rank_opportunities(batch, accumulation_state, k=2)
        full = rank_opportunities(batch, accumulation_state, k=10)

        assert len(ranked) == 2
        assert [a.symbol for a in ranked] == [a.symbol for a in full[:2]]

    def test_k_zero(self, batch, accumulation_state):
        assert rank_opportunities(batch, accumulation_state, k=0) == []

    def test_negative_k(self, batch, accumulation_state):
        with pytest.raises(InvalidInputError):
            rank_opportunities(batch, accumulation_state, k=-1)

    def test_empty_batch(self, accumulation_state):
        assert rank_opportunities([], accumulation_state) == []

    def test_ties_keep_input_order(self, make_snapshot, accumulation_state):
        snapshots = [make_snapshot(symbol) for symbol in ("ZZZ", "MMM", "AAA")]
        ranked = rank_opportunities(snapshots, accumulation_state)
        assert [a.symbol for a in ranked] == ["ZZZ", "MMM", "AAA"]

    def test_btc_boosted_in_btc_phase(self, make_snapshot, btc_dominance_state):
        snapshots = [make_snapshot("ETH"), make_snapshot("BTC")]
        ranked = rank_opportunities(snapshots, btc_dominance_state)

        assert ranked[0].symbol == "BTC"
        assert ranked[0].adjusted_score == pytest.approx(ranked[1].adjusted_score * 1.2 / 0.8)


# =============================================================
# TEST: Failure Isolation
# =============================================================

class TestFailureIsolation:
    """Unscorable assets are dropped, never fatal."""

    def test_zero_market_cap_dropped(self, batch, accumulation_state, caplog):
        with caplog.at_level(logging.WARNING, logger="opportunity_scanner.ranker"):
            ranked = rank_opportunities(batch, accumulation_state)

        assert len(ranked) == 4
        assert "BBB" not in [a.symbol for a in ranked]
        assert "BBB" in caplog.text

    def test_nan_change_dropped(self, make_snapshot, accumulation_state):
        snapshots = [make_snapshot("OK"), make_snapshot("BAD", percent_change_24h=float("nan"))]
        ranked = rank_opportunities(snapshots, accumulation_state)
        assert [a.symbol for a in ranked] == ["OK"]

    def test_all_dropped(self, make_snapshot, accumulation_state):
        snapshots = [make_snapshot("X", market_cap=0.0), make_snapshot("Y", market_cap=-1.0)]
        assert rank_opportunities(snapshots, accumulation_state) == []

    def test_non_string_symbol_dropped(self, make_snapshot, accumulation_state):
        snapshots = [make_snapshot("ETH"), make_snapshot(123), make_snapshot("SOL")]
        ranked = rank_opportunities(snapshots, accumulation_state)
        assert sorted(a.symbol for a in ranked) == ["ETH", "SOL"]

    def test_non_string_symbol_with_membership(self, make_snapshot, accumulation_state):
        snapshots = [make_snapshot("ETH"), make_snapshot(None)]
        ranked = rank_opportunities(snapshots, accumulation_state, listed_symbols=frozenset({"ETH"}))
        assert [a.symbol for a in ranked] == ["ETH"]
        assert ranked[0].is_on_exchange


# =============================================================
# TEST: Exchange Membership
# =============================================================

class TestExchangeMembership:
    """listed_symbols sets is_on_exchange."""

    def test_listed_flag(self, make_snapshot, accumulation_state):
        snapshots = [make_snapshot("ETH"), make_snapshot("obscure")]
        ranked = OpportunityRanker().rank(
            snapshots, accumulation_state, listed_symbols=frozenset({"ETH"})
        )
        flags = {a.symbol: a.base.is_on_exchange for a in ranked}

        assert flags == {"ETH": True, "obscure": False}

    def test_unknown_membership(self, make_snapshot, accumulation_state):
        ranked = rank_opportunities([make_snapshot("ETH")], accumulation_state)
        assert ranked[0].base.is_on_exchange is False

    def test_membership_does_not_change_score(self, make_snapshot, accumulation_state):
        snapshot = make_snapshot("ETH")
        listed = rank_opportunities([snapshot], accumulation_state, listed_symbols={"ETH"})
        unlisted = rank_opportunities([snapshot], accumulation_state)
        assert listed[0].adjusted_score == unlisted[0].adjusted_score
