"""
Tests for the scan pipeline.

Tests cover:
- Dominance fetched once per scan, failure aborts
- Liquidity pre-filter
- Per-symbol failure isolation in scan_symbols
- Bounded quote concurrency
- Exchange-listing lookup degradation
- Single-token analysis error propagation
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.exceptions import InvalidInputError
from data_sources.exceptions import FetchError, SymbolNotFoundError
from data_sources.models import ListingSort
from market_cycle import MarketPhase
from opportunity_scanner.config import ListingFilter, ScannerConfig
from opportunity_scanner.scanner import OpportunityScanner, passes_liquidity_filter
from tests.conftest import build_snapshot


def make_market_data(dominance=50.0, listings=None, quotes=None):
    """Market-data double whose quotes come from a symbol map."""
    market_data = MagicMock()
    market_data.fetch_dominance = AsyncMock(return_value=dominance)
    market_data.fetch_listings = AsyncMock(return_value=listings or [])

    quotes = quotes or {}

    async def fetch_quote(symbol):
        result = quotes.get(symbol.upper())
        if result is None:
            raise SymbolNotFoundError(symbol, source_name="test")
        if isinstance(result, Exception):
            raise result
        return result

    market_data.fetch_quote = AsyncMock(side_effect=fetch_quote)
    return market_data


def make_exchange(symbols=("BTC", "ETH")):
    exchange = MagicMock()
    exchange.listed_symbols = AsyncMock(return_value=frozenset(symbols))
    return exchange


# =============================================================
# TEST: Liquidity Filter
# =============================================================

class TestLiquidityFilter:
    """Minimum cap, volume and ratio."""

    def test_passes(self):
        assert passes_liquidity_filter(build_snapshot(), ListingFilter())

    @pytest.mark.parametrize("overrides", [
        {"market_cap": 1_000_000.0, "volume_24h": 500_000.0},
        {"market_cap": 5e6, "volume_24h": 100_000.0},
        {"market_cap": 1e9, "volume_24h": 5e7},
    ])
    def test_rejects(self, overrides):
        assert not passes_liquidity_filter(build_snapshot(**overrides), ListingFilter())

    def test_disabled(self):
        snapshot = build_snapshot(market_cap=10.0, volume_24h=0.0)
        assert passes_liquidity_filter(snapshot, ListingFilter(enabled=False))


# =============================================================
# TEST: Top Opportunities
# =============================================================

class TestScanTopOpportunities:
    """Listing-based scan."""

    @pytest.mark.asyncio
    async def test_ranks_filtered_listings(self):
        listings = [
            build_snapshot("ETH"),
            build_snapshot("TINY", market_cap=5e5, volume_24h=2e5),
            build_snapshot("SOL", market_cap=8e7, volume_24h=4e7),
        ]
        market_data = make_market_data(dominance=50.0, listings=listings)
        scanner = OpportunityScanner(market_data, make_exchange())

        results = await scanner.scan_top_opportunities(k=10)

        assert {a.symbol for a in results} == {"ETH", "SOL"}
        market_data.fetch_dominance.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_listing_request_uses_config(self):
        market_data = make_market_data(listings=[build_snapshot("ETH")])
        config = ScannerConfig(listings_limit=50, listings_sort=ListingSort.VOLUME_24H)
        scanner = OpportunityScanner(market_data, config=config)

        await scanner.scan_top_opportunities()

        kwargs = market_data.fetch_listings.await_args.kwargs
        assert kwargs["limit"] == 50
        assert kwargs["sort"] == ListingSort.VOLUME_24H

    @pytest.mark.asyncio
    async def test_filters_disabled(self):
        listings = [build_snapshot("TINY", market_cap=5e5, volume_24h=2e5)]
        config = ScannerConfig(listing_filter=ListingFilter(enabled=False))
        scanner = OpportunityScanner(make_market_data(listings=listings), config=config)

        results = await scanner.scan_top_opportunities()
        assert [a.symbol for a in results] == ["TINY"]

    @pytest.mark.asyncio
    async def test_dominance_shared(self):
        listings = [build_snapshot("ETH"), build_snapshot("BTC")]
        scanner = OpportunityScanner(make_market_data(dominance=65.0, listings=listings))

        results = await scanner.scan_top_opportunities()

        assert all(a.dominance is results[0].dominance for a in results)
        assert results[0].dominance.phase.name == MarketPhase.BTC_DOMINANCE

    @pytest.mark.asyncio
    async def test_dominance_failure_aborts(self):
        market_data = make_market_data(listings=[build_snapshot("ETH")])
        market_data.fetch_dominance.side_effect = FetchError("HTTP 500", source_name="test", status_code=500)
        scanner = OpportunityScanner(market_data)

        with pytest.raises(FetchError):
            await scanner.scan_top_opportunities()
        market_data.fetch_listings.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_top_k(self):
        listings = [build_snapshot(f"T{i}") for i in range(5)]
        scanner = OpportunityScanner(make_market_data(listings=listings), config=ScannerConfig(top_k=3))

        assert len(await scanner.scan_top_opportunities()) == 3

    @pytest.mark.asyncio
    async def test_exchange_membership(self):
        listings = [build_snapshot("ETH"), build_snapshot("XYZ")]
        exchange = make_exchange(("ETH",))
        scanner = OpportunityScanner(make_market_data(listings=listings), exchange)

        results = await scanner.scan_top_opportunities()

        assert {a.symbol: a.base.is_on_exchange for a in results} == {"ETH": True, "XYZ": False}
        exchange.listed_symbols.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_exchange_failure_degrades(self, caplog):
        exchange = MagicMock()
        exchange.listed_symbols = AsyncMock(side_effect=FetchError("timeout", source_name="coinbase"))
        scanner = OpportunityScanner(make_market_data(listings=[build_snapshot("ETH")]), exchange)

        results = await scanner.scan_top_opportunities()

        assert results[0].base.is_on_exchange is False
        assert "not listed" in caplog.text


# =============================================================
# TEST: Explicit Symbols
# =============================================================

class TestScanSymbols:
    """Concurrent quote fan-out."""

    @pytest.mark.asyncio
    async def test_failures_isolated(self, caplog):
        quotes = {
            "ETH": build_snapshot("ETH"),
            "SOL": build_snapshot("SOL"),
            "ERR": FetchError("HTTP 502", source_name="test", status_code=502),
        }
        market_data = make_market_data(quotes=quotes)
        scanner = OpportunityScanner(market_data)

        results = await scanner.scan_symbols(["ETH", "MISSING", "ERR", "SOL"])

        assert [a.symbol for a in results] == ["ETH", "SOL"]
        assert "MISSING" in caplog.text
        assert "ERR" in caplog.text
        market_data.fetch_dominance.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unscorable_quote_dropped(self):
        quotes = {"ETH": build_snapshot("ETH"), "ZERO": build_snapshot("ZERO", market_cap=0.0)}
        scanner = OpportunityScanner(make_market_data(quotes=quotes))

        results = await scanner.scan_symbols(["ETH", "ZERO"])
        assert [a.symbol for a in results] == ["ETH"]

    @pytest.mark.asyncio
    async def test_unexpected_quote_error_isolated(self, caplog):
        quotes = {
            "ETH": build_snapshot("ETH"),
            "BAD": AttributeError("'list' object has no attribute 'get'"),
            "SOL": build_snapshot("SOL"),
        }
        scanner = OpportunityScanner(make_market_data(quotes=quotes))

        results = await scanner.scan_symbols(["ETH", "BAD", "SOL"])

        assert sorted(a.symbol for a in results) == ["ETH", "SOL"]
        assert "BAD" in caplog.text

    @pytest.mark.asyncio
    async def test_concurrency_bounded(self):
        in_flight = 0
        peak = 0

        async def slow_quote(symbol):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return build_snapshot(symbol)

        market_data = make_market_data()
        market_data.fetch_quote = AsyncMock(side_effect=slow_quote)
        scanner = OpportunityScanner(market_data, config=ScannerConfig(max_concurrency=2))

        results = await scanner.scan_symbols([f"S{i}" for i in range(6)], k=10)

        assert len(results) == 6
        assert peak == 2

    @pytest.mark.asyncio
    async def test_dominance_failure_aborts(self):
        market_data = make_market_data(quotes={"ETH": build_snapshot("ETH")})
        market_data.fetch_dominance.side_effect = FetchError("down", source_name="test")
        scanner = OpportunityScanner(market_data)

        with pytest.raises(FetchError):
            await scanner.scan_symbols(["ETH"])
        market_data.fetch_quote.assert_not_awaited()


# =============================================================
# TEST: Single Token
# =============================================================

class TestAnalyzeToken:
    """Errors propagate unchanged."""

    @pytest.mark.asyncio
    async def test_analysis(self):
        scanner = OpportunityScanner(
            make_market_data(dominance=30.0, quotes={"ETH": build_snapshot("ETH")}),
            make_exchange(("ETH",)),
        )

        adjusted = await scanner.analyze_token("eth")

        assert adjusted.symbol == "ETH"
        assert adjusted.base.is_on_exchange is True
        assert adjusted.adjusted_score == pytest.approx(adjusted.investment_score * 1.2)

    @pytest.mark.asyncio
    async def test_not_found(self):
        scanner = OpportunityScanner(make_market_data())

        with pytest.raises(SymbolNotFoundError):
            await scanner.analyze_token("NOPE")

    @pytest.mark.asyncio
    async def test_upstream_failure(self):
        scanner = OpportunityScanner(
            make_market_data(quotes={"ETH": FetchError("HTTP 500", source_name="test")})
        )

        with pytest.raises(FetchError):
            await scanner.analyze_token("ETH")

    @pytest.mark.asyncio
    async def test_invalid_input(self):
        scanner = OpportunityScanner(
            make_market_data(quotes={"ETH": build_snapshot("ETH", market_cap=0.0)})
        )

        with pytest.raises(InvalidInputError):
            await scanner.analyze_token("ETH")
