"""
Tests for the price monitor.

Tests cover:
- Single polls and change since the previous poll
- Per-symbol failure isolation
- Scheduled loop with max_iterations and a mock clock
- Clean cancellation on stop()
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.clock import MockClock
from core.exceptions import InvalidInputError
from data_sources.exceptions import FetchError
from opportunity_scanner.monitor import PriceMonitor, PriceTick
from tests.conftest import build_snapshot


START = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_source(prices):
    """Quote double returning successive prices per symbol."""
    iterators = {symbol: iter(values) for symbol, values in prices.items()}

    async def fetch_quote(symbol):
        value = next(iterators[symbol])
        if isinstance(value, Exception):
            raise value
        return build_snapshot(symbol, price=value)

    source = MagicMock()
    source.fetch_quote = AsyncMock(side_effect=fetch_quote)
    return source


# =============================================================
# TEST: Single Poll
# =============================================================

class TestRunOnce:
    """Manual polling."""

    @pytest.mark.asyncio
    async def test_first_poll_has_no_change(self):
        clock = MockClock(START)
        monitor = PriceMonitor(make_source({"BTC": [100.0]}), ["btc"], clock=clock)

        ticks = await monitor.run_once()

        assert ticks == [PriceTick("BTC", 100.0, None, START)]

    @pytest.mark.asyncio
    async def test_change_since_last(self):
        monitor = PriceMonitor(make_source({"BTC": [100.0, 110.0, 99.0]}), ["BTC"], clock=MockClock(START))

        await monitor.run_once()
        second = await monitor.run_once()
        third = await monitor.run_once()

        assert second[0].change_pct_since_last == pytest.approx(10.0)
        assert third[0].change_pct_since_last == pytest.approx(-10.0)
        assert monitor.iterations == 3

    @pytest.mark.asyncio
    async def test_failure_isolated(self, caplog):
        source = make_source({
            "BTC": [100.0],
            "ETH": [FetchError("HTTP 503", source_name="test", status_code=503)],
        })
        monitor = PriceMonitor(source, ["ETH", "BTC"], clock=MockClock(START))

        ticks = await monitor.run_once()

        assert [t.symbol for t in ticks] == ["BTC"]
        assert "ETH" in caplog.text

    @pytest.mark.asyncio
    async def test_sync_callback(self):
        received = []
        monitor = PriceMonitor(
            make_source({"BTC": [1.0]}), ["BTC"], callback=received.extend, clock=MockClock(START)
        )

        await monitor.run_once()
        assert [t.price for t in received] == [1.0]

    @pytest.mark.asyncio
    async def test_async_callback(self):
        callback = AsyncMock()
        monitor = PriceMonitor(make_source({"BTC": [1.0]}), ["BTC"], callback=callback, clock=MockClock(START))

        await monitor.run_once()
        callback.assert_awaited_once()

    def test_requires_symbols(self):
        with pytest.raises(InvalidInputError):
            PriceMonitor(MagicMock(), [])

    def test_requires_positive_interval(self):
        with pytest.raises(InvalidInputError):
            PriceMonitor(MagicMock(), ["BTC"], interval_seconds=0)


# =============================================================
# TEST: Scheduled Loop
# =============================================================

class TestScheduledLoop:
    """start / wait / stop."""

    @pytest.mark.asyncio
    async def test_max_iterations(self):
        clock = MockClock(START)
        ticks = []
        monitor = PriceMonitor(
            make_source({"BTC": [1.0, 2.0, 3.0]}),
            ["BTC"],
            interval_seconds=30,
            callback=ticks.extend,
            clock=clock,
            max_iterations=3,
        )

        monitor.start()
        await monitor.wait()

        assert monitor.iterations == 3
        assert clock.sleeps == [30, 30]
        assert [t.observed_at for t in ticks] == [
            START,
            datetime(2025, 1, 1, 12, 0, 30, tzinfo=timezone.utc),
            datetime(2025, 1, 1, 12, 1, tzinfo=timezone.utc),
        ]
        assert not monitor.is_running

    @pytest.mark.asyncio
    async def test_stop_cancels(self):
        source = MagicMock()
        source.fetch_quote = AsyncMock(return_value=build_snapshot("BTC"))
        monitor = PriceMonitor(source, ["BTC"], clock=MockClock(START))

        task = monitor.start()
        for _ in range(5):
            await asyncio.sleep(0)
        assert monitor.is_running

        await monitor.stop()

        assert task.cancelled()
        assert not monitor.is_running
        assert monitor.iterations >= 1

    @pytest.mark.asyncio
    async def test_double_start_rejected(self):
        source = MagicMock()
        source.fetch_quote = AsyncMock(return_value=build_snapshot("BTC"))
        monitor = PriceMonitor(source, ["BTC"], clock=MockClock(START))

        monitor.start()
        try:
            with pytest.raises(RuntimeError):
                monitor.start()
        finally:
            await monitor.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        monitor = PriceMonitor(MagicMock(), ["BTC"])
        await monitor.stop()
        assert monitor.iterations == 0

    @pytest.mark.asyncio
    async def test_callback_error_raised_once(self):
        def failing_callback(ticks):
            raise ValueError("callback failed")

        monitor = PriceMonitor(
            make_source({"BTC": [1.0]}),
            ["BTC"],
            callback=failing_callback,
            clock=MockClock(START),
        )

        monitor.start()
        with pytest.raises(ValueError):
            await monitor.wait()

        await monitor.stop()
        assert not monitor.is_running
