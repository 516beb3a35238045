"""
Opportunity Scanner - Price Monitor.

============================================================
PURPOSE
============================================================
Polls quotes for a fixed set of symbols on an interval and
reports the price change since the previous poll.

============================================================
LIFECYCLE
============================================================
    monitor = PriceMonitor(source, ["BTC", "ETH"], interval_seconds=60)
    monitor.start()       # schedules the polling task
    ...
    await monitor.stop()  # cancels and awaits it

run_once() polls every symbol a single time and can be used
without starting the task.

============================================================
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Union

from core.clock import ClockProtocol, SystemClock
from core.exceptions import InvalidInputError, NotFoundError, UpstreamFailureError
from data_sources.base import MarketDataSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceTick:
    """One observed price."""

    symbol: str
    price: float
    change_pct_since_last: Optional[float]
    observed_at: datetime

    def to_dict(self):
        return {
            "symbol": self.symbol,
            "price": self.price,
            "change_pct_since_last": self.change_pct_since_last,
            "observed_at": self.observed_at.isoformat(),
        }


TickCallback = Callable[[List[PriceTick]], Union[None, Awaitable[None]]]


class PriceMonitor:
    """Cancellable interval poller for a set of symbols."""

    def __init__(
        self,
        market_data: MarketDataSource,
        symbols: Iterable[str],
        interval_seconds: float = 60.0,
        callback: Optional[TickCallback] = None,
        clock: Optional[ClockProtocol] = None,
        max_iterations: Optional[int] = None,
    ):
        self.symbols = [s.upper() for s in symbols]
        if not self.symbols:
            raise InvalidInputError("At least one symbol is required", field_name="symbols")
        if interval_seconds <= 0:
            raise InvalidInputError(
                "Interval must be positive", field_name="interval_seconds", value=interval_seconds
            )

        self.market_data = market_data
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.clock = clock or SystemClock()
        self.max_iterations = max_iterations

        self.iterations = 0
        self._last_prices: Dict[str, float] = {}
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the polling loop on the running event loop."""
        if self.is_running:
            raise RuntimeError("Price monitor already running")

        self._task = asyncio.create_task(self._run())
        logger.info(
            f"Price monitor started for {', '.join(self.symbols)} "
            f"every {self.interval_seconds:g}s"
        )
        return self._task

    async def stop(self) -> None:
        """
        Cancel the polling task and wait for it to finish.

        A task that already ended with an error is not re-raised
        here; wait() is where that error surfaces.
        """
        if self._task is None:
            return

        task, self._task = self._task, None
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        elif not task.cancelled() and task.exception() is not None:
            logger.debug(f"Price monitor task had failed: {task.exception()!r}")

        logger.info(f"Price monitor stopped after {self.iterations} polls")

    async def wait(self) -> None:
        """Wait for the loop to end (only returns with max_iterations)."""
        if self._task is not None:
            await self._task

    async def run_once(self) -> List[PriceTick]:
        """Poll every symbol once."""
        ticks = []

        for symbol in self.symbols:
            try:
                snapshot = await self.market_data.fetch_quote(symbol)
            except (NotFoundError, UpstreamFailureError) as e:
                logger.warning(f"Price fetch failed for {symbol}: {e.message}")
                continue

            previous = self._last_prices.get(symbol)
            change = None
            if previous:
                change = (snapshot.price - previous) / previous * 100

            self._last_prices[symbol] = snapshot.price
            ticks.append(PriceTick(
                symbol=symbol,
                price=snapshot.price,
                change_pct_since_last=change,
                observed_at=self.clock.now(),
            ))

        self.iterations += 1

        if self.callback is not None and ticks:
            result = self.callback(ticks)
            if asyncio.iscoroutine(result):
                await result

        return ticks

    async def _run(self) -> None:
        while True:
            await self.run_once()

            if self.max_iterations is not None and self.iterations >= self.max_iterations:
                logger.info(f"Price monitor reached {self.max_iterations} polls")
                return

            await self.clock.sleep(self.interval_seconds)
