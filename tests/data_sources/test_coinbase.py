"""
Tests for the Coinbase exchange-listing source.
"""

from unittest.mock import AsyncMock, patch

import pytest

from data_sources.exceptions import FetchError, NormalizationError
from data_sources.providers.coinbase import CoinbaseListingSource


RATES = {"data": {"currency": "USD", "rates": {"BTC": "0.00001", "eth": "0.0003", "SOL": "0.01"}}}


@pytest.fixture
def source():
    return CoinbaseListingSource()


class TestCoinbaseListingSource:
    """Membership set from exchange rates."""

    def test_name(self, source):
        assert source.name == "coinbase"

    @pytest.mark.asyncio
    async def test_load(self, source):
        with patch.object(source, "_make_request", new=AsyncMock(return_value=RATES)) as request:
            symbols = await source.load_listed_symbols()

        assert symbols == frozenset({"BTC", "ETH", "SOL"})
        args, kwargs = request.await_args
        assert args[1] == "https://api.coinbase.com/v2/exchange-rates"
        assert kwargs["params"] == {"currency": "USD"}

    @pytest.mark.asyncio
    async def test_is_listed_case_insensitive(self, source):
        with patch.object(source, "_make_request", new=AsyncMock(return_value=RATES)):
            assert await source.is_listed("eth")
            assert await source.is_listed("BTC")
            assert not await source.is_listed("DOGE")

    @pytest.mark.asyncio
    async def test_loaded_once(self, source):
        with patch.object(source, "_make_request", new=AsyncMock(return_value=RATES)) as request:
            await source.is_listed("BTC")
            await source.is_listed("ETH")
            await source.listed_symbols()

        assert request.await_count == 1

    @pytest.mark.asyncio
    async def test_refresh(self, source):
        updated = {"data": {"rates": {"BTC": "1", "DOGE": "2"}}}
        with patch.object(source, "_make_request", new=AsyncMock(side_effect=[RATES, updated])) as request:
            assert not await source.is_listed("DOGE")
            await source.refresh()
            assert await source.is_listed("DOGE")

        assert request.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_rates(self, source):
        with patch.object(source, "_make_request", new=AsyncMock(return_value={"data": {}})):
            with pytest.raises(NormalizationError):
                await source.load_listed_symbols()

    @pytest.mark.asyncio
    async def test_fetch_failure_not_cached(self, source):
        failing = AsyncMock(side_effect=[FetchError("timeout", source_name="coinbase"), RATES])
        with patch.object(source, "_make_request", new=failing):
            with pytest.raises(FetchError):
                await source.is_listed("BTC")
            assert await source.is_listed("BTC")
