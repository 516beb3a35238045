"""
Coinbase Exchange Listing Source - Public API adapter.

Answers "is this asset tradable on Coinbase?" from the currency
codes of the public exchange-rates endpoint. No authentication.
"""

import logging
from typing import Optional

import aiohttp

from data_sources.base import ExchangeListingSource
from data_sources.exceptions import NormalizationError


logger = logging.getLogger(__name__)


class CoinbaseListingSource(ExchangeListingSource):
    """
    Coinbase public API listing source.

    Endpoints used:
    - /v2/exchange-rates - rates keyed by currency code
    """

    BASE_URL = "https://api.coinbase.com"

    def __init__(
        self,
        base_url: str = BASE_URL,
        quote_currency: str = "USD",
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__(timeout, session)
        self._base_url = base_url.rstrip("/")
        self._quote_currency = quote_currency

    @property
    def name(self) -> str:
        return "coinbase"

    async def load_listed_symbols(self) -> frozenset[str]:
        payload = await self._make_request(
            "GET",
            f"{self._base_url}/v2/exchange-rates",
            params={"currency": self._quote_currency},
        )

        rates = (payload.get("data") or {}).get("rates")
        if not isinstance(rates, dict):
            raise NormalizationError(
                message="Exchange-rates response has no rates map",
                source_name=self.name,
                raw_data=payload,
                field_name="data.rates",
            )

        return frozenset(code.upper() for code in rates)
