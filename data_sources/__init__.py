"""
Data Sources Package - Market-data collaborators for the scanner.

Provides replaceable data sources behind two small interfaces.

Features:
- Normalized AssetSnapshot output across providers
- Errors mapped onto the scanner's NotFound / UpstreamFailure kinds
- Exchange membership set loaded once per source

Quick Start:
    from data_sources import CoinMarketCapSource, CoinbaseListingSource

    async def main():
        async with CoinMarketCapSource(api_key="...") as cmc:
            btc = await cmc.fetch_quote("BTC")
            dominance = await cmc.fetch_dominance()

        async with CoinbaseListingSource() as coinbase:
            listed = await coinbase.is_listed("ETH")

Adding New Providers:
    1. Extend MarketDataSource or ExchangeListingSource
    2. Implement the abstract fetch methods and `name`
    3. Pass the instance to OpportunityScanner
"""

from data_sources.base import BaseHttpSource, ExchangeListingSource, MarketDataSource
from data_sources.exceptions import (
    DataSourceError,
    FetchError,
    NormalizationError,
    RateLimitError,
    SymbolNotFoundError,
)
from data_sources.models import AssetSnapshot, ListingSort, SortDirection
from data_sources.providers import CoinbaseListingSource, CoinMarketCapSource


__version__ = "1.0.0"

__all__ = [
    # Base
    "BaseHttpSource",
    "MarketDataSource",
    "ExchangeListingSource",

    # Models
    "AssetSnapshot",
    "ListingSort",
    "SortDirection",

    # Exceptions
    "DataSourceError",
    "FetchError",
    "NormalizationError",
    "RateLimitError",
    "SymbolNotFoundError",

    # Providers
    "CoinMarketCapSource",
    "CoinbaseListingSource",
]
