"""
Providers package - Data source implementations.
"""

from data_sources.providers.coinbase import CoinbaseListingSource
from data_sources.providers.coinmarketcap import CoinMarketCapSource


__all__ = [
    "CoinMarketCapSource",
    "CoinbaseListingSource",
]
