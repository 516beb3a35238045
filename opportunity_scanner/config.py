"""
Opportunity Scanner - Configuration.

============================================================
PURPOSE
============================================================
Runtime settings for the scan pipeline, the price monitor
and the CLI. Loaded from environment variables (a .env file
is read by the CLI) and overridden by CLI flags.

============================================================
LIQUIDITY PRE-FILTER
============================================================
Listings are screened before scoring:
- market cap  > $1M
- 24h volume  > $100k
- volume/cap  > 0.05

Disable with SCANNER_APPLY_FILTERS=false.

============================================================
"""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from data_sources.models import ListingSort, SortDirection


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ListingFilter:
    """Minimum liquidity an asset needs before it is scored."""

    enabled: bool = True
    min_market_cap: float = 1_000_000.0
    min_volume_24h: float = 100_000.0
    min_volume_ratio: float = 0.05

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "min_market_cap": self.min_market_cap,
            "min_volume_24h": self.min_volume_24h,
            "min_volume_ratio": self.min_volume_ratio,
        }


@dataclass(frozen=True)
class ScannerConfig:
    """Master configuration for the scanner application."""

    # CoinMarketCap
    cmc_api_key: Optional[str] = None
    cmc_base_url: str = "https://pro-api.coinmarketcap.com"
    convert: str = "USD"

    # Coinbase
    coinbase_base_url: str = "https://api.coinbase.com"

    # Scan
    listings_limit: int = 500
    listings_sort: ListingSort = ListingSort.MARKET_CAP
    listings_sort_dir: SortDirection = SortDirection.DESC
    top_k: int = 10
    max_concurrency: int = 5
    listing_filter: ListingFilter = field(default_factory=ListingFilter)

    # Monitor
    monitor_interval_seconds: float = 60.0

    # HTTP
    request_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_dir: Optional[str] = "logs"

    @classmethod
    def from_env(cls) -> "ScannerConfig":
        """Load configuration from environment variables."""
        return cls(
            cmc_api_key=os.getenv("CMC_API_KEY") or None,
            cmc_base_url=os.getenv("CMC_BASE_URL", "https://pro-api.coinmarketcap.com"),
            convert=os.getenv("SCANNER_CONVERT", "USD"),
            coinbase_base_url=os.getenv("COINBASE_BASE_URL", "https://api.coinbase.com"),
            listings_limit=int(os.getenv("SCANNER_LISTINGS_LIMIT", "500")),
            listings_sort=ListingSort(os.getenv("SCANNER_LISTINGS_SORT", "market_cap")),
            listings_sort_dir=SortDirection(os.getenv("SCANNER_LISTINGS_SORT_DIR", "desc")),
            top_k=int(os.getenv("SCANNER_TOP_K", "10")),
            max_concurrency=int(os.getenv("SCANNER_MAX_CONCURRENCY", "5")),
            listing_filter=ListingFilter(
                enabled=_env_bool("SCANNER_APPLY_FILTERS", "true"),
                min_market_cap=float(os.getenv("SCANNER_MIN_MARKET_CAP", "1000000")),
                min_volume_24h=float(os.getenv("SCANNER_MIN_VOLUME_24H", "100000")),
                min_volume_ratio=float(os.getenv("SCANNER_MIN_VOLUME_RATIO", "0.05")),
            ),
            monitor_interval_seconds=float(os.getenv("MONITOR_INTERVAL_SECONDS", "60")),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
            log_dir=os.getenv("LOG_DIR", "logs") or None,
        )

    def with_overrides(self, **overrides: Any) -> "ScannerConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.listings_limit < 1 or self.listings_limit > 5000:
            errors.append("listings_limit must be between 1 and 5000")
        if self.top_k < 0:
            errors.append("top_k must not be negative")
        if self.max_concurrency < 1:
            errors.append("max_concurrency must be at least 1")
        if self.monitor_interval_seconds <= 0:
            errors.append("monitor_interval_seconds must be positive")
        if self.request_timeout_seconds <= 0:
            errors.append("request_timeout_seconds must be positive")
        if self.log_format not in ("json", "text"):
            errors.append("log_format must be 'json' or 'text'")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Serialize without the API key."""
        return {
            "cmc_api_key_set": bool(self.cmc_api_key),
            "cmc_base_url": self.cmc_base_url,
            "convert": self.convert,
            "coinbase_base_url": self.coinbase_base_url,
            "listings_limit": self.listings_limit,
            "listings_sort": self.listings_sort.value,
            "listings_sort_dir": self.listings_sort_dir.value,
            "top_k": self.top_k,
            "max_concurrency": self.max_concurrency,
            "listing_filter": self.listing_filter.to_dict(),
            "monitor_interval_seconds": self.monitor_interval_seconds,
            "request_timeout_seconds": self.request_timeout_seconds,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "log_dir": self.log_dir,
        }
