"""
Data Source Models - Normalized market snapshot structures.

Every provider normalizes its payload into AssetSnapshot so that the
scoring packages never depend on provider-specific fields.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from core.exceptions import InvalidInputError
from data_sources.exceptions import NormalizationError


class ListingSort(Enum):
    """Sort keys accepted by the listings endpoint."""
    MARKET_CAP = "market_cap"
    VOLUME_24H = "volume_24h"
    PERCENT_CHANGE_24H = "percent_change_24h"
    PERCENT_CHANGE_7D = "percent_change_7d"
    PRICE = "price"


class SortDirection(Enum):
    """Listing sort direction."""
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class AssetSnapshot:
    """
    Market-data snapshot for one asset - STRICT schema.

    Percent changes may be None: providers return null for
    windows they have no history for.
    """
    symbol: str
    name: str
    price: float
    market_cap: float
    volume_24h: float
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None
    percent_change_30d: Optional[float] = None
    last_updated: Optional[datetime] = None

    @property
    def volume_ratio(self) -> float:
        """24h volume divided by market cap (liquidity proxy)."""
        if not self.market_cap or self.market_cap <= 0:
            raise InvalidInputError(
                f"Market cap must be positive for {self.symbol}",
                field_name="market_cap",
                value=self.market_cap,
            )
        return self.volume_24h / self.market_cap

    @property
    def change_series(self) -> list[float]:
        """Non-null percent changes in 1h, 24h, 7d, 30d order."""
        return [
            change for change in (
                self.percent_change_1h,
                self.percent_change_24h,
                self.percent_change_7d,
                self.percent_change_30d,
            )
            if change is not None
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "market_cap": self.market_cap,
            "volume_24h": self.volume_24h,
            "percent_change_1h": self.percent_change_1h,
            "percent_change_24h": self.percent_change_24h,
            "percent_change_7d": self.percent_change_7d,
            "percent_change_30d": self.percent_change_30d,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }

    @classmethod
    def from_coinmarketcap(
        cls,
        raw: dict[str, Any],
        convert: str = "USD",
        source_name: str = "coinmarketcap",
    ) -> "AssetSnapshot":
        """
        Build a snapshot from a CoinMarketCap coin object.

        Raises:
            NormalizationError: If required fields are missing or not numeric
        """
        try:
            quote = raw["quote"][convert]
        except (KeyError, TypeError) as e:
            raise NormalizationError(
                message=f"Missing quote.{convert} block",
                source_name=source_name,
                raw_data=raw,
                field_name=f"quote.{convert}",
                original_error=e,
            ) from e
        if not isinstance(quote, dict):
            raise NormalizationError(
                message=f"quote.{convert} is not an object",
                source_name=source_name,
                raw_data=raw,
                field_name=f"quote.{convert}",
            )

        return cls(
            symbol=_require_str(raw, "symbol", source_name),
            name=_require_str(raw, "name", source_name),
            price=_to_float(quote, "price", source_name, required=True),
            market_cap=_to_float(quote, "market_cap", source_name, required=True),
            volume_24h=_to_float(quote, "volume_24h", source_name, required=True),
            percent_change_1h=_to_float(quote, "percent_change_1h", source_name),
            percent_change_24h=_to_float(quote, "percent_change_24h", source_name),
            percent_change_7d=_to_float(quote, "percent_change_7d", source_name),
            percent_change_30d=_to_float(quote, "percent_change_30d", source_name),
            last_updated=_parse_timestamp(quote.get("last_updated") or raw.get("last_updated")),
        )


def _require_str(raw: dict[str, Any], key: str, source_name: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise NormalizationError(
            message=f"Missing or empty '{key}'",
            source_name=source_name,
            raw_data=raw,
            field_name=key,
        )
    return value


def _to_float(
    data: dict[str, Any],
    key: str,
    source_name: str,
    required: bool = False,
) -> Optional[float]:
    value = data.get(key)
    if value is None:
        if required:
            raise NormalizationError(
                message=f"Missing required field '{key}'",
                source_name=source_name,
                raw_data=data,
                field_name=key,
            )
        return None
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise NormalizationError(
            message=f"Field '{key}' is not numeric: {value!r}",
            source_name=source_name,
            raw_data=data,
            field_name=key,
            original_error=e,
        ) from e
    if not math.isfinite(result):
        raise NormalizationError(
            message=f"Field '{key}' is not finite: {value!r}",
            source_name=source_name,
            raw_data=data,
            field_name=key,
        )
    return result


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
