"""
Data Source Exceptions - Provider errors mapped onto the scanner's kinds.

UpstreamFailureError
└── DataSourceError
    ├── FetchError           HTTP status >= 400, connection error, timeout
    │   └── RateLimitError   HTTP 429
    └── NormalizationError   payload missing or malformed fields

NotFoundError
└── SymbolNotFoundError      symbol absent from a quote response
"""

from typing import Any, Optional

from core.exceptions import NotFoundError, UpstreamFailureError


class DataSourceError(UpstreamFailureError):
    """A provider call failed; source_name says which provider."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if source_name:
            context["source"] = source_name
        super().__init__(message, context=context, cause=original_error)
        self.source_name = source_name
        self.original_error = original_error


class FetchError(DataSourceError):
    """The HTTP exchange itself failed."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        request_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if status_code is not None:
            context["status"] = status_code
        if request_url:
            context["url"] = request_url
        super().__init__(message, source_name, original_error, context)
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["response_body"] = self.response_body
        return data

    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    def is_server_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


class RateLimitError(FetchError):
    """HTTP 429. retry_after_seconds comes from the Retry-After header."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        retry_after_seconds: Optional[int] = None,
        request_url: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if retry_after_seconds is not None:
            context["retry_after"] = retry_after_seconds
        super().__init__(
            message,
            source_name,
            status_code=429,
            request_url=request_url,
            context=context,
        )
        self.retry_after_seconds = retry_after_seconds


class NormalizationError(DataSourceError):
    """A provider payload could not be turned into a snapshot."""

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        raw_data: Optional[Any] = None,
        field_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if field_name:
            context["field"] = field_name
        super().__init__(message, source_name, original_error, context)
        self.raw_data = raw_data
        self.field_name = field_name

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        # Payloads can be large
        data["raw_data"] = str(self.raw_data)[:500] if self.raw_data is not None else None
        return data


class SymbolNotFoundError(NotFoundError):
    """The quote response has no entry for the symbol."""

    def __init__(self, symbol: str, source_name: Optional[str] = None) -> None:
        super().__init__(f"Token not found: {symbol}", symbol=symbol)
        self.source_name = source_name
