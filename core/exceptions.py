"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines the error kinds shared by every scanner package.

- Separates bad input from missing data and upstream failures
- Lets the ranking pipeline decide what is recoverable per asset
- Carries context for structured logging

============================================================
EXCEPTION HIERARCHY
============================================================
ScannerException (base)
├── InvalidInputError      non-positive market cap, malformed series
├── NotFoundError          symbol absent from a provider response
├── UpstreamFailureError   quote / listing / dominance fetch failed
└── ConfigurationError     missing API key, invalid settings

Provider-specific errors in data_sources.exceptions subclass
NotFoundError and UpstreamFailureError.

============================================================
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels for logging."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ============================================================
# BASE EXCEPTION
# ============================================================

class ScannerException(Exception):
    """
    Base exception for all scanner errors.

    All exceptions carry:
    - severity: for log level selection
    - context: for debugging
    - cause: the wrapped lower-level error, if any
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(
                f"{k}={v}" for k, v in self.context.items()
                if k not in ("cause_type", "cause_message")
            )
            if ctx:
                return f"{self.message} ({ctx})"
        return self.message


# ============================================================
# ERROR KINDS
# ============================================================

class InvalidInputError(ScannerException):
    """
    Input cannot be scored.

    Raised for non-positive market cap, non-finite numeric fields
    and malformed change series, before any logarithm or division.
    """

    default_severity = Severity.LOW

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ):
        context = kwargs.pop("context", None) or {}
        if field_name:
            context["field"] = field_name
            context["value"] = value
        super().__init__(message, context=context, **kwargs)
        self.field_name = field_name
        self.value = value


class NotFoundError(ScannerException):
    """Requested symbol is absent from the provider response."""

    default_severity = Severity.LOW

    def __init__(self, message: str, symbol: Optional[str] = None, **kwargs: Any):
        context = kwargs.pop("context", None) or {}
        if symbol:
            context["symbol"] = symbol
        super().__init__(message, context=context, **kwargs)
        self.symbol = symbol


class UpstreamFailureError(ScannerException):
    """A market-data collaborator failed to deliver."""

    default_severity = Severity.HIGH


class ConfigurationError(ScannerException):
    """Invalid or missing configuration."""

    default_severity = Severity.CRITICAL

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs: Any):
        context = kwargs.pop("context", None) or {}
        if config_key:
            context["config_key"] = config_key
        super().__init__(message, context=context, **kwargs)
        self.config_key = config_key


__all__ = [
    "Severity",
    "ScannerException",
    "InvalidInputError",
    "NotFoundError",
    "UpstreamFailureError",
    "ConfigurationError",
]
