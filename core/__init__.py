"""
Core Module Package.

Infrastructure shared by every scanner package.

Components:
- clock: Time and sleep abstraction
- exceptions: Error hierarchy
"""

from core.clock import ClockProtocol, MockClock, SystemClock
from core.exceptions import (
    ConfigurationError,
    InvalidInputError,
    NotFoundError,
    ScannerException,
    Severity,
    UpstreamFailureError,
)


__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "Severity",
    "ScannerException",
    "InvalidInputError",
    "NotFoundError",
    "UpstreamFailureError",
    "ConfigurationError",
]
