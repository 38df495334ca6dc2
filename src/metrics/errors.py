"""Errors raised by metric queries."""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for metric recorder errors."""


class NotFoundError(MetricsError, LookupError):
    """Raised when a query names a series with no recorded observations."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No metric recorded under {name!r}")


class InvalidArgumentError(MetricsError, ValueError):
    """Raised when a query or record call receives an unusable argument."""
