"""Exceptions shared by the gateway, the upstream client and the seeder."""
from __future__ import annotations

from typing import Iterable, Optional


class AggregatorError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(AggregatorError):
    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required settings: {', '.join(self.missing)}")


class UpstreamError(AggregatorError):
    """An upstream API call failed or answered with a non-2xx status."""

    def __init__(self, message: str, *, resource: str = "upstream", status_code: Optional[int] = None):
        self.resource = resource
        self.status_code = status_code
        super().__init__(message)


class UpstreamTimeoutError(UpstreamError):
    """The upstream call did not complete before its deadline."""


class UpstreamValidationError(AggregatorError):
    """An upstream payload did not match the expected shape."""

    def __init__(self, model: str, details: str):
        self.model = model
        self.details = details
        super().__init__(f"{model} validation failed: {details}")


class EmptyResultError(AggregatorError):
    """Payload was well formed but carried nothing usable."""


class DataNotAvailableError(AggregatorError):
    """One of the stored tables is empty (seed never ran or produced nothing)."""
