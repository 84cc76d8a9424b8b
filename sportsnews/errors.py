"""
Error taxonomy for the aggregation engine.
"""
from __future__ import annotations

from typing import Iterable, List, Optional


class SportsNewsError(Exception):
    """Base class for engine errors."""


class FeedUnavailable(SportsNewsError):
    """A single feed could not be downloaded or parsed. Always recovered locally."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class InvalidQuery(SportsNewsError):
    """A request parameter is outside the accepted values."""

    def __init__(self, param: str, value: object, valid_values: Optional[Iterable[str]] = None, message: Optional[str] = None) -> None:
        self.param = param
        self.value = value
        self.valid_values: List[str] = list(valid_values or [])
        if message is None:
            message = f"Invalid {param}"
            if self.valid_values:
                message = f"{message}. Must be one of: {', '.join(self.valid_values)}"
        super().__init__(message)


class InternalAggregationFailure(SportsNewsError):
    """Unexpected fault inside merge/cache logic."""
