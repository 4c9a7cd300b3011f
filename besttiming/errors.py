# besttiming/errors.py
"""
Error kinds surfaced by the scoring and forecast layers.

NotFound has no class here: catalog lookups return None for unknown ids.
"""
from __future__ import annotations

from typing import Optional


class InvalidArgumentError(ValueError):
    """Out-of-range month, negative weight, malformed id or date."""


class UpstreamUnavailableError(RuntimeError):
    """Forecast (or rate) provider failed: transport error, timeout, non-2xx, bad payload."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CacheCorruptError(ValueError):
    """Cached payload could not be decoded. Callers treat it as a cache miss."""


def require_month(month: int) -> int:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidArgumentError(f"Invalid month: {month!r}. Must be integer 1-12.")
    return month
