"""Utility functions and helpers."""

from quickinvoice.utils.datetime_utils import ensure_utc, to_display_timezone, utc_now
from quickinvoice.utils.retry import RetryConfig, get_conflict_retrying

__all__ = [
    "ensure_utc",
    "to_display_timezone",
    "utc_now",
    "RetryConfig",
    "get_conflict_retrying",
]
