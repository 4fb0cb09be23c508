"""Shared domain helpers."""

from taskdesk_identity.domain.shared.time import (
    ensure_tz_aware,
    ensure_tz_aware_or_none,
    utc_now,
)

__all__ = [
    "ensure_tz_aware",
    "ensure_tz_aware_or_none",
    "utc_now",
]
