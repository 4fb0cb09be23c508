"""Time utilities for the domain layer."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def ensure_tz_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC if naive)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def ensure_tz_aware_or_none(dt: datetime | None) -> datetime | None:
    """Like ``ensure_tz_aware`` but passes ``None`` through."""
    if dt is None:
        return None
    return ensure_tz_aware(dt)
