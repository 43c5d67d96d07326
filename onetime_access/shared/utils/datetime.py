"""UTC helpers. Every timestamp the service stores or compares is aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime; the default service clock."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalise a stored timestamp to aware UTC.

    Naive values are taken to be UTC already (SQL drivers may return them
    that way); aware values are converted. None passes through.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def isoformat_utc(dt: datetime | None) -> str | None:
    """Wire format for timestamps: ``2025-01-15T12:00:00.000Z``.

    Millisecond precision, the same shape JavaScript's
    ``Date.prototype.toISOString()`` produces.
    """
    utc = ensure_utc(dt)
    if utc is None:
        return None
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"
