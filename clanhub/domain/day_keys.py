"""
Day keys: canonical YYYY-MM-DD strings in the reference timezone.

Timestamps are stored as timestamptz (UTC). Every "which day is it?" question
is answered in Europe/Berlin so that bucketing does not depend on the server
or viewer zone. Naive datetimes are treated as UTC.
"""
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

REFERENCE_TZ = ZoneInfo("Europe/Berlin")


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO timestamp (or pass a datetime through). Returns None if unparsable."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def to_reference(ts: datetime) -> datetime:
    """Same instant expressed in the reference timezone."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(REFERENCE_TZ)


def to_day_key(value: datetime | date) -> str:
    """
    Canonical day key.

    datetime -> calendar day of that instant in REFERENCE_TZ.
    date     -> formatted as is.
    """
    if isinstance(value, datetime):
        value = to_reference(value).date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_day_key(key: str) -> date | None:
    """
    Parse YYYY-MM-DD. Returns None for missing/zero components and for
    impossible dates (2026-02-30 is rejected, not rolled into March).
    Only canonical keys are accepted, so to_day_key(parse_day_key(k)) == k.
    """
    if not isinstance(key, str):
        return None
    parts = key.split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
    except ValueError:
        return None
    if not year or not month or not day:
        return None
    try:
        parsed = date(year, month, day)
    except ValueError:
        return None
    if to_day_key(parsed) != key:
        return None
    return parsed


def start_of_day(day: date) -> datetime:
    """00:00:00 of `day` in REFERENCE_TZ."""
    return datetime.combine(day, time(0, 0, 0), tzinfo=REFERENCE_TZ)


def end_of_day(day: date) -> datetime:
    """23:59:59 of `day` in REFERENCE_TZ."""
    return datetime.combine(day, time(23, 59, 59), tzinfo=REFERENCE_TZ)
