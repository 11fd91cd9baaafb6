"""
Human-readable event durations.

Usage:
    from clanhub.utils.durations import format_duration

    format_duration(start, start + timedelta(minutes=90))  -> "1h 30min"
    format_duration(start, start)                          -> "Open-ended"
"""
from clanhub.domain.day_keys import parse_timestamp


def _format_minutes(total_min: int) -> str:
    hours, minutes = divmod(total_min, 60)
    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}min"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}min"


def format_duration(starts_at, ends_at) -> str:
    """Duration between two timestamps; zero or negative spans are open-ended."""
    start = parse_timestamp(starts_at)
    end = parse_timestamp(ends_at)
    if start is None or end is None:
        return "Open-ended"
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return "Open-ended"
    return _format_minutes(round(seconds / 60))
