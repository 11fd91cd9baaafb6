"""Calendar-day keys covered by a start/end span."""
import logging
from datetime import timedelta

from clanhub.domain.day_keys import parse_timestamp, to_day_key, to_reference

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 120


def day_keys_for_range(start, end) -> list[str]:
    """
    Ordered day keys from the start day to the end day, inclusive.

    Accepts datetimes or ISO strings. Unparsable input gives [].
    Spans longer than MAX_RANGE_DAYS are cut at MAX_RANGE_DAYS keys.
    """
    start_ts = parse_timestamp(start)
    end_ts = parse_timestamp(end)
    if start_ts is None or end_ts is None:
        return []

    cursor = to_reference(start_ts).date()
    limit = to_reference(end_ts).date()
    keys: list[str] = []
    while cursor <= limit and len(keys) < MAX_RANGE_DAYS:
        keys.append(to_day_key(cursor))
        cursor += timedelta(days=1)
    if cursor <= limit:
        logger.debug("Day range %s..%s truncated to %d days", keys[0], to_day_key(limit), MAX_RANGE_DAYS)
    return keys


def is_multi_day(start, end) -> bool:
    """True when start and end fall on different days in the reference zone."""
    start_ts = parse_timestamp(start)
    end_ts = parse_timestamp(end)
    if start_ts is None or end_ts is None:
        return False
    return to_day_key(start_ts) != to_day_key(end_ts)
