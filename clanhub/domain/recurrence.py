"""
Recurring event expansion.

Virtual occurrences are computed on demand up to a horizon and never stored.
Cursor arithmetic runs on wall-clock time in the reference timezone, so a
weekly 19:00 event stays at 19:00 across daylight-saving changes.

Cadences:
- daily: +1 day
- weekly: +7 days
- biweekly: +14 days
- monthly: same day-of-month as the series start, clamped to the last day
  of shorter months (Jan 31 -> Feb 28/29 -> Mar 31)
"""
import calendar
import logging
from datetime import date, datetime, timedelta, timezone

from clanhub.domain.day_keys import (
    end_of_day, parse_day_key, parse_timestamp, to_day_key, to_reference,
)
from clanhub.domain.event import (
    EventDefinition, Occurrence, make_occurrence, normalize_recurrence_type,
    RECURRENCE_NONE, RECURRENCE_DAILY, RECURRENCE_WEEKLY, RECURRENCE_BIWEEKLY, RECURRENCE_MONTHLY,
)

logger = logging.getLogger(__name__)

MAX_RECURRENCE_ITERATIONS = 200

_STEP_DAYS = {
    RECURRENCE_DAILY: 1,
    RECURRENCE_WEEKLY: 7,
    RECURRENCE_BIWEEKLY: 14,
}


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(d: date, n: int, anchor_day: int | None = None) -> date:
    """Move a date or datetime by n calendar months, keeping time of day.
    The day is `anchor_day` (default d.day) clamped to the target month."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = min(anchor_day or d.day, last_day_of_month(year, month))
    return d.replace(year=year, month=month, day=day)


def advance_cursor(cursor: datetime, recurrence_type: str, anchor_day: int | None = None) -> datetime:
    """Return the cursor moved forward by exactly one period. 'none' returns it unchanged."""
    step = _STEP_DAYS.get(recurrence_type)
    if step is not None:
        return cursor + timedelta(days=step)
    if recurrence_type == RECURRENCE_MONTHLY:
        return add_months(cursor, 1, anchor_day)
    return cursor


def _stop_at(recurrence_end_date) -> datetime | None:
    """End of the stop date in the reference zone, or None (ongoing / unreadable)."""
    if recurrence_end_date is None:
        return None
    if isinstance(recurrence_end_date, datetime):
        recurrence_end_date = to_reference(recurrence_end_date).date()
    elif isinstance(recurrence_end_date, str):
        recurrence_end_date = parse_day_key(recurrence_end_date.strip()[:10])
        if recurrence_end_date is None:
            return None
    return end_of_day(recurrence_end_date)


def expand_definition(definition: EventDefinition, horizon: datetime) -> list[Occurrence]:
    """The original occurrence followed by its virtual repetitions up to the horizon
    (or the stop date, whichever is earlier). At most MAX_RECURRENCE_ITERATIONS repetitions."""
    out = [make_occurrence(definition)]
    recurrence_type = normalize_recurrence_type(definition.recurrence_type)
    if recurrence_type == RECURRENCE_NONE:
        return out

    starts_at = parse_timestamp(definition.starts_at)
    duration = parse_timestamp(definition.ends_at) - starts_at
    effective_end = parse_timestamp(horizon)
    stop_at = _stop_at(definition.recurrence_end_date)
    if stop_at is not None and stop_at < effective_end:
        effective_end = stop_at

    start = to_reference(starts_at)
    anchor_day = start.day
    cursor = advance_cursor(start, recurrence_type, anchor_day)
    guard = 0
    while cursor <= effective_end and guard < MAX_RECURRENCE_ITERATIONS:
        occ_start = cursor.astimezone(timezone.utc)
        out.append(make_occurrence(
            definition,
            starts_at=occ_start,
            ends_at=occ_start + duration,
            display_key=f"{definition.id}:{to_day_key(cursor)}:{guard}",
            is_virtual=True,
        ))
        cursor = advance_cursor(cursor, recurrence_type, anchor_day)
        guard += 1

    if guard == MAX_RECURRENCE_ITERATIONS and cursor <= effective_end:
        logger.debug("Recurrence of event %s truncated after %d repetitions", definition.id, guard)
    return out


def expand_recurring_events(definitions, horizon: datetime) -> list[Occurrence]:
    """
    Expand recurring definitions into virtual occurrences up to `horizon`.
    Non-recurring definitions pass through as their single original occurrence.

    Returns all occurrences sorted ascending by start; ties keep input order.
    """
    results: list[Occurrence] = []
    for definition in definitions:
        results.extend(expand_definition(definition, horizon))
    results.sort(key=lambda occ: occ.starts_at)
    return results


def recurrence_horizon(now: datetime, months: int = 6) -> datetime:
    """`now` plus N calendar months (end-of-month clamped), in the reference zone."""
    return add_months(to_reference(parse_timestamp(now)), months)

