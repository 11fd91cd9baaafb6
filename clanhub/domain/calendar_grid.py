"""
Month grid for the events calendar.

The grid always has 42 cells (6 weeks, Monday first) so the layout never
jumps between months. Occurrences are bucketed by every day they span.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Mapping

from clanhub.domain.day_keys import to_day_key
from clanhub.domain.day_ranges import day_keys_for_range
from clanhub.domain.display_order import sort_banner_pair
from clanhub.domain.event import Occurrence
from clanhub.domain.recurrence import add_months

GRID_WEEKS = 6
GRID_CELLS = GRID_WEEKS * 7


@dataclass(frozen=True)
class CalendarDay:
    date: date
    day_key: str
    is_current_month: bool
    is_today: bool
    occurrences: list[Occurrence] = field(default_factory=list)


def group_occurrences_by_day(occurrences: Iterable[Occurrence]) -> dict[str, list[Occurrence]]:
    """Append each occurrence to every day key it spans; buckets sorted by start."""
    grouped: dict[str, list[Occurrence]] = {}
    for occ in occurrences:
        for key in day_keys_for_range(occ.starts_at, occ.ends_at):
            grouped.setdefault(key, []).append(occ)
    for bucket in grouped.values():
        bucket.sort(key=lambda occ: occ.starts_at)
    return grouped


def build_month(
    anchor_month: date,
    today_key: str,
    occurrences_by_day: Mapping[str, list[Occurrence]],
) -> list[CalendarDay]:
    """42 cells starting on the Monday on or before the 1st of anchor_month."""
    month_start = anchor_month.replace(day=1)
    grid_start = month_start - timedelta(days=month_start.weekday())

    days: list[CalendarDay] = []
    for index in range(GRID_CELLS):
        cell_date = grid_start + timedelta(days=index)
        key = to_day_key(cell_date)
        days.append(CalendarDay(
            date=cell_date,
            day_key=key,
            is_current_month=(cell_date.year, cell_date.month) == (month_start.year, month_start.month),
            is_today=key == today_key,
            occurrences=list(occurrences_by_day.get(key, [])),
        ))
    return days


def month_anchor(day: date) -> date:
    """First day of the month containing `day`."""
    return day.replace(day=1)


def shift_month(anchor: date, offset: int) -> date:
    """First day of the month `offset` months away from `anchor`."""
    return add_months(month_anchor(anchor), offset)


def day_occurrences(occurrences_by_day: Mapping[str, list[Occurrence]], day_key: str) -> list[Occurrence]:
    return list(occurrences_by_day.get(day_key, []))


def first_banner_url(day: CalendarDay) -> str | None:
    for occ in day.occurrences:
        if occ.banner_url:
            return occ.banner_url
    return None


def banner_occurrences(day: CalendarDay) -> list[Occurrence]:
    """Occurrences of the cell that carry a banner; a pair gets a stable left/right order."""
    with_banner = [occ for occ in day.occurrences if occ.banner_url]
    if len(with_banner) == 2:
        return sort_banner_pair(with_banner)
    return with_banner
