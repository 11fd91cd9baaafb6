"""
Display ordering for occurrence lists and calendar cells.

All sorts are stable and return new lists; inputs are never mutated.
"""
from clanhub.domain.day_keys import to_day_key
from clanhub.domain.day_ranges import is_multi_day

LABEL_START_TIME = "start_time"
LABEL_END_TIME = "end_time"
LABEL_ALL_DAY = "all_day"


def sort_pinned_first(items) -> list:
    """Pinned items first, then the rest; order inside each group unchanged."""
    return sorted(items, key=lambda item: not item.is_pinned)


def sort_banner_pair(items) -> list:
    """Earliest start first, then earliest end; identical spans keep input order."""
    return sorted(items, key=lambda item: (item.starts_at, item.ends_at))


def cell_time_label(occurrence, cell_day_key: str) -> str:
    """
    Which time a calendar cell shows for an occurrence.

    Single-day: always the start time.
    Multi-day: start time on the first day, end time on the last day,
    all day on the days in between.
    """
    if not is_multi_day(occurrence.starts_at, occurrence.ends_at):
        return LABEL_START_TIME
    if cell_day_key == to_day_key(occurrence.starts_at):
        return LABEL_START_TIME
    if cell_day_key == to_day_key(occurrence.ends_at):
        return LABEL_END_TIME
    return LABEL_ALL_DAY
