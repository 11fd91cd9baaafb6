"""
Upcoming / past split of expanded occurrences, plus upcoming-list pagination.

Rules:
- upcoming: ends_at >= now, at most one entry per source event (the first
  one scanned, i.e. the nearest when input is sorted by start)
- past: ends_at < now and not virtual; past repetitions of a recurring
  event are dropped, only the stored definition can show up
- past is returned most recently ended first (ties: later start first)
"""
import math
from dataclasses import dataclass
from datetime import datetime

from clanhub.domain.day_keys import parse_timestamp
from clanhub.domain.event import Occurrence


@dataclass(frozen=True)
class ClassifiedOccurrences:
    upcoming: list[Occurrence]
    past: list[Occurrence]


@dataclass(frozen=True)
class Page:
    items: list
    page: int
    total_pages: int
    total_items: int


def classify_occurrences(occurrences, now: datetime) -> ClassifiedOccurrences:
    now = parse_timestamp(now)
    seen_ids: set[str] = set()
    upcoming: list[Occurrence] = []
    past: list[Occurrence] = []
    for occ in occurrences:
        if occ.ends_at >= now:
            if occ.id not in seen_ids:
                seen_ids.add(occ.id)
                upcoming.append(occ)
        elif not occ.is_virtual:
            past.append(occ)
    past.reverse()
    past.sort(key=lambda occ: occ.ends_at, reverse=True)
    return ClassifiedOccurrences(upcoming=upcoming, past=past)


def paginate(items, page: int, page_size: int) -> Page:
    """Slice one page; out-of-range page numbers are clamped to [1, total_pages]."""
    items = list(items)
    total_pages = max(1, math.ceil(len(items) / page_size))
    safe_page = min(max(page, 1), total_pages)
    start = (safe_page - 1) * page_size
    return Page(
        items=items[start:start + page_size],
        page=safe_page,
        total_pages=total_pages,
        total_items=len(items),
    )
