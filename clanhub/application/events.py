"""Events calendar use cases - load definitions, expand, build month/upcoming/past/day views"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from clanhub.config import Settings, get_settings
from clanhub.domain.calendar_grid import (
    CalendarDay, build_month, day_occurrences, group_occurrences_by_day, month_anchor,
)
from clanhub.domain.classification import Page, classify_occurrences, paginate
from clanhub.domain.day_keys import parse_day_key, parse_timestamp, to_day_key
from clanhub.domain.display_order import cell_time_label, sort_pinned_first
from clanhub.domain.event import EventDefinition, Occurrence, event_definition_from_db
from clanhub.domain.recurrence import expand_recurring_events, recurrence_horizon
from clanhub.infrastructure.db.models import EventModel, ProfileModel

logger = logging.getLogger(__name__)


class EventsQueryError(ValueError):
    pass


def parse_month(value: str | None, today: date) -> date:
    """'YYYY-MM' -> first day of that month. Empty means the month of `today`."""
    if not value:
        return month_anchor(today)
    parsed = parse_day_key(f"{value.strip()}-01")
    if parsed is None:
        raise EventsQueryError(f"Invalid month: {value!r} (expected YYYY-MM)")
    return parsed


def event_window_bounds(now: datetime, settings: Settings) -> tuple[datetime, datetime]:
    """Definition query window: [now - past window, now + future window]."""
    return (
        now - timedelta(days=settings.PAST_EVENTS_WINDOW_DAYS),
        now + timedelta(days=settings.FUTURE_EVENTS_WINDOW_DAYS),
    )


def load_event_definitions(
    db: Session, clan_id: str, now: datetime, settings: Settings | None = None,
) -> list[EventDefinition]:
    """Read a clan's event definitions whose start lies inside the query window."""
    settings = settings or get_settings()
    window_start, window_end = event_window_bounds(parse_timestamp(now).astimezone(timezone.utc), settings)
    rows = db.query(EventModel, ProfileModel).outerjoin(
        ProfileModel, ProfileModel.id == EventModel.created_by,
    ).filter(
        EventModel.clan_id == clan_id,
        EventModel.starts_at >= window_start,
        EventModel.starts_at <= window_end,
    ).order_by(EventModel.starts_at.asc()).limit(settings.EVENTS_FETCH_LIMIT).all()

    definitions = [event_definition_from_db(event, author) for event, author in rows]
    logger.info("Loaded %d event definition(s) for clan %s", len(definitions), clan_id)
    return definitions


@dataclass(frozen=True)
class EventsView:
    """Everything the events page renders, computed once for one (definitions, now) pair."""
    today_key: str
    occurrences: list[Occurrence]
    occurrences_by_day: dict[str, list[Occurrence]]
    upcoming: list[Occurrence]
    past: list[Occurrence]

    def calendar_month(self, anchor_month: date) -> list[CalendarDay]:
        return build_month(anchor_month, self.today_key, self.occurrences_by_day)

    def day(self, day_key: str) -> list[tuple[Occurrence, str]]:
        """Occurrences of one day with the time label each cell shows."""
        if parse_day_key(day_key) is None:
            raise EventsQueryError(f"Invalid day: {day_key!r} (expected YYYY-MM-DD)")
        return [
            (occ, cell_time_label(occ, day_key))
            for occ in day_occurrences(self.occurrences_by_day, day_key)
        ]

    def upcoming_page(self, page: int, page_size: int) -> Page:
        if page < 1:
            raise EventsQueryError("page must be >= 1")
        return paginate(self.upcoming, page, page_size)


def build_events_view(definitions, now: datetime, horizon_months: int = 6) -> EventsView:
    """Expand definitions up to now + horizon_months and derive every list the page needs."""
    now = parse_timestamp(now)
    occurrences = expand_recurring_events(definitions, recurrence_horizon(now, horizon_months))
    classified = classify_occurrences(occurrences, now)
    logger.info(
        "Expanded %d occurrence(s): %d upcoming, %d past",
        len(occurrences), len(classified.upcoming), len(classified.past),
    )
    return EventsView(
        today_key=to_day_key(now),
        occurrences=occurrences,
        occurrences_by_day=group_occurrences_by_day(occurrences),
        upcoming=sort_pinned_first(classified.upcoming),
        past=classified.past,
    )


class EventsCalendarService:
    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def execute(self, clan_id: str, now: datetime) -> EventsView:
        definitions = load_event_definitions(self.db, clan_id, now, self.settings)
        return build_events_view(definitions, now, self.settings.RECURRENCE_HORIZON_MONTHS)
