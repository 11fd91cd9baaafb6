"""
Events calendar API endpoints (read-only)
"""
import logging
from datetime import date as date_type, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from clanhub.api.deps import get_db, get_now, get_settings
from clanhub.application.events import EventsCalendarService, EventsQueryError, parse_month
from clanhub.config import Settings
from clanhub.domain.calendar_grid import banner_occurrences, first_banner_url, shift_month
from clanhub.domain.day_keys import parse_day_key, to_reference
from clanhub.domain.event import Occurrence
from clanhub.utils.durations import format_duration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/clans/{clan_id}/events", tags=["events"])


# === Response models ===

class OccurrenceResponse(BaseModel):
    id: str
    display_key: str
    is_virtual: bool
    title: str
    description: str
    location: str | None
    starts_at: datetime
    ends_at: datetime
    duration: str
    organizer: str | None
    author_name: str | None
    recurrence_type: str
    recurrence_end_date: date_type | None
    banner_url: str | None
    is_pinned: bool
    forum_post_id: str | None


class CalendarDayResponse(BaseModel):
    date: date_type
    day_key: str
    is_current_month: bool
    is_today: bool
    banner_url: str | None
    banners: list[str]  # left/right order when two banners share the cell
    occurrences: list[OccurrenceResponse]


class CalendarMonthResponse(BaseModel):
    month: str  # YYYY-MM
    previous_month: str
    next_month: str
    today_key: str
    days: list[CalendarDayResponse]


class UpcomingPageResponse(BaseModel):
    page: int
    total_pages: int
    total_items: int
    items: list[OccurrenceResponse]


class DayEntryResponse(BaseModel):
    time_label: str  # start_time | end_time | all_day
    occurrence: OccurrenceResponse


class DayResponse(BaseModel):
    day_key: str
    entries: list[DayEntryResponse]


# === Helper functions ===

def _occurrence_response(occ: Occurrence) -> OccurrenceResponse:
    return OccurrenceResponse(
        id=occ.id,
        display_key=occ.display_key,
        is_virtual=occ.is_virtual,
        title=occ.title,
        description=occ.description,
        location=occ.location,
        starts_at=occ.starts_at,
        ends_at=occ.ends_at,
        duration=format_duration(occ.starts_at, occ.ends_at),
        organizer=occ.organizer,
        author_name=occ.author_name,
        recurrence_type=occ.recurrence_type,
        recurrence_end_date=occ.recurrence_end_date,
        banner_url=occ.banner_url,
        is_pinned=occ.is_pinned,
        forum_post_id=occ.forum_post_id,
    )


def _month_key(anchor: date_type) -> str:
    return f"{anchor.year:04d}-{anchor.month:02d}"


def _bad_request(exc: EventsQueryError) -> HTTPException:
    logger.info("Rejected events query: %s", exc)
    return HTTPException(status_code=400, detail=str(exc))


# === Endpoints ===

@router.get("/calendar", response_model=CalendarMonthResponse)
def get_calendar_month(
    clan_id: str,
    month: str | None = None,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
):
    """Month grid (42 cells, Monday first) with occurrences bucketed per day"""
    try:
        anchor = parse_month(month, to_reference(now).date())
    except EventsQueryError as e:
        raise _bad_request(e)

    view = EventsCalendarService(db, settings).execute(clan_id, now)
    days = view.calendar_month(anchor)
    return CalendarMonthResponse(
        month=_month_key(anchor),
        previous_month=_month_key(shift_month(anchor, -1)),
        next_month=_month_key(shift_month(anchor, 1)),
        today_key=view.today_key,
        days=[
            CalendarDayResponse(
                date=day.date,
                day_key=day.day_key,
                is_current_month=day.is_current_month,
                is_today=day.is_today,
                banner_url=first_banner_url(day),
                banners=[occ.banner_url for occ in banner_occurrences(day)],
                occurrences=[_occurrence_response(o) for o in day.occurrences],
            )
            for day in days
        ],
    )


@router.get("/upcoming", response_model=UpcomingPageResponse)
def get_upcoming(
    clan_id: str,
    page: int = Query(1),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
):
    """Upcoming events: nearest occurrence per event, pinned first"""
    view = EventsCalendarService(db, settings).execute(clan_id, now)
    try:
        result = view.upcoming_page(page, settings.UPCOMING_PAGE_SIZE)
    except EventsQueryError as e:
        raise _bad_request(e)
    return UpcomingPageResponse(
        page=result.page,
        total_pages=result.total_pages,
        total_items=result.total_items,
        items=[_occurrence_response(o) for o in result.items],
    )


@router.get("/past", response_model=list[OccurrenceResponse])
def get_past(
    clan_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
):
    """Past events, most recently ended first (stored events only)"""
    view = EventsCalendarService(db, settings).execute(clan_id, now)
    return [_occurrence_response(o) for o in view.past]


@router.get("/day/{day_key}", response_model=DayResponse)
def get_day(
    clan_id: str,
    day_key: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
):
    """Occurrences overlapping one calendar day"""
    if parse_day_key(day_key) is None:
        raise _bad_request(EventsQueryError(f"Invalid day: {day_key!r} (expected YYYY-MM-DD)"))

    view = EventsCalendarService(db, settings).execute(clan_id, now)
    entries = view.day(day_key)
    return DayResponse(
        day_key=day_key,
        entries=[
            DayEntryResponse(time_label=label, occurrence=_occurrence_response(occ))
            for occ, label in entries
        ],
    )
