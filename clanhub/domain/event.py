"""
Event definitions (stored, read-only here) and occurrences (computed, never stored).
"""
from dataclasses import dataclass
from datetime import date, datetime

from clanhub.domain.day_keys import parse_timestamp


RECURRENCE_NONE = "none"
RECURRENCE_DAILY = "daily"
RECURRENCE_WEEKLY = "weekly"
RECURRENCE_BIWEEKLY = "biweekly"
RECURRENCE_MONTHLY = "monthly"
RECURRENCE_TYPES = frozenset({
    RECURRENCE_NONE, RECURRENCE_DAILY, RECURRENCE_WEEKLY, RECURRENCE_BIWEEKLY, RECURRENCE_MONTHLY,
})


@dataclass(frozen=True)
class EventDefinition:
    id: str
    title: str
    starts_at: datetime
    ends_at: datetime  # == starts_at: open-ended / zero duration
    description: str = ""
    location: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    organizer: str | None = None
    recurrence_type: str = RECURRENCE_NONE
    recurrence_end_date: date | None = None  # None + recurring: ongoing
    banner_url: str | None = None
    is_pinned: bool = False
    forum_post_id: str | None = None
    author_name: str | None = None


@dataclass(frozen=True)
class Occurrence:
    """One concrete instance of an event: the definition itself or a computed repetition."""
    id: str  # source definition id
    display_key: str
    is_virtual: bool
    title: str
    starts_at: datetime
    ends_at: datetime
    description: str = ""
    location: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    organizer: str | None = None
    recurrence_type: str = RECURRENCE_NONE
    recurrence_end_date: date | None = None
    banner_url: str | None = None
    is_pinned: bool = False
    forum_post_id: str | None = None
    author_name: str | None = None


def make_occurrence(
    definition: EventDefinition,
    starts_at: datetime | None = None,
    ends_at: datetime | None = None,
    display_key: str | None = None,
    is_virtual: bool = False,
) -> Occurrence:
    """Copy the display fields of `definition` into a new Occurrence.
    Without overrides this is the original (non-virtual) occurrence."""
    return Occurrence(
        id=definition.id,
        display_key=display_key if display_key is not None else definition.id,
        is_virtual=is_virtual,
        title=definition.title,
        starts_at=parse_timestamp(starts_at if starts_at is not None else definition.starts_at),
        ends_at=parse_timestamp(ends_at if ends_at is not None else definition.ends_at),
        description=definition.description,
        location=definition.location,
        created_at=definition.created_at,
        updated_at=definition.updated_at,
        organizer=definition.organizer,
        recurrence_type=definition.recurrence_type,
        recurrence_end_date=definition.recurrence_end_date,
        banner_url=definition.banner_url,
        is_pinned=definition.is_pinned,
        forum_post_id=definition.forum_post_id,
        author_name=definition.author_name,
    )


# --- Helpers for converting DB rows to EventDefinition ---

def normalize_recurrence_type(value: str | None) -> str:
    """Null or unknown stored values mean 'none'."""
    if not value:
        return RECURRENCE_NONE
    value = value.strip().lower()
    return value if value in RECURRENCE_TYPES else RECURRENCE_NONE


def extract_author_name(profile) -> str | None:
    """display_name, falling back to username (any object with those attributes)."""
    if profile is None:
        return None
    return profile.display_name or profile.username or None


def event_definition_from_db(row, author=None) -> EventDefinition:
    """Build EventDefinition from an EventModel DB row (any object with matching attributes)
    and the optional ProfileModel row of its author."""
    return EventDefinition(
        id=str(row.id),
        title=row.title,
        description=row.description or "",
        location=row.location,
        starts_at=parse_timestamp(row.starts_at),
        ends_at=parse_timestamp(row.ends_at),
        created_at=parse_timestamp(row.created_at),
        updated_at=parse_timestamp(row.updated_at),
        organizer=row.organizer,
        recurrence_type=normalize_recurrence_type(row.recurrence_type),
        recurrence_end_date=row.recurrence_end_date,
        banner_url=row.banner_url,
        is_pinned=bool(row.is_pinned),
        forum_post_id=row.forum_post_id,
        author_name=extract_author_name(author),
    )
