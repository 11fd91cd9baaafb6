"""
SQLAlchemy ORM models (read side of the events calendar)

Rows are created and edited by the clan CRUD service; this package only reads them.
"""
from datetime import date as date_type, datetime
from sqlalchemy import String, Text, TIMESTAMP, Date, Boolean, ForeignKey, Index, false, func
from sqlalchemy.orm import Mapped, mapped_column

from clanhub.infrastructure.db.session import Base


class ProfileModel(Base):
    """User profile (author join for events)"""
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)


class EventModel(Base):
    """Clan event definitions. Recurring instances are never stored."""
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    clan_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    starts_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    ends_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)  # == starts_at: open-ended

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), ForeignKey("profiles.id"), nullable=True)

    organizer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recurrence_type: Mapped[str | None] = mapped_column(String(16), nullable=True)  # none|daily|weekly|biweekly|monthly
    recurrence_end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)  # null = ongoing
    banner_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_pinned: Mapped[bool | None] = mapped_column(Boolean, nullable=True, server_default=false())
    forum_post_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    event_type_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    __table_args__ = (
        Index("ix_events_clan_starts_at", "clan_id", "starts_at"),
    )
