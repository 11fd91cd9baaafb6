"""
FastAPI dependencies (DB session, settings, request clock)
"""
from datetime import datetime, timezone

from clanhub.config import get_settings as _get_settings
from clanhub.infrastructure.db.session import get_db as _get_db


# Re-export for routers
get_db = _get_db
get_settings = _get_settings


def get_now() -> datetime:
    """
    The one place a request reads the wall clock. Everything below receives
    `now` explicitly (override in tests to pin time).
    """
    return datetime.now(timezone.utc)
