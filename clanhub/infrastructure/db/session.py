"""
Read-only database access for the events calendar.

One engine per process, created lazily from DATABASE_URL. Requests get a
short-lived session through `get_db`; the calendar never commits.
"""
import psycopg
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from clanhub.config import get_settings


class Base(DeclarativeBase):
    pass


_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings().get_sqlalchemy_url(), pool_pre_ping=True)
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False)
    return _session_factory


def get_db():
    """Yield a session for one request and close it afterwards (FastAPI dependency)."""
    db: Session = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """Raise psycopg.OperationalError when the events database is unreachable."""
    with psycopg.connect(get_settings().DATABASE_URL, connect_timeout=3) as conn:
        conn.execute("SELECT 1").fetchone()
