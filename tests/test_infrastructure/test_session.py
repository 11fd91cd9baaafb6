"""
Tests for request-scoped database sessions
"""
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from clanhub.infrastructure.db import session as db_session_module


def test_get_db_yields_session_and_closes_it(db_engine, monkeypatch):
    closed = []
    factory = sessionmaker(bind=db_engine)
    monkeypatch.setattr(db_session_module, "_session_factory", factory)

    gen = db_session_module.get_db()
    db = next(gen)
    assert db.execute(text("SELECT 1")).scalar() == 1
    monkeypatch.setattr(db, "close", lambda: closed.append(True))
    gen.close()
    assert closed == [True]


def test_session_factory_is_reused(db_engine, monkeypatch):
    monkeypatch.setattr(db_session_module, "_engine", db_engine)
    monkeypatch.setattr(db_session_module, "_session_factory", None)
    first = db_session_module.get_session_factory()
    assert db_session_module.get_session_factory() is first
    assert first.kw["bind"] is db_engine
