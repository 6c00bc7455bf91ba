"""
Standalone database access for the maintenance scripts (no Flask app needed).
"""
from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from app.neic.db import build_engine, make_sessionmaker, managed_session

DEFAULT_DATABASE_URL = "sqlite:///neic.db"


def resolve_database_url(explicit: str | None = None) -> str:
    return (explicit or os.environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL).strip()


@contextmanager
def script_session(db_url: str | None = None) -> Generator[Session, None, None]:
    engine = build_engine(resolve_database_url(db_url))
    try:
        with managed_session(make_sessionmaker(engine)) as s:
            yield s
    finally:
        engine.dispose()
