"""Database package with engine, session management and schema bootstrap."""

from label_ledger.db.schema import init_db
from label_ledger.db.session import (
    async_session_maker,
    build_engine,
    build_session_maker,
    dispose_engine,
    engine,
    get_session,
)

__all__ = [
    "async_session_maker",
    "build_engine",
    "build_session_maker",
    "dispose_engine",
    "engine",
    "get_session",
    "init_db",
]
