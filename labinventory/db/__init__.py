"""Database package with engine and session management."""

from labinventory.db.session import async_session_maker, dispose_engine, engine, engine_options, get_session

__all__ = [
    "async_session_maker",
    "dispose_engine",
    "engine",
    "engine_options",
    "get_session",
]
