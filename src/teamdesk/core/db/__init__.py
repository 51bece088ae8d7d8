"""Database utilities - engine and session."""

from src.teamdesk.core.db.engine import dispose_engine, get_engine, set_engine
from src.teamdesk.core.db.session import get_session

__all__ = [
    "dispose_engine",
    "get_engine",
    "get_session",
    "set_engine",
]
