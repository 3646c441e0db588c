"""Session persistence."""

from carbcycle.db.connection import DatabaseConnection, get_db, set_db
from carbcycle.db.store import SessionStore

__all__ = ["DatabaseConnection", "SessionStore", "get_db", "set_db"]
