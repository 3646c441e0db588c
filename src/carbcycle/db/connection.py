"""The SQLite file that backs the session store."""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional

from carbcycle.db.schema import get_schema_sql

if TYPE_CHECKING:
    from carbcycle.config.settings import Settings


class DatabaseConnection:
    """A session database file with the kv table in place.

    The parent directory and the schema are created when the object is
    built, so a fresh path is usable straight away.
    """

    def __init__(self, db_path: Path, create_schema: bool = True):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        if create_schema:
            self.initialize_schema()

    @classmethod
    def from_settings(cls, settings: Settings) -> DatabaseConnection:
        return cls(settings.database.path)

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """One transaction: committed when the block exits, rolled back if it raises.

        Rows come back as sqlite3.Row so values can be read by column name.
        """
        with closing(sqlite3.connect(self.db_path)) as conn:
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn

    def initialize_schema(self) -> None:
        """Create the kv table if it is missing."""
        with self.get_connection() as conn:
            conn.executescript(get_schema_sql())


_db: Optional[DatabaseConnection] = None


def get_db() -> DatabaseConnection:
    """Session database at the configured path, opened on first use."""
    global _db
    if _db is None:
        from carbcycle.config import get_settings

        _db = DatabaseConnection.from_settings(get_settings())
    return _db


def set_db(db: Optional[DatabaseConnection]) -> None:
    """Replace the session database, e.g. with a temporary one in tests."""
    global _db
    _db = db
