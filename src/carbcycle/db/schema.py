"""SQLite schema for the session store."""

SCHEMA_SQL = """
-- Session state as JSON documents keyed by name
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def get_schema_sql() -> str:
    """Return the full schema SQL."""
    return SCHEMA_SQL
