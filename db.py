import sqlite3
from contextlib import contextmanager

from constants import DEFAULT_DB_PATH
from errors import StorageError


class BlobDatabase:
    """Durable key/value blob store standing in for the browser's local storage.

    Every sqlite failure surfaces as StorageError.
    """

    def __init__(self, db_path=DEFAULT_DB_PATH):
        self.db_path = db_path
        self.create_tables()

    @contextmanager
    def get_connection(self):
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn
        except sqlite3.Error as ex:
            raise StorageError(f"Blob database '{self.db_path}' failed: {ex}") from ex

    def create_tables(self):
        with self.get_connection() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS blobs (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                )
            ''')

    def get(self, key):
        """Return the stored string for ``key`` or ``None`` when absent."""
        with self.get_connection() as conn:
            row = conn.execute("SELECT value FROM blobs WHERE key = ?", (key,)).fetchone()
            return row['value'] if row else None

    def set(self, key, value):
        with self.get_connection() as conn:
            conn.execute('''
                INSERT INTO blobs (key, value, updated_at)
                VALUES (?, ?, strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            ''', (key, value))

    def delete(self, key):
        with self.get_connection() as conn:
            conn.execute("DELETE FROM blobs WHERE key = ?", (key,))

    def keys(self):
        with self.get_connection() as conn:
            return [row['key'] for row in conn.execute("SELECT key FROM blobs ORDER BY key")]
