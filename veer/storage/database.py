"""
SQLite connection management for the table store.
"""
import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Tuple

from veer.config import ensure_database_directory, get_settings
from veer.exceptions import DatabaseError, ValidationError

logger = logging.getLogger(__name__)


class Database:
    """Owns one SQLite connection shared by all repositories.

    A lock serialises access so the connection can be used from FastAPI's
    worker threads. ``:memory:`` works the same as a file path, which is
    what the tests use.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_settings().database_path
        ensure_database_directory(self.db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.RLock()
        logger.debug(f"Opened database {self.db_path}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor; commit on success, roll back on error."""
        with self._lock:
            cursor = self._conn.cursor()
            try:
                yield cursor
                self._conn.commit()
            except sqlite3.IntegrityError as e:
                self._conn.rollback()
                raise ValidationError(f"Constraint violation: {e}") from e
            except sqlite3.Error as e:
                self._conn.rollback()
                raise DatabaseError(f"Database operation failed: {e}", original_error=e) from e
            except Exception:
                self._conn.rollback()
                raise
            finally:
                cursor.close()

    def execute(self, cursor: sqlite3.Cursor, query: str, params: Optional[Tuple[Any, ...]] = None):
        """Execute a query with debug logging."""
        logger.debug("SQL", extra={"query": " ".join(query.split()), "params": params})
        if params:
            return cursor.execute(query, params)
        return cursor.execute(query)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
