"""
SQLite table store for sessions, messages, notes, tasks, projects and daily data.
"""
from veer.storage.database import Database
from veer.storage.repositories import (
    BaseRepository,
    DailyDataRepository,
    MessageRepository,
    NoteRepository,
    ProjectRepository,
    SessionRepository,
    TableStore,
    TaskRepository,
)
from veer.storage.schema import SchemaManager


def open_store(db_path=None) -> TableStore:
    """Open the database, make sure the schema exists, and return the repositories."""
    db = Database(db_path)
    SchemaManager(db).initialize_schema()
    return TableStore(db)


__all__ = [
    "Database",
    "SchemaManager",
    "TableStore",
    "BaseRepository",
    "SessionRepository",
    "MessageRepository",
    "NoteRepository",
    "TaskRepository",
    "ProjectRepository",
    "DailyDataRepository",
    "open_store",
]
