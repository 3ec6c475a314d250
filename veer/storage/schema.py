"""
Schema management for the table store.

Creates the six tables the web app reads and writes (sessions, messages,
notes, tasks, projects, daily_data) plus their indexes.
"""
import logging

from veer.storage.database import Database

logger = logging.getLogger(__name__)


class SchemaManager:
    """Manages database schema initialization and creation."""

    def __init__(self, db: Database):
        self.db = db

    def initialize_schema(self):
        """
        Create all tables and indexes (idempotent).

        Order matters: messages references sessions.
        """
        with self.db.transaction() as cursor:
            self._create_sessions_schema(cursor)
            self._create_messages_schema(cursor)
            self._create_notes_schema(cursor)
            self._create_tasks_schema(cursor)
            self._create_projects_schema(cursor)
            self._create_daily_data_schema(cursor)
            self._create_indexes(cursor)
        logger.info("Database schema initialized")

    def _create_sessions_schema(self, cursor):
        self.db.execute(cursor, """
            CREATE TABLE IF NOT EXISTS sessions (
                id TEXT PRIMARY KEY,
                mode TEXT NOT NULL DEFAULT 'helper',
                title TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _create_messages_schema(self, cursor):
        self.db.execute(cursor, """
            CREATE TABLE IF NOT EXISTS messages (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL REFERENCES sessions(id) ON DELETE CASCADE,
                role TEXT NOT NULL CHECK (role IN ('user', 'assistant', 'system')),
                content TEXT NOT NULL,
                tool_used TEXT,
                created_at TEXT NOT NULL
            )
        """)

    def _create_notes_schema(self, cursor):
        self.db.execute(cursor, """
            CREATE TABLE IF NOT EXISTS notes (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                tags TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _create_tasks_schema(self, cursor):
        self.db.execute(cursor, """
            CREATE TABLE IF NOT EXISTS tasks (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT,
                due_date TEXT,
                completed INTEGER NOT NULL DEFAULT 0,
                priority TEXT CHECK (priority IN ('low', 'medium', 'high')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _create_projects_schema(self, cursor):
        self.db.execute(cursor, """
            CREATE TABLE IF NOT EXISTS projects (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                pinned INTEGER NOT NULL DEFAULT 0,
                session_ids TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _create_daily_data_schema(self, cursor):
        self.db.execute(cursor, """
            CREATE TABLE IF NOT EXISTS daily_data (
                id TEXT PRIMARY KEY,
                data_type TEXT NOT NULL,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                source TEXT,
                source_url TEXT,
                metadata TEXT,
                fetched_at TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _create_indexes(self, cursor):
        indexes = [
            "CREATE INDEX IF NOT EXISTS idx_messages_session_id ON messages(session_id)",
            "CREATE INDEX IF NOT EXISTS idx_messages_created_at ON messages(created_at)",
            "CREATE INDEX IF NOT EXISTS idx_sessions_updated_at ON sessions(updated_at)",
            "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)",
            "CREATE INDEX IF NOT EXISTS idx_projects_pinned ON projects(pinned)",
            "CREATE INDEX IF NOT EXISTS idx_daily_data_type ON daily_data(data_type)",
            "CREATE INDEX IF NOT EXISTS idx_daily_data_fetched_at ON daily_data(fetched_at)",
        ]
        for statement in indexes:
            self.db.execute(cursor, statement)
