"""
Initialize command - Create the table store schema without starting a server.
"""
import logging
import os

from veer.__main__ import Command
from veer.config import ensure_database_directory, get_settings
from veer.storage import Database, SchemaManager

logger = logging.getLogger(__name__)

EXPECTED_TABLES = ("sessions", "messages", "notes", "tasks", "projects", "daily_data")


class InitializeCommand(Command):
    """Create the database and its tables, or validate an existing one."""

    @classmethod
    def get_name(cls) -> str:
        return "init"

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument(
            "--database-path",
            type=str,
            default=None,
            help="Path to database file (overrides VEER_DB_PATH and config defaults)"
        )
        parser.add_argument(
            "--validate-only",
            action="store_true",
            help="Only validate the existing schema, don't create anything"
        )

    def init(self):
        super().init()
        path = self.args.database_path
        self.db_path = os.path.abspath(path) if path else get_settings().database_path
        logger.info(f"Database path: {self.db_path}")

    def run(self) -> int:
        if self.args.validate_only:
            if not os.path.exists(self.db_path):
                logger.error(f"Database does not exist: {self.db_path}")
                return 1
            return self._validate_schema()

        ensure_database_directory(self.db_path)
        db = Database(self.db_path)
        try:
            SchemaManager(db).initialize_schema()
        finally:
            db.close()
        logger.info("✅ Database initialization complete")
        return 0

    def _validate_schema(self) -> int:
        db = Database(self.db_path)
        try:
            with db.transaction() as cursor:
                db.execute(cursor, "SELECT name FROM sqlite_master WHERE type = 'table'")
                present = {row["name"] for row in cursor.fetchall()}
        finally:
            db.close()
        missing = [table for table in EXPECTED_TABLES if table not in present]
        if missing:
            logger.error(f"Missing tables: {', '.join(missing)}")
            return 1
        logger.info("Schema is valid")
        return 0
