"""
Daily command - Refresh the daily data table once (suitable for cron).
"""
import asyncio
import json
import logging

from veer.__main__ import Command
from veer.config import get_settings
from veer.exceptions import ServiceError
from veer.functions.daily_data import DailyDataService
from veer.storage import open_store

logger = logging.getLogger(__name__)


class DailyCommand(Command):
    """Fetch today's quote, fact, date info and headlines into the table store."""

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Refresh even if data was already fetched today"
        )
        parser.add_argument(
            "--database-path",
            default=None,
            help="Path to database file (overrides VEER_DB_PATH)"
        )

    def init(self):
        super().init()
        settings = get_settings()
        self.store = open_store(self.args.database_path or settings.database_path)
        self.service = DailyDataService(
            self.store.daily_data,
            news_api_key=settings.news_api_key,
            timeout=settings.upstream_timeout_seconds,
        )

    def run(self) -> int:
        try:
            result = asyncio.run(self.service.update(force=self.args.force))
        except ServiceError as e:
            logger.error(f"Daily data update failed: {e.message}")
            return 1
        print(json.dumps(result, indent=2))
        return 0

    def cleanup(self):
        if getattr(self, "store", None) is not None:
            self.store.db.close()
        super().cleanup()
