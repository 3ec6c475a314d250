"""
Shared uvicorn runner for the agent and functions commands.
"""
import logging
from abc import abstractmethod

import uvicorn

from veer.__main__ import Command
from veer.config import get_settings

logger = logging.getLogger(__name__)


class ServerCommand(Command):
    """Base for commands that serve a FastAPI app."""

    default_host_setting = ""
    default_port_setting = ""

    @classmethod
    def add_arguments(cls, parser):
        settings = get_settings()
        default_host = getattr(settings, cls.default_host_setting)
        default_port = getattr(settings, cls.default_port_setting)
        parser.add_argument(
            "--host",
            default=default_host,
            help=f"Host to bind to (default: {default_host})"
        )
        parser.add_argument(
            "--port",
            type=int,
            default=default_port,
            help=f"Port to bind to (default: {default_port})"
        )
        parser.add_argument(
            "--log-level",
            default=settings.log_level.lower(),
            choices=["debug", "info", "warning", "error", "critical"],
            help="Log level (default: LOG_LEVEL env var or info)"
        )

    @abstractmethod
    def create_app(self):
        """Build the FastAPI app to serve."""

    def init(self):
        super().init()
        self.app = self.create_app()
        logger.info(f"{self.get_name()} initialized on {self.args.host}:{self.args.port}")

    def run(self) -> int:
        config = uvicorn.Config(
            self.app,
            host=self.args.host,
            port=self.args.port,
            log_level=self.args.log_level,
            access_log=True,
            timeout_keep_alive=30,
            timeout_graceful_shutdown=30,
        )
        server = uvicorn.Server(config)
        try:
            logger.info(f"Starting {self.get_name()} on {self.args.host}:{self.args.port}")
            server.run()
            return 0
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt, shutting down...")
            return 130

    def cleanup(self):
        super().cleanup()
        logger.info(f"{self.get_name()} stopped")
