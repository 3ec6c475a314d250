"""
CLI command - Run the click-based command-line client.
"""
import argparse
import logging

from veer.__main__ import Command

logger = logging.getLogger(__name__)


class CLICommand(Command):
    """Talk to the agent/functions services and run widget utilities."""

    @classmethod
    def add_arguments(cls, parser):
        # Everything after "cli" is handed to click
        parser.add_argument(
            "cli_args",
            nargs=argparse.REMAINDER,
            help="Arguments to pass to the CLI tool"
        )

    def run(self) -> int:
        from veer.cli import cli

        click_args = getattr(self.args, "cli_args", None) or []
        try:
            cli.main(args=click_args, prog_name="veer cli")
            return 0
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 0
