"""
Widget logic shared by the CLI: unit converter, colors, launcher intents,
code explanations, passwords, hashes and the local key/value store.
"""
from veer.tools.converter import convert, format_result
from veer.tools.launcher import parse_open_command
from veer.tools.local_store import BreakStats, ColorStore, LocalStore, QuickCommandStore, SnippetStore

__all__ = [
    "convert",
    "format_result",
    "parse_open_command",
    "LocalStore",
    "SnippetStore",
    "ColorStore",
    "QuickCommandStore",
    "BreakStats",
]
