"""
Pytest configuration and shared fixtures.
"""
import pytest

from veer.adapters.shell import CommandResult
from veer.config import Settings
from veer.storage import open_store


def make_settings(**overrides) -> Settings:
    """
    Settings isolated from the developer's environment and .env file.

    Every API key defaults to unset so tests opt in to providers explicitly.
    """
    values = {
        "database_path": ":memory:",
        "system_agent_token": "",
        "openai_api_key": None,
        "lovable_api_key": None,
        "weather_api_key": None,
        "enws_api_key": None,
        "news_api_key": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeRunner:
    """ShellRunner stand-in that records commands and replays canned results."""

    def __init__(self, results=None, default_returncode=0, default_stdout=""):
        self.commands = []
        self.results = results or {}
        self.default_returncode = default_returncode
        self.default_stdout = default_stdout

    async def run(self, command: str) -> CommandResult:
        self.commands.append(command)
        if command in self.results:
            returncode, stdout, stderr = self.results[command]
            return CommandResult(command, returncode, stdout, stderr)
        return CommandResult(command, self.default_returncode, self.default_stdout, "")


@pytest.fixture
def settings():
    """Settings with an in-memory database and no token."""
    return make_settings()


@pytest.fixture
def store():
    """Fresh in-memory table store with the schema created."""
    table_store = open_store(":memory:")
    yield table_store
    table_store.db.close()


@pytest.fixture
def local_store_path(tmp_path):
    return str(tmp_path / "local_storage.json")


@pytest.fixture
def settings_factory():
    """Build isolated Settings with overrides, e.g. ``settings_factory(system_agent_token="x")``."""
    return make_settings


@pytest.fixture
def runner_factory():
    """Build FakeRunner instances with canned results."""
    return FakeRunner
