"""
Tests for recognising "open X" requests.
"""
import pytest

from veer.tools.launcher import display_name, parse_open_command


class TestParseOpenCommand:
    """Tests for open/launch intent detection."""

    @pytest.mark.parametrize("message,expected", [
        ("open youtube", ("website", "https://www.youtube.com")),
        ("Open GitHub", ("website", "https://github.com")),
        ("launch calculator", ("application", "calc")),
        ("start visual studio code", ("application", "code")),
        ("go to example.org", ("website", "https://example.org")),
        ("navigate to https://docs.python.org", ("website", "https://docs.python.org")),
        ("run blender", ("application", "blender")),
    ])
    def test_intents(self, message, expected):
        assert parse_open_command(message) == expected

    def test_open_up_drops_the_up(self):
        assert parse_open_command("open up github") == ("website", "https://github.com")

    def test_partial_alias_match(self):
        assert parse_open_command("open my gmail inbox") == ("website", "https://mail.google.com")

    @pytest.mark.parametrize("message", ["what's the weather", "", None, "opening hours"])
    def test_not_an_open_command(self, message):
        assert parse_open_command(message) == (None, None)


class TestDisplayName:
    def test_website_uses_host(self):
        assert display_name("https://www.youtube.com", "website") == "youtube.com"

    def test_known_application(self):
        assert display_name("calc", "application") == "Calculator"

    def test_unknown_application(self):
        assert display_name("blender", "application") == "blender"
