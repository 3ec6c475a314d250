"""
Tests for the system agent's platform command tables.
"""
import pytest

from veer.agent import commands
from veer.agent.platforms import Platform, detect_platform
from veer.exceptions import ValidationError


class TestPlatformDetection:
    """Tests for mapping sys.platform to a command table."""

    @pytest.mark.parametrize("value,expected", [
        ("win32", Platform.WINDOWS),
        ("darwin", Platform.MAC),
        ("linux", Platform.LINUX),
        ("freebsd13", Platform.LINUX),
    ])
    def test_detect_platform(self, value, expected):
        """Unknown platforms use the Linux commands."""
        assert detect_platform(value) == expected


class TestPowerCommands:
    """Tests for /action dispatch."""

    def test_windows_shutdown(self):
        assert commands.power_command(Platform.WINDOWS, "shutdown") == "shutdown /s /t 0"

    def test_mac_sleep(self):
        assert commands.power_command(Platform.MAC, "sleep") == "pmset sleepnow"

    def test_linux_lock_uses_session_lock(self):
        """Linux lock locks the session instead of suspending."""
        assert commands.power_command(Platform.LINUX, "lock") == "loginctl lock-session"
        assert commands.power_command(Platform.LINUX, "sleep") == "systemctl suspend"

    @pytest.mark.parametrize("action", [None, "", "reboot", "format"])
    def test_invalid_action(self, action):
        with pytest.raises(ValidationError) as exc_info:
            commands.power_command(Platform.LINUX, action)
        assert exc_info.value.message == "Invalid action"


class TestLaunchCommands:
    """Tests for /launch dispatch."""

    def test_requires_type_and_target(self):
        with pytest.raises(ValidationError) as exc_info:
            commands.launch_command(Platform.LINUX, "website", "")
        assert exc_info.value.message == "type and target are required"

    def test_invalid_type(self):
        with pytest.raises(ValidationError) as exc_info:
            commands.launch_command(Platform.LINUX, "folder", "/tmp")
        assert "Invalid type" in exc_info.value.message

    def test_website_per_platform(self):
        url = "https://github.com"
        assert commands.launch_command(Platform.WINDOWS, "website", url) == 'start "" "https://github.com"'
        assert commands.launch_command(Platform.MAC, "url", url) == "open https://github.com"
        assert commands.launch_command(Platform.LINUX, "website", url) == "xdg-open https://github.com"

    def test_mac_application_by_name(self):
        assert commands.launch_command(Platform.MAC, "application", "Safari") == "open -a Safari"

    def test_mac_application_bundle_path(self):
        command = commands.launch_command(Platform.MAC, "application", "/Applications/Notes.app")
        assert command == "open /Applications/Notes.app"

    def test_linux_application_runs_target(self):
        assert commands.launch_command(Platform.LINUX, "application", "gnome-calculator") == "gnome-calculator"

    def test_website_target_is_shell_quoted(self):
        """Shell metacharacters in a URL are not interpreted."""
        command = commands.launch_command(Platform.LINUX, "website", "https://x.com; rm -rf ~")
        assert command == "xdg-open 'https://x.com; rm -rf ~'"

    def test_windows_strips_embedded_quotes(self):
        command = commands.launch_command(Platform.WINDOWS, "application", 'notepad" & calc "')
        assert command == 'start "" "notepad & calc "'


class TestKillCommands:
    """Tests for PID validation and kill dispatch."""

    @pytest.mark.parametrize("pid,expected", [(1234, 1234), ("42", 42), (" 7 ", 7)])
    def test_parse_pid(self, pid, expected):
        assert commands.parse_pid(pid) == expected

    def test_missing_pid(self):
        with pytest.raises(ValidationError) as exc_info:
            commands.parse_pid(None)
        assert exc_info.value.message == "PID is required"

    @pytest.mark.parametrize("pid", ["abc", -5, 0, "12; rm -rf /", True, 3.5])
    def test_rejects_non_positive_integers(self, pid):
        with pytest.raises(ValidationError) as exc_info:
            commands.parse_pid(pid)
        assert exc_info.value.message == "PID must be a positive integer"

    def test_kill_command(self):
        assert commands.kill_command(Platform.WINDOWS, 99) == "taskkill /PID 99 /F"
        assert commands.kill_command(Platform.LINUX, 99) == "kill -9 99"


class TestMediaCommands:
    """Tests for /media dispatch."""

    def test_invalid_action_lists_valid_ones(self):
        with pytest.raises(ValidationError) as exc_info:
            commands.media_command(Platform.LINUX, "rewind")
        assert exc_info.value.message.startswith("Invalid action. Valid actions: play, pause")

    def test_linux_playerctl(self):
        assert commands.media_command(Platform.LINUX, "playpause") == "playerctl play-pause"
        assert commands.media_command(Platform.LINUX, "next") == "playerctl next"

    def test_linux_volume_is_fraction(self):
        assert commands.media_command(Platform.LINUX, "volume", 50) == "playerctl volume 0.5"

    def test_linux_mute_toggles_master(self):
        assert commands.media_command(Platform.LINUX, "mute") == "amixer set Master toggle"

    def test_volume_is_clamped(self):
        assert commands.media_command(Platform.MAC, "volume", 150) == 'osascript -e "set volume output volume 100"'
        assert commands.media_command(Platform.LINUX, "volume", -3) == "playerctl volume 0"

    def test_volume_without_value_is_unsupported_on_linux(self):
        with pytest.raises(ValidationError) as exc_info:
            commands.media_command(Platform.LINUX, "volume")
        assert exc_info.value.message == "Unsupported action for this platform"

    def test_mac_mute(self):
        assert commands.media_command(Platform.MAC, "mute") == 'osascript -e "set volume with output muted"'

    def test_mac_next_uses_system_events(self):
        command = commands.media_command(Platform.MAC, "next")
        assert command.startswith("osascript -e 'tell application \"System Events\"")
        assert "key code 17" in command

    def test_windows_media_key(self):
        command = commands.media_command(Platform.WINDOWS, "next")
        assert command.startswith("powershell -Command")
        assert "[MediaKey]::Send(0xB0)" in command

    def test_windows_volume_level(self):
        command = commands.media_command(Platform.WINDOWS, "volume", 50)
        # round(50 * 655.35) = 32768
        assert "32768 * 65536 + 32768" in command
