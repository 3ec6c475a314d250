"""
Per-platform command tables for the system agent.

Each builder maps one request onto exactly one shell command line for the
detected platform. Builders only build strings; running them is the
ShellRunner's job.
"""
import shlex
from typing import Any, Dict, Optional

from veer.agent.platforms import Platform
from veer.exceptions import ValidationError

# ============================================================================
# Power actions
# ============================================================================

POWER_COMMANDS: Dict[Platform, Dict[str, str]] = {
    Platform.WINDOWS: {
        "shutdown": "shutdown /s /t 0",
        "restart": "shutdown /r /t 0",
        "lock": "rundll32.exe user32.dll,LockWorkStation",
        "sleep": "rundll32.exe powrprof.dll,SetSuspendState 0,1,0",
    },
    Platform.MAC: {
        "shutdown": "sudo shutdown -h now",
        "restart": "sudo shutdown -r now",
        "lock": 'osascript -e "tell application \\"System Events\\" to sleep"',
        "sleep": "pmset sleepnow",
    },
    Platform.LINUX: {
        "shutdown": "sudo shutdown -h now",
        "restart": "sudo shutdown -r now",
        "lock": "loginctl lock-session",
        "sleep": "systemctl suspend",
    },
}


def power_command(platform: Platform, action: Optional[str]) -> str:
    """Command for a power action (shutdown, restart, lock, sleep)."""
    commands = POWER_COMMANDS[platform]
    if not action or action not in commands:
        raise ValidationError("Invalid action", field="action", value=action)
    return commands[action]


# ============================================================================
# Launching apps and websites
# ============================================================================

LAUNCH_TYPES = ("application", "website", "url")


def _quote(platform: Platform, target: str) -> str:
    if platform == Platform.WINDOWS:
        # cmd.exe has no escape for embedded quotes inside a quoted argument
        return '"' + target.replace('"', "") + '"'
    return shlex.quote(target)


def launch_command(platform: Platform, launch_type: Optional[str], target: Optional[str]) -> str:
    """Command that opens a website in the default browser or starts an application."""
    if not launch_type or not target:
        raise ValidationError("type and target are required")
    if launch_type not in LAUNCH_TYPES:
        raise ValidationError(
            'Invalid type. Use "application", "website", or "url"',
            field="type",
            value=launch_type,
        )

    quoted = _quote(platform, target)
    if launch_type in ("website", "url"):
        if platform == Platform.WINDOWS:
            return f'start "" {quoted}'
        if platform == Platform.MAC:
            return f"open {quoted}"
        return f"xdg-open {quoted}"

    if platform == Platform.WINDOWS:
        # Full paths, URL schemes (ms-settings:) and bare names all go through start
        return f'start "" {quoted}'
    if platform == Platform.MAC:
        if target.endswith(".app") or "/" in target:
            return f"open {quoted}"
        return f"open -a {quoted}"
    # Linux: the target is itself the command line to run
    return target


# ============================================================================
# Processes
# ============================================================================

def parse_pid(pid: Any) -> int:
    """Validate a process id from a request body."""
    if pid is None or pid == "" or pid is False:
        raise ValidationError("PID is required", field="pid")
    if isinstance(pid, bool):
        raise ValidationError("PID must be a positive integer", field="pid", value=pid)
    try:
        value = int(str(pid).strip())
    except ValueError:
        raise ValidationError("PID must be a positive integer", field="pid", value=pid)
    if value <= 0:
        raise ValidationError("PID must be a positive integer", field="pid", value=pid)
    return value


def kill_command(platform: Platform, pid: int) -> str:
    if platform == Platform.WINDOWS:
        return f"taskkill /PID {pid} /F"
    return f"kill -9 {pid}"


# ============================================================================
# Media control
# ============================================================================

MEDIA_ACTIONS = ("play", "pause", "playpause", "next", "previous", "stop", "volume", "mute", "unmute")

# Virtual-key codes sent through user32 keybd_event
WINDOWS_MEDIA_KEYS = {
    "play": "0xB3",       # VK_MEDIA_PLAY_PAUSE
    "pause": "0xB3",
    "playpause": "0xB3",
    "next": "0xB0",       # VK_MEDIA_NEXT_TRACK
    "previous": "0xB1",   # VK_MEDIA_PREV_TRACK
    "stop": "0xB2",       # VK_MEDIA_STOP
    "mute": "0xAD",       # VK_VOLUME_MUTE (toggle)
    "unmute": "0xAD",
}

MAC_MEDIA_SCRIPTS = {
    "play": 'tell application "System Events" to key code 16 using command down',
    "pause": 'tell application "System Events" to key code 16 using command down',
    "playpause": 'tell application "System Events" to key code 16 using command down',
    "next": 'tell application "System Events" to key code 17 using command down',
    "previous": 'tell application "System Events" to key code 18 using command down',
    "stop": 'tell application "System Events" to key code 16 using command down',
}

LINUX_MEDIA_COMMANDS = {
    "play": "playerctl play",
    "pause": "playerctl pause",
    "playpause": "playerctl play-pause",
    "next": "playerctl next",
    "previous": "playerctl previous",
    "stop": "playerctl stop",
}

_WINDOWS_KEY_SCRIPT = (
    "powershell -Command \"Add-Type -TypeDefinition 'using System; using System.Runtime.InteropServices; "
    "public class MediaKey { [DllImport(\\\"user32.dll\\\")] public static extern void keybd_event"
    "(byte bVk, byte bScan, uint dwFlags, int dwExtraInfo); public static void Send(byte key) "
    "{ keybd_event(key, 0, 0, 0); keybd_event(key, 0, 2, 0); } }'; [MediaKey]::Send({key})\""
)

_WINDOWS_VOLUME_SCRIPT = (
    "powershell -Command \"Add-Type -TypeDefinition 'using System; using System.Runtime.InteropServices; "
    "public class Audio { [DllImport(\\\"winmm.dll\\\")] public static extern int waveOutSetVolume"
    "(IntPtr hwo, uint dwVolume); }'; [Audio]::waveOutSetVolume([IntPtr]::Zero, {level} * 65536 + {level})\""
)


def clamp_volume(value: float) -> float:
    return max(0, min(100, value))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_media_action(action: Optional[str]) -> str:
    if not action or action not in MEDIA_ACTIONS:
        raise ValidationError(
            "Invalid action. Valid actions: " + ", ".join(MEDIA_ACTIONS),
            field="action",
            value=action,
        )
    return action


def media_command(platform: Platform, action: Optional[str], value: Any = None) -> str:
    """Command for a media key press or a volume change."""
    action = validate_media_action(action)
    set_volume = action == "volume" and _is_number(value)

    if platform == Platform.WINDOWS:
        if set_volume:
            level = round(clamp_volume(value) * 655.35)
            return _WINDOWS_VOLUME_SCRIPT.replace("{level}", str(level))
        key = WINDOWS_MEDIA_KEYS.get(action)
        if not key:
            raise ValidationError("Unsupported action for this platform", field="action", value=action)
        return _WINDOWS_KEY_SCRIPT.replace("{key}", key)

    if platform == Platform.MAC:
        if set_volume:
            return f'osascript -e "set volume output volume {_format_number(clamp_volume(value))}"'
        if action == "mute":
            return 'osascript -e "set volume with output muted"'
        if action == "unmute":
            return 'osascript -e "set volume without output muted"'
        script = MAC_MEDIA_SCRIPTS.get(action)
        if not script:
            raise ValidationError("Unsupported action for this platform", field="action", value=action)
        return f"osascript -e '{script}'"

    if set_volume:
        return f"playerctl volume {_format_number(clamp_volume(value) / 100)}"
    if action in ("mute", "unmute"):
        return "amixer set Master toggle"
    command = LINUX_MEDIA_COMMANDS.get(action)
    if not command:
        raise ValidationError("Unsupported action for this platform", field="action", value=action)
    return command


def _format_number(value: float) -> str:
    """Render 50.0 as ``50`` and 0.5 as ``0.5``."""
    return f"{value:g}"


# ============================================================================
# Probes
# ============================================================================

DISK_COMMANDS = {
    Platform.WINDOWS: "wmic logicaldisk get size,freespace,caption",
    Platform.MAC: "df -h /",
    Platform.LINUX: "df -h /",
}

BATTERY_COMMANDS = {
    Platform.WINDOWS: "wmic path win32_battery get estimatedchargeremaining,batterystatus",
    Platform.MAC: "pmset -g batt",
}

GPU_COMMANDS = {
    Platform.WINDOWS: "wmic path win32_VideoController get name,adapterram,driverversion,status /format:csv",
    Platform.MAC: "system_profiler SPDisplaysDataType -json",
    Platform.LINUX: "lspci | grep -i vga",
}

TEMPERATURE_COMMANDS = {
    Platform.WINDOWS: "wmic /namespace:\\\\root\\wmi PATH MSAcpi_ThermalZoneTemperature get CurrentTemperature",
    Platform.MAC: "which osx-cpu-temp && osx-cpu-temp",
    Platform.LINUX: "cat /sys/class/thermal/thermal_zone0/temp 2>/dev/null",
}

# (source label, command) pairs tried in order
NOW_PLAYING_COMMANDS = {
    Platform.MAC: [
        ("Spotify", "osascript -e 'tell application \"Spotify\" to if running then artist of current track & \" - \" & name of current track'"),
        ("Apple Music", "osascript -e 'tell application \"Music\" to if running then artist of current track & \" - \" & name of current track'"),
    ],
    Platform.LINUX: [
        ("playerctl", 'playerctl metadata --format "{{artist}} - {{title}}"'),
    ],
}
