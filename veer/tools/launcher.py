"""
Recognise "open X" style requests and resolve them to a website or an
application the system agent can launch.
"""
import re
from typing import Optional, Tuple
from urllib.parse import urlparse

WEBSITE_ALIASES = {
    "google": "https://www.google.com",
    "youtube": "https://www.youtube.com",
    "github": "https://github.com",
    "gmail": "https://mail.google.com",
    "mail": "https://mail.google.com",
    "email": "https://mail.google.com",
    "chatgpt": "https://chat.openai.com",
    "chat gpt": "https://chat.openai.com",
    "twitter": "https://x.com",
    "x": "https://x.com",
    "linkedin": "https://www.linkedin.com",
    "reddit": "https://www.reddit.com",
    "stackoverflow": "https://stackoverflow.com",
    "stack overflow": "https://stackoverflow.com",
    "wikipedia": "https://www.wikipedia.org",
    "facebook": "https://www.facebook.com",
    "instagram": "https://www.instagram.com",
    "amazon": "https://www.amazon.com",
    "netflix": "https://www.netflix.com",
    "spotify": "https://open.spotify.com",
    "whatsapp": "https://web.whatsapp.com",
    "discord": "https://discord.com/app",
    "twitch": "https://www.twitch.tv",
    "notion": "https://www.notion.so",
    "figma": "https://www.figma.com",
    "canva": "https://www.canva.com",
    "drive": "https://drive.google.com",
    "google drive": "https://drive.google.com",
    "docs": "https://docs.google.com",
    "google docs": "https://docs.google.com",
    "sheets": "https://sheets.google.com",
    "google sheets": "https://sheets.google.com",
    "calendar": "https://calendar.google.com",
    "google calendar": "https://calendar.google.com",
    "maps": "https://maps.google.com",
    "google maps": "https://maps.google.com",
}

APP_ALIASES = {
    "notepad": "notepad",
    "calculator": "calc",
    "calc": "calc",
    "explorer": "explorer",
    "file explorer": "explorer",
    "files": "explorer",
    "cmd": "cmd",
    "command prompt": "cmd",
    "terminal": "cmd",
    "powershell": "powershell",
    "paint": "mspaint",
    "settings": "ms-settings:",
    "control panel": "control",
    "task manager": "taskmgr",
    "snipping tool": "snippingtool",
    "word": "winword",
    "excel": "excel",
    "powerpoint": "powerpnt",
    "outlook": "outlook",
    "onenote": "onenote",
    "teams": "msteams:",
    "microsoft teams": "msteams:",
    "vscode": "code",
    "visual studio code": "code",
    "chrome": "chrome",
    "google chrome": "chrome",
    "firefox": "firefox",
    "edge": "msedge",
    "microsoft edge": "msedge",
    "brave": "brave",
    "spotify": "spotify:",
    "discord": "discord:",
    "slack": "slack:",
    "zoom": "zoommtg:",
    "skype": "skype:",
}

# "open up" is tried before "open" so its target does not keep the "up"
OPEN_PATTERNS = [
    re.compile(r"^open\s+up\s+(.+)$"),
    re.compile(r"^open\s+(.+)$"),
    re.compile(r"^launch\s+(.+)$"),
    re.compile(r"^start\s+(.+)$"),
    re.compile(r"^go\s+to\s+(.+)$"),
    re.compile(r"^navigate\s+to\s+(.+)$"),
    re.compile(r"^run\s+(.+)$"),
]


def parse_open_command(message: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Detect an open/launch intent.

    Returns:
        ``(type, target)`` where type is ``"website"`` or ``"application"``,
        or ``(None, None)`` when the message is not an open command
    """
    text = (message or "").lower().strip()
    target = None
    for pattern in OPEN_PATTERNS:
        match = pattern.match(text)
        if match:
            target = match.group(1).strip()
            break
    if not target:
        return None, None

    if target in WEBSITE_ALIASES:
        return "website", WEBSITE_ALIASES[target]
    if target in APP_ALIASES:
        return "application", APP_ALIASES[target]

    if "." in target and " " not in target:
        if not target.startswith(("http://", "https://")):
            target = "https://" + target
        return "website", target

    for key, url in WEBSITE_ALIASES.items():
        if key in target or target in key:
            return "website", url
    for key, command in APP_ALIASES.items():
        if key in target or target in key:
            return "application", command

    # Unknown names are passed to the agent as-is
    return "application", target


def display_name(target: str, launch_type: str) -> str:
    """Friendly label: the bare host for websites, the alias for known app commands."""
    if launch_type == "website":
        host = urlparse(target).hostname
        return host.replace("www.", "", 1) if host else target
    for name, command in APP_ALIASES.items():
        if command == target:
            return name[:1].upper() + name[1:]
    return target
