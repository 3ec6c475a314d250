"""
Host platform detection for the system agent.
"""
import sys
from enum import Enum
from typing import Optional


class Platform(str, Enum):
    """Operating system family; values match ``sys.platform`` prefixes."""
    WINDOWS = "win32"
    MAC = "darwin"
    LINUX = "linux"


def detect_platform(sys_platform: Optional[str] = None) -> Platform:
    """Map ``sys.platform`` onto the three command tables the agent knows.

    Anything that is neither Windows nor macOS uses the Linux table.
    """
    value = sys_platform if sys_platform is not None else sys.platform
    if value == "win32":
        return Platform.WINDOWS
    if value == "darwin":
        return Platform.MAC
    return Platform.LINUX
