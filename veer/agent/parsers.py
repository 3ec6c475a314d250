"""
Parsers for the output of the platform probe commands.

Every parser is tolerant: unexpected output yields an empty result (or None)
instead of raising, because probes are best effort.
"""
import csv
import io
import json
import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Win32_Battery.BatteryStatus values that mean "on AC / charging"
_CHARGING_STATUSES = {2, 6, 7, 8, 9}

_BYTE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(num_bytes: float) -> str:
    """Human readable size in powers of 1024, e.g. ``1.5 KB``."""
    if num_bytes == 0:
        return "0 B"
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(_BYTE_UNITS) - 1:
        value /= 1024
        i += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_BYTE_UNITS[i]}"


def round2(value: float) -> float:
    return round(value * 100) / 100


def _int_or_zero(text: str) -> int:
    try:
        return int(text)
    except (TypeError, ValueError):
        return 0


def _data_lines(stdout: str) -> List[str]:
    """Non-empty lines after the header row."""
    lines = [line for line in stdout.strip().splitlines() if line.strip()]
    return lines[1:]


# ============================================================================
# Disks
# ============================================================================

def parse_wmic_disks(stdout: str) -> List[Dict[str, Any]]:
    """Parse ``wmic logicaldisk get size,freespace,caption``.

    WMIC prints columns alphabetically: Caption FreeSpace Size.
    """
    disks = []
    for line in _data_lines(stdout):
        parts = line.split()
        if len(parts) < 3:
            continue
        free = _int_or_zero(parts[1])
        size = _int_or_zero(parts[2])
        disks.append({
            "drive": parts[0],
            "total": size,
            "free": free,
            "used": size - free,
            "usagePercent": round2((size - free) / size * 100) if size > 0 else 0,
        })
    return disks


def parse_df(stdout: str) -> List[Dict[str, Any]]:
    """Parse ``df -h /`` output (header plus one row for the root volume)."""
    lines = [line for line in stdout.strip().splitlines() if line.strip()]
    if not lines:
        return []
    parts = lines[-1].split()
    # Filesystem Size Used Avail Use% Mounted
    if len(parts) >= 5 and not parts[0].lower().startswith("filesystem"):
        size, used, avail, percent = parts[1], parts[2], parts[3], parts[4]
    elif len(parts) == 4:
        size, used, avail, percent = parts
    else:
        return []
    try:
        usage = float(percent.rstrip("%"))
    except ValueError:
        usage = 0
    return [{
        "drive": "/",
        "totalStr": size,
        "usedStr": used,
        "freeStr": avail,
        "usagePercent": usage,
    }]


# ============================================================================
# Battery
# ============================================================================

def parse_wmic_battery(stdout: str) -> Optional[Dict[str, Any]]:
    """Parse ``wmic path win32_battery get estimatedchargeremaining,batterystatus``.

    Columns come out alphabetically: BatteryStatus EstimatedChargeRemaining.
    """
    lines = _data_lines(stdout)
    if not lines:
        return None
    parts = lines[0].split()
    if len(parts) < 2:
        return None
    try:
        status = int(parts[0])
    except ValueError:
        return None
    try:
        percent = int(parts[1])
    except ValueError:
        percent = None
    return {
        "percent": percent,
        "charging": status in _CHARGING_STATUSES,
        "status": status,
    }


def parse_pmset_battery(stdout: str) -> Optional[Dict[str, Any]]:
    """Parse ``pmset -g batt``."""
    if not stdout.strip():
        return None
    match = re.search(r"(\d+)%", stdout)
    return {
        "percent": int(match.group(1)) if match else None,
        "charging": "charging" in stdout or "AC Power" in stdout,
    }


# ============================================================================
# GPUs
# ============================================================================

def parse_wmic_gpus(stdout: str) -> List[Dict[str, Any]]:
    """Parse ``wmic path win32_VideoController get ... /format:csv``.

    The CSV header names the columns (Node,AdapterRAM,DriverVersion,Name,Status).
    """
    text = "\n".join(line for line in stdout.strip().splitlines() if line.strip())
    if not text:
        return []
    gpus = []
    for row in csv.DictReader(io.StringIO(text)):
        vram = _int_or_zero(row.get("AdapterRAM"))
        gpus.append({
            "name": (row.get("Name") or "").strip() or "Unknown GPU",
            "vram": vram,
            "vramFormatted": format_bytes(vram) if vram > 0 else "N/A",
            "driver": (row.get("DriverVersion") or "").strip() or "Unknown",
            "status": (row.get("Status") or "").strip() or "Unknown",
        })
    return gpus


def parse_system_profiler_gpus(stdout: str) -> List[Dict[str, Any]]:
    """Parse ``system_profiler SPDisplaysDataType -json``."""
    try:
        data = json.loads(stdout)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to parse GPU info: {e}")
        return []
    gpus = []
    for display in data.get("SPDisplaysDataType", []):
        vram_text = display.get("spdisplays_vram")
        match = re.match(r"\s*(\d+)", vram_text or "")
        gpus.append({
            "name": display.get("sppci_model") or "Unknown GPU",
            "vram": int(match.group(1)) * 1024 * 1024 if match else 0,
            "vramFormatted": vram_text or "N/A",
            "vendor": display.get("sppci_vendor") or "Unknown",
        })
    return gpus


def parse_lspci_gpus(stdout: str) -> List[Dict[str, Any]]:
    """Parse ``lspci | grep -i vga``."""
    return [
        {"name": re.sub(r".*VGA compatible controller:\s*", "", line, flags=re.IGNORECASE).strip()}
        for line in stdout.strip().splitlines()
        if line.strip()
    ]


# ============================================================================
# Temperature
# ============================================================================

def _plausible(celsius: float) -> bool:
    return 0 < celsius < 150


def parse_windows_temperature(stdout: str) -> Optional[float]:
    """MSAcpi_ThermalZoneTemperature reports tenths of a Kelvin."""
    match = re.search(r"(\d+)", stdout)
    if not match:
        return None
    kelvin = int(match.group(1)) / 10
    celsius = round((kelvin - 273.15) * 10) / 10
    return celsius if _plausible(celsius) else None


def parse_mac_temperature(stdout: str) -> Optional[float]:
    """``osx-cpu-temp`` prints e.g. ``61.2°C``."""
    match = re.search(r"([\d.]+)\s*°C", stdout)
    if not match:
        return None
    try:
        celsius = float(match.group(1))
    except ValueError:
        return None
    return celsius if _plausible(celsius) else None


def parse_linux_temperature(stdout: str) -> Optional[float]:
    """``/sys/class/thermal/thermal_zone0/temp`` is in millidegrees Celsius."""
    try:
        celsius = int(stdout.strip()) / 1000
    except ValueError:
        return None
    return round(celsius * 10) / 10 if _plausible(celsius) else None


# ============================================================================
# Media
# ============================================================================

def parse_now_playing(stdout: str, source: str) -> Optional[Dict[str, Any]]:
    """Split ``"artist - title"`` into a now-playing record."""
    text = stdout.strip()
    if not text:
        return None
    parts = text.split(" - ")
    return {
        "available": True,
        "source": source,
        "artist": parts[0] or "Unknown",
        "title": parts[1] if len(parts) > 1 and parts[1] else "Unknown",
    }
