"""
Host telemetry gathered through psutil: CPU, memory, network and processes.
"""
import getpass
import logging
import platform as host
import socket
import sys
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from veer.agent.parsers import round2

logger = logging.getLogger(__name__)


def _busy_and_total(times) -> tuple:
    total = sum(times)
    idle = times.idle
    return total - idle, total


def cpu_usage_since_boot() -> float:
    """Average busy percentage across all cores since boot."""
    per_cpu = psutil.cpu_times(percpu=True)
    if not per_cpu:
        return 0.0
    total_pct = 0.0
    for times in per_cpu:
        busy, total = _busy_and_total(times)
        total_pct += (busy / total * 100) if total > 0 else 0.0
    return round2(total_pct / len(per_cpu))


class CpuUsageTracker:
    """Busy percentage between consecutive samples."""

    def __init__(self):
        self._last = psutil.cpu_times()

    def sample(self) -> float:
        current = psutil.cpu_times()
        busy_now, total_now = _busy_and_total(current)
        busy_then, total_then = _busy_and_total(self._last)
        self._last = current
        delta_total = total_now - total_then
        if delta_total <= 0:
            return 0.0
        return round2((busy_now - busy_then) / delta_total * 100)


def memory_usage_percent() -> float:
    mem = psutil.virtual_memory()
    return round2((mem.total - mem.available) / mem.total * 100) if mem.total else 0.0


def _family_name(family) -> Optional[str]:
    if family == socket.AF_INET:
        return "IPv4"
    if family == socket.AF_INET6:
        return "IPv6"
    return None


def network_interfaces() -> Dict[str, List[Dict[str, Any]]]:
    """Addresses per interface, each carrying the interface MAC."""
    result = {}
    for name, addrs in psutil.net_if_addrs().items():
        mac = next(
            (a.address for a in addrs if a.family == psutil.AF_LINK),
            "00:00:00:00:00:00",
        )
        entries = []
        for addr in addrs:
            family = _family_name(addr.family)
            if family is None:
                continue
            address = addr.address.split("%")[0]
            entries.append({
                "address": address,
                "family": family,
                "internal": address.startswith("127.") or address == "::1",
                "mac": mac,
            })
        result[name] = entries
    return result


def system_snapshot() -> Dict[str, Any]:
    """Everything /system-info reports except the disk and battery probes."""
    mem = psutil.virtual_memory()
    used = mem.total - mem.available
    freq = psutil.cpu_freq()

    return {
        "os": {
            "platform": sys.platform,
            "type": host.system(),
            "release": host.release(),
            "version": host.version(),
            "arch": host.machine(),
            "hostname": socket.gethostname(),
            "uptime": int(time.time() - psutil.boot_time()),
        },
        "cpu": {
            "model": host.processor() or "Unknown",
            "cores": psutil.cpu_count() or 0,
            "speed": round(freq.current) if freq else 0,
            "usage": cpu_usage_since_boot(),
        },
        "memory": {
            "total": mem.total,
            "free": mem.available,
            "used": used,
            "usagePercent": round2(used / mem.total * 100) if mem.total else 0,
        },
        "network": network_interfaces(),
        "user": getpass.getuser(),
        "homedir": str(Path.home()),
        "tmpdir": tempfile.gettempdir(),
    }


def top_processes(limit: int = 15) -> List[Dict[str, Any]]:
    """Processes sorted by memory share, largest first."""
    processes = []
    for proc in psutil.process_iter(["pid", "name", "cpu_percent", "memory_percent"]):
        info = proc.info
        processes.append({
            "pid": info["pid"],
            "name": info.get("name") or "",
            "cpu": round2(info.get("cpu_percent") or 0.0),
            "memory": round2(info.get("memory_percent") or 0.0),
        })
    processes.sort(key=lambda p: p["memory"], reverse=True)
    return processes[:limit]
