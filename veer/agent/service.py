"""
System agent service - maps agent requests onto shell commands and probes.
This layer contains no HTTP framework dependencies.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from veer.adapters.shell import CommandResult, ShellRunner
from veer.agent import commands, parsers, telemetry
from veer.agent.history import HistoryBuffer
from veer.agent.platforms import Platform, detect_platform

logger = logging.getLogger(__name__)


class SystemAgent:
    """Dispatches agent operations for one host platform.

    Args:
        runner: Executes shell command lines
        platform: Command table to use (detected when omitted)
        history: Rolling CPU/memory buffer served by /history
        snapshot: Callable returning the psutil part of /system-info
        process_lister: Callable returning the top processes for a limit
    """

    def __init__(
        self,
        runner: Optional[ShellRunner] = None,
        platform: Optional[Platform] = None,
        history: Optional[HistoryBuffer] = None,
        snapshot: Optional[Callable[[], Dict[str, Any]]] = None,
        process_lister: Optional[Callable[[int], List[Dict[str, Any]]]] = None,
    ):
        self.runner = runner or ShellRunner()
        self.platform = platform or detect_platform()
        self.history = history or HistoryBuffer()
        self._snapshot = snapshot or telemetry.system_snapshot
        self._process_lister = process_lister or telemetry.top_processes

    async def _run(self, command: str) -> CommandResult:
        return await self.runner.run(command)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def perform_action(self, action: Optional[str]) -> Dict[str, Any]:
        """Run a power action; raises CommandError when the command fails."""
        command = commands.power_command(self.platform, action)
        logger.info(f"Executing power action: {action}")
        result = (await self._run(command)).check()
        return {"ok": True, "output": result.output}

    async def launch(self, launch_type: Optional[str], target: Optional[str]) -> Dict[str, Any]:
        """Open a website or start an application.

        On Windows, ``start`` often exits with status 1 even though the
        program came up; that is reported as success.
        """
        command = commands.launch_command(self.platform, launch_type, target)
        logger.info(f"Executing launch command: {command}")
        result = await self._run(command)
        if not result.ok:
            if self.platform == Platform.WINDOWS and result.returncode == 1:
                return {"ok": True, "message": f"Launched {target}"}
            logger.error(f"Launch failed: {command} (exit {result.returncode})")
            result.check()
        return {"ok": True, "message": f"Launched {target}", "output": result.output}

    async def kill_process(self, pid: Any) -> Dict[str, Any]:
        pid = commands.parse_pid(pid)
        (await self._run(commands.kill_command(self.platform, pid))).check()
        logger.info(f"Terminated process {pid}")
        return {"ok": True, "message": f"Process {pid} terminated"}

    async def media_control(self, action: Optional[str], value: Any = None) -> Dict[str, Any]:
        command = commands.media_command(self.platform, action, value)
        logger.info(f"Executing media command: {command}")
        result = await self._run(command)
        if not result.ok:
            logger.error(f"Media control error: exit {result.returncode}: {result.stderr}")
            # Key presses report odd exit codes on Windows but still land
            if self.platform == Platform.WINDOWS:
                return {"success": True, "action": action, "message": "Media command sent"}
            result.check()
        return {"success": True, "action": action, "output": result.output}

    # ------------------------------------------------------------------
    # Probes
    # ------------------------------------------------------------------

    async def _probe(self, command: Optional[str]) -> Optional[str]:
        """stdout of a best-effort probe, or None when it failed."""
        if not command:
            return None
        result = await self._run(command)
        if not result.ok or not result.stdout:
            return None
        return result.stdout

    async def system_info(self) -> Dict[str, Any]:
        info = self._snapshot()

        disk_out = await self._probe(commands.DISK_COMMANDS.get(self.platform))
        if disk_out:
            if self.platform == Platform.WINDOWS:
                info["disks"] = parsers.parse_wmic_disks(disk_out)
            else:
                info["disks"] = parsers.parse_df(disk_out)

        battery_out = await self._probe(commands.BATTERY_COMMANDS.get(self.platform))
        if battery_out:
            if self.platform == Platform.WINDOWS:
                battery = parsers.parse_wmic_battery(battery_out)
            else:
                battery = parsers.parse_pmset_battery(battery_out)
            if battery is not None:
                info["battery"] = battery
        return info

    def processes(self, limit: int = 15) -> Dict[str, Any]:
        try:
            return {"processes": self._process_lister(limit)}
        except Exception as e:
            logger.error(f"Process list error: {e}")
            return {"processes": []}

    async def gpu_info(self) -> Dict[str, Any]:
        out = await self._probe(commands.GPU_COMMANDS[self.platform])
        if not out:
            return {"gpus": []}
        if self.platform == Platform.WINDOWS:
            gpus = parsers.parse_wmic_gpus(out)
        elif self.platform == Platform.MAC:
            gpus = parsers.parse_system_profiler_gpus(out)
        else:
            gpus = parsers.parse_lspci_gpus(out)
        return {"gpus": gpus}

    async def temperature(self) -> Dict[str, Any]:
        info = {"cpu": None, "gpu": None, "available": False}
        out = await self._probe(commands.TEMPERATURE_COMMANDS[self.platform])
        if not out:
            return info
        parse = {
            Platform.WINDOWS: parsers.parse_windows_temperature,
            Platform.MAC: parsers.parse_mac_temperature,
            Platform.LINUX: parsers.parse_linux_temperature,
        }[self.platform]
        celsius = parse(out)
        if celsius is not None:
            info["cpu"] = celsius
            info["available"] = True
        return info

    async def now_playing(self) -> Dict[str, Any]:
        if self.platform == Platform.WINDOWS:
            return {
                "available": False,
                "message": "Now playing info not available on Windows without additional setup",
            }
        for source, command in commands.NOW_PLAYING_COMMANDS[self.platform]:
            out = await self._probe(command)
            if out:
                playing = parsers.parse_now_playing(out, source)
                if playing:
                    return playing
        return {"available": False, "message": "No active media player found"}

    def history_snapshot(self) -> Dict[str, Any]:
        return self.history.to_dict()


__all__ = ["SystemAgent"]
