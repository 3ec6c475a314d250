"""
Rolling CPU/memory history for the agent's charts.

A single background task appends one point per interval; readers only take
snapshots, so no locking is needed.
"""
import asyncio
import logging
import time
from collections import deque
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_POINTS = 60


class HistoryBuffer:
    """Fixed-size buffer of (timestamp, cpu%, memory%) samples."""

    def __init__(self, max_points: int = DEFAULT_MAX_POINTS):
        self.max_points = max_points
        self._timestamps = deque(maxlen=max_points)
        self._cpu = deque(maxlen=max_points)
        self._memory = deque(maxlen=max_points)

    def append(self, cpu: float, memory: float, timestamp_ms: Optional[int] = None) -> None:
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        self._timestamps.append(timestamp_ms)
        self._cpu.append(cpu)
        self._memory.append(memory)

    def __len__(self) -> int:
        return len(self._timestamps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cpu": list(self._cpu),
            "memory": list(self._memory),
            "timestamps": list(self._timestamps),
            "maxPoints": self.max_points,
        }


class HistorySampler:
    """Periodically feeds a HistoryBuffer from a sampling function.

    Args:
        buffer: Where samples go
        sample: Callable returning (cpu_percent, memory_percent)
        interval: Seconds between samples
    """

    def __init__(
        self,
        buffer: HistoryBuffer,
        sample: Callable[[], Tuple[float, float]],
        interval: float = 30.0,
    ):
        self.buffer = buffer
        self._sample = sample
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    def sample_once(self) -> None:
        cpu, memory = self._sample()
        self.buffer.append(cpu, memory)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.sample_once()
            except Exception as e:
                logger.error(f"History sample failed: {e}", exc_info=True)

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("History sampler started", extra={"interval": self.interval})

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
