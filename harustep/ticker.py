"""Real-time driver for FocusTimer: one tick per interval on the running event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from harustep.models import TimerState
from harustep.timer import FocusTimer

logger = logging.getLogger(__name__)


class Ticker:
    def __init__(
        self,
        timer: FocusTimer,
        interval: float = 1.0,
        on_boundary: Callable[[TimerState], None] | None = None,
    ) -> None:
        self.timer = timer
        self.interval = interval
        self.on_boundary = on_boundary
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Must be called from inside a running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Cancel the pending wake-up, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        while self.timer.running:
            await asyncio.sleep(self.interval)
            if self.timer.tick():
                logger.info("Timer switched to %s (%s)", self.timer.state.mode.value, self.timer.display)
                if self.on_boundary is not None:
                    try:
                        self.on_boundary(self.timer.state)
                    except Exception:
                        logger.exception("Timer boundary callback failed")
