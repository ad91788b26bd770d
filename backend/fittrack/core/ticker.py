"""Background tick loop for running rest timers.

At most one loop exists per key. Starting is idempotent and stopping
cancels the task right away, so no stale tick fires after a pause or skip.
The loop only triggers resyncs; the timer itself lives on its deadline.
Each tick runs in a worker thread.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

log = logging.getLogger(__name__)


class RestTicker:
    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._tasks: dict[str, asyncio.Task] = {}

    def is_running(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def ensure(self, key: str, tick: Callable[[], bool]) -> bool:
        """Start a loop calling ``tick`` until it returns False.

        Returns False when a loop for ``key`` is already active.
        """
        if self.is_running(key):
            return False
        loop = asyncio.get_running_loop()
        self._tasks[key] = loop.create_task(self._run(key, tick))
        log.debug("tick loop started for %s", key)
        return True

    def stop(self, key: str) -> bool:
        task = self._tasks.pop(key, None)
        if task is None or task.done():
            return False
        task.cancel()
        log.debug("tick loop stopped for %s", key)
        return True

    def stop_all(self) -> None:
        for key in list(self._tasks):
            self.stop(key)

    async def _run(self, key: str, tick: Callable[[], bool]) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                if not await asyncio.to_thread(tick):
                    break
        except Exception:
            log.exception("tick loop for %s failed", key)
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                del self._tasks[key]
