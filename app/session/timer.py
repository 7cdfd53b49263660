import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CountdownTimer:
    """Cooperative countdown with a single tick source.

    Either `start()` runs it as an asyncio task, or the caller drives it with
    `tick()` from a UI loop; a running task refuses outside ticks. `on_expire`
    fires once, when the remaining time first reaches zero; cancelled timers
    never fire.
    """

    def __init__(self, seconds: int, on_expire: Callable[[], None], interval: float = 1.0):
        self.remaining_seconds = max(int(seconds), 0)
        self.interval = interval
        self._on_expire = on_expire
        self._fired = False
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return not self._fired and not self._cancelled

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _advance(self, seconds: int) -> int:
        if not self.active:
            return self.remaining_seconds
        self.remaining_seconds = max(self.remaining_seconds - seconds, 0)
        if self.remaining_seconds == 0:
            self._fired = True
            logger.debug("Countdown expired")
            self._on_expire()
        return self.remaining_seconds

    def tick(self, seconds: int = 1) -> int:
        if self.running:
            raise RuntimeError("Countdown is driven by its own task")
        return self._advance(seconds)

    async def run(self):
        while self.active:
            await asyncio.sleep(self.interval)
            self._advance(1)

    def start(self) -> asyncio.Task:
        if self._task is not None:
            raise RuntimeError("Countdown already running")
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def cancel(self):
        self._cancelled = True
        if self._task is not None and not self._task.done() and self._task is not asyncio.current_task():
            self._task.cancel()
