import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .checker import ConditionChecker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    label: str
    check_target: str
    satisfied: bool


class Poller:
    """Polls check_target until the checker reports it found, then flips satisfied.

    The background task starts on construction, so a Poller must be created
    inside a running event loop. satisfied only ever goes False -> True, and the
    task exits right after that write. Readers may call snapshot() from any
    thread.
    """

    def __init__(self, label: str, check_target: str, poll_interval: float,
                 checker: ConditionChecker,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 on_done: Optional[Callable[[], None]] = None):
        self.label = label
        self.check_target = check_target
        self.poll_interval = poll_interval
        self._checker = checker
        self._sleep = sleep
        self._on_done = on_done

        self._lock = threading.Lock()  # protects _satisfied
        self._satisfied = False
        self._task = asyncio.get_running_loop().create_task(self._poll(), name=f"poll:{label}")

    async def _poll(self) -> None:
        logger.info("polling %s every %ss", self.check_target, self.poll_interval)
        while not await self._check_once():
            await self._sleep(self.poll_interval)
        with self._lock:
            self._satisfied = True
        logger.info("%s is out: %s answered 200", self.label, self.check_target)
        if self._on_done is not None:
            self._on_done()

    async def _check_once(self) -> bool:
        try:
            return await self._checker.check(self.check_target)
        except Exception:
            # transport errors never reach here; a checker bug must not end the loop
            logger.exception("condition check for %s failed", self.check_target)
            return False

    def snapshot(self) -> Snapshot:
        with self._lock:
            satisfied = self._satisfied
        return Snapshot(self.label, self.check_target, satisfied)

    @property
    def satisfied(self) -> bool:
        with self._lock:
            return self._satisfied

    @property
    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> None:
        """Block until the task ends (condition met or stopped)."""
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    async def stop(self) -> None:
        if self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        logger.info("stopped polling %s", self.check_target)
