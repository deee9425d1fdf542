import asyncio
from abc import ABC, abstractmethod
from typing import Callable


class Scheduler(ABC):
    """Runs a callback once after a delay; the returned handle can be canceled."""

    @abstractmethod
    def schedule(self, delay: float, callback: Callable[[], None]):
        pass


class AsyncioScheduler(Scheduler):
    """Schedules on the running event loop, so callbacks run between requests."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)
