"""Repeating timer backed by a daemon thread."""

import threading
import time
from typing import Callable

from songguess.domain.ports import SchedulerPort, TickHandle


class ThreadTickHandle(TickHandle):

    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> "ThreadTickHandle":
        self._thread.start()
        return self

    def _run(self) -> None:
        deadline = time.monotonic() + self.interval
        while not self._stopped.wait(max(0.0, deadline - time.monotonic())):
            if self._stopped.is_set():
                return
            self.callback()
            deadline += self.interval

    def cancel(self) -> None:
        # Never joins: the callback may be blocked on a lock held by the canceller.
        self._stopped.set()

    @property
    def cancelled(self) -> bool:
        return self._stopped.is_set()


class ThreadScheduler(SchedulerPort):

    def schedule_repeating(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        return ThreadTickHandle(interval, callback).start()
