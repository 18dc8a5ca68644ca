import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PendingWrites:
    """Thread-safe count of sheet writes that have been issued but not completed.

    Starts at zero and is never reset. `wait_for_drain` is the barrier the
    shutdown sequence uses before terminating.
    """

    def __init__(self):
        self._count = 0
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def increment(self) -> None:
        with self._cond:
            self._count += 1

    def decrement(self) -> None:
        with self._cond:
            if self._count > 0:
                self._count -= 1
            self._cond.notify_all()

    def wait_for_drain(self, poll_interval: float = 0.75, on_poll: Optional[Callable[[int], None]] = None, sleep: Optional[Callable[[float], None]] = None) -> None:
        """Block until no writes are pending, reporting the count every `poll_interval` seconds.

        There is no overall timeout: a write that never completes blocks forever.
        """
        while True:
            pending = self.count
            if on_poll is not None:
                on_poll(pending)
            if pending == 0:
                return
            if sleep is not None:
                sleep(poll_interval)
            else:
                with self._cond:
                    self._cond.wait(timeout=poll_interval)
