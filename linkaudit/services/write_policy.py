import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Protocol

from linkaudit.services.pending_writes import PendingWrites

logger = logging.getLogger(__name__)


class WritePolicy(Protocol):
    """How reporters issue sheet writes.

    `submit` must return without waiting for the write, must count the write
    in `pending` until it finishes, and must never raise the write's error
    back to the caller.
    """

    pending: PendingWrites

    def submit(self, label: str, fn: Callable[[], object]) -> Future: ...

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None: ...


class FireAndForgetWritePolicy:
    """Run each write once on a single background worker; failures are logged and dropped.

    A single worker keeps writes in submission order.
    """

    def __init__(self, pending: PendingWrites, executor: Optional[ThreadPoolExecutor] = None):
        self.pending = pending
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="sheet-writer")

    def _attempt(self, label: str, fn: Callable[[], object]):
        return fn()

    def _run(self, label: str, fn: Callable[[], object]):
        try:
            return self._attempt(label, fn)
        except Exception as e:
            logger.error("%s FAILED: %s", label, e)
            return None
        finally:
            self.pending.decrement()

    def submit(self, label: str, fn: Callable[[], object]) -> Future:
        self.pending.increment()
        try:
            return self._executor.submit(self._run, label, fn)
        except RuntimeError:
            self.pending.decrement()
            raise

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)


class RetryingWritePolicy(FireAndForgetWritePolicy):
    """Like `FireAndForgetWritePolicy`, but retries a failed write with exponential backoff."""

    def __init__(self, pending: PendingWrites, max_attempts: int = 3, backoff_seconds: float = 1.0, executor: Optional[ThreadPoolExecutor] = None, sleep: Callable[[float], None] = time.sleep):
        super().__init__(pending, executor=executor)
        self.max_attempts = max(1, int(max_attempts))
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    def _attempt(self, label: str, fn: Callable[[], object]):
        for attempt in range(1, self.max_attempts + 1):
            try:
                return fn()
            except Exception as e:
                if attempt == self.max_attempts:
                    raise
                delay = self.backoff_seconds * (2 ** (attempt - 1))
                logger.warning("%s attempt %s/%s failed: %s; retrying in %.1fs", label, attempt, self.max_attempts, e, delay)
                self._sleep(delay)


def make_write_policy(pending: PendingWrites, retries: int = 0) -> FireAndForgetWritePolicy:
    """Fire-and-forget when `retries` is 0, otherwise retry each write up to `retries` more times."""
    if retries and int(retries) > 0:
        return RetryingWritePolicy(pending, max_attempts=int(retries) + 1)
    return FireAndForgetWritePolicy(pending)
