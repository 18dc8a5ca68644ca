import logging
import os
import sys
from typing import Callable, Optional

from linkaudit.domain.run_session import RunSession
from linkaudit.domain.run_state import RunState
from linkaudit.services.sheet_store import SheetStore
from linkaudit.services.write_policy import WritePolicy
from linkaudit.utils.datetime_utils import format_timestamp, now_local

logger = logging.getLogger(__name__)

SUMMARY_RANGE = "Summary!A4"


def exit_now(code: int) -> None:
    """Exit without joining the sheet writer thread, dropping any writes it still holds."""
    logging.shutdown()
    os._exit(code)


class RunReporter:
    """Writes the run summary when the site is done and shuts down once writes drain.

    With `drain_on_exit` False the process terminates as soon as the crawl
    ends: queued writes are cancelled and the process exits through `abandon`
    without waiting for the write in progress.
    """

    def __init__(
        self,
        store: SheetStore,
        write_policy: WritePolicy,
        *,
        drain_on_exit: bool = True,
        poll_interval: float = 0.75,
        terminate: Callable[[int], None] = sys.exit,
        abandon: Optional[Callable[[int], None]] = None,
        clock: Callable = now_local,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.store = store
        self.write_policy = write_policy
        self.drain_on_exit = drain_on_exit
        self.poll_interval = poll_interval
        self._terminate = terminate
        self._abandon = abandon or exit_now
        self._clock = clock
        self._sleep = sleep

    def on_site(self, session: RunSession, error, site_url: str):
        summary = session.summary
        summary.finish(self._clock())
        logger.info("Broken Link Check Completed.")
        logger.info("Finished at: %s", format_timestamp(summary.finished_at))
        logger.info("Checked %s pages.", summary.pages_checked)
        row = summary.summary_row()
        return self.write_policy.submit("save_summary", lambda: self.store.update_values(SUMMARY_RANGE, [row]))

    def on_end(self, session: RunSession) -> None:
        session.transition(RunState.DRAINING)
        pending = self.write_policy.pending
        if not self.drain_on_exit:
            if pending.count:
                logger.warning("Exiting with %s sheet operations still in progress", pending.count)
            self.write_policy.shutdown(wait=False, cancel_futures=True)
            session.transition(RunState.TERMINATED)
            self._abandon(0)
            return

        pending.wait_for_drain(
            self.poll_interval,
            on_poll=lambda n: logger.info("Sheet operations in progress: %s", n),
            sleep=self._sleep,
        )
        session.transition(RunState.TERMINATED)
        self._terminate(0)
