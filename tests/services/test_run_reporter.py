import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

from linkaudit.domain import RunSession, RunState, RunSummary
from linkaudit.services.pending_writes import PendingWrites
from linkaudit.services.run_reporter import SUMMARY_RANGE, RunReporter
from linkaudit.services.write_policy import FireAndForgetWritePolicy

STARTED = datetime(2024, 1, 2, 3, 0, 0, tzinfo=timezone.utc)
FINISHED = datetime(2024, 1, 2, 4, 0, 0, tzinfo=timezone.utc)


def _session():
    return RunSession("https://example.com/", RunSummary(started_at=STARTED))


def test_on_site_writes_summary_row():
    store = MagicMock()
    policy = MagicMock()
    policy.submit.side_effect = lambda label, fn: fn()
    reporter = RunReporter(store, policy, terminate=MagicMock(), clock=lambda: FINISHED)
    session = _session()
    session.summary.pages_checked = 4

    reporter.on_site(session, None, "https://example.com/")

    assert session.summary.finished_at == FINISHED
    store.update_values.assert_called_once()
    range_name, rows = store.update_values.call_args.args
    assert range_name == SUMMARY_RANGE
    assert rows[0][:4] == ["Finished", "2024-01-02T03:00:00+00:00", "2024-01-02T04:00:00+00:00", 4]


def test_on_end_waits_for_outstanding_writes():
    pending = PendingWrites()
    pending.increment()
    pending.increment()
    policy = MagicMock(pending=pending)
    terminate = MagicMock()
    polls = []

    def fake_sleep(seconds):
        polls.append(seconds)
        assert not terminate.called
        pending.decrement()

    reporter = RunReporter(MagicMock(), policy, terminate=terminate, poll_interval=0.75, sleep=fake_sleep)
    session = _session()
    reporter.on_end(session)

    assert polls == [0.75, 0.75]
    terminate.assert_called_once_with(0)
    assert pending.count == 0
    assert session.state is RunState.TERMINATED


def test_on_end_terminates_immediately_when_nothing_pending():
    policy = MagicMock(pending=PendingWrites())
    terminate = MagicMock()
    sleep = MagicMock()
    RunReporter(MagicMock(), policy, terminate=terminate, sleep=sleep).on_end(_session())
    sleep.assert_not_called()
    terminate.assert_called_once_with(0)


def test_unguarded_exit_does_not_wait(caplog):
    pending = PendingWrites()
    pending.increment()
    policy = MagicMock(pending=pending)
    terminate = MagicMock()
    abandon = MagicMock()
    sleep = MagicMock()
    reporter = RunReporter(MagicMock(), policy, drain_on_exit=False, terminate=terminate, abandon=abandon, sleep=sleep)
    session = _session()

    reporter.on_end(session)

    sleep.assert_not_called()
    terminate.assert_not_called()
    abandon.assert_called_once_with(0)
    policy.shutdown.assert_called_once_with(wait=False, cancel_futures=True)
    assert session.state is RunState.TERMINATED
    assert "1 sheet operations still in progress" in caplog.text


def test_unguarded_exit_drops_queued_writes():
    policy = FireAndForgetWritePolicy(PendingWrites())
    started = threading.Event()
    release = threading.Event()
    ran = []

    def slow_write():
        started.set()
        release.wait(5)
        ran.append("slow")

    policy.submit("save_page", slow_write)
    assert started.wait(5)
    queued = policy.submit("save_errors", lambda: ran.append("queued"))
    abandon = MagicMock()

    RunReporter(MagicMock(), policy, drain_on_exit=False, abandon=abandon).on_end(_session())

    abandon.assert_called_once_with(0)
    assert queued.cancelled()
    release.set()
    policy.shutdown(wait=True)
    assert ran == ["slow"]
