from datetime import datetime, timezone
from unittest.mock import MagicMock

from linkaudit.domain import LinkResult, PageFetchError, RunSession, RunSummary
from linkaudit.domain.page_record import hyperlink_formula
from linkaudit.services.page_reporter import ERRORS_RANGE, PAGES_RANGE, PageReporter
from linkaudit.services.result_classifier import ResultClassifier

SITE = "https://web-central.appspot.com/web/"
PAGE = "https://web-central.appspot.com/web/a"


def _immediate_policy():
    policy = MagicMock()
    policy.submit.side_effect = lambda label, fn: fn()
    return policy


def _setup():
    store = MagicMock()
    reporter = PageReporter(store, _immediate_policy())
    session = RunSession(SITE, RunSummary(started_at=datetime(2024, 1, 1, tzinfo=timezone.utc)))
    return store, reporter, session


def test_page_with_mixed_links_writes_one_error_row_and_one_page_row():
    store, reporter, session = _setup()
    classifier = ResultClassifier()

    reporter.on_html(session, PAGE)
    classifier.handle(session, LinkResult("x", SITE + "x", PAGE, broken=True, broken_reason="HTTP_404"))
    classifier.handle(session, LinkResult("y", SITE + "y", PAGE, excluded=True, excluded_reason="BLC_KEYWORD"))
    classifier.handle(session, LinkResult("z", SITE + "z", PAGE))
    reporter.on_page(session, None, PAGE)

    formula = hyperlink_formula(PAGE, SITE)
    assert store.append_values.call_count == 2
    errors_call, pages_call = store.append_values.call_args_list
    assert errors_call.args == (ERRORS_RANGE, [[formula, "HTTP_404", SITE + "x", "x"]])
    assert pages_call.args == (PAGES_RANGE, [[formula, 3, 1, 1, 1]])


def test_clean_page_writes_only_page_row():
    store, reporter, session = _setup()
    reporter.on_html(session, PAGE)
    ResultClassifier().handle(session, LinkResult("z", SITE + "z", PAGE))
    reporter.on_page(session, None, PAGE)

    store.append_values.assert_called_once()
    assert store.append_values.call_args.args[0] == PAGES_RANGE
    assert session.summary.pages_with_errors == 0


def test_fetch_error_synthesizes_broken_row():
    store, reporter, session = _setup()
    page = reporter.on_page(session, PageFetchError(500, "HTTP 500 for " + PAGE), PAGE)

    assert page.link_count == 1
    assert page.link_broken == 1
    assert len(page.broken_link_rows) == 1
    row = page.broken_link_rows[0]
    assert row.reason == "HTTP_500"
    assert row.as_row() == [hyperlink_formula(PAGE, SITE), "HTTP_500", "HTTP 500 for " + PAGE, ""]
    assert session.summary.broken_links == {PAGE}
    assert session.summary.pages_with_errors == 1
    assert store.append_values.call_count == 2


def test_code_200_error_is_not_a_broken_link():
    store, reporter, session = _setup()
    page = reporter.on_page(session, PageFetchError(200, "Expected type text/html but got application/pdf"), PAGE)

    assert page.link_count == 0
    assert page.broken_link_rows == []
    assert session.summary.pages_checked == 1
    store.append_values.assert_called_once_with(PAGES_RANGE, [[hyperlink_formula(PAGE, SITE), 0, 0, 0, 0]])


def test_summary_accumulates_across_pages():
    store, reporter, session = _setup()
    classifier = ResultClassifier()
    pages = []
    for i, broken in enumerate((True, False, True)):
        url = f"{SITE}p{i}"
        reporter.on_html(session, url)
        classifier.handle(session, LinkResult("l", SITE + "l", url, broken=broken, broken_reason="HTTP_404" if broken else None))
        classifier.handle(session, LinkResult("m", SITE + "m", url))
        pages.append(reporter.on_page(session, None, url))

    summary = session.summary
    assert summary.pages_checked == 3
    assert summary.links_total == 6
    assert summary.links_ok == 4
    assert summary.links_total == sum(page.link_count for page in pages)
    assert summary.pages_with_errors == 2


