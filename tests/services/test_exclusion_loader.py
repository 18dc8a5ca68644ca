from unittest.mock import MagicMock

import pytest

from linkaudit.domain.crawl_options import CrawlOptions
from linkaudit.exceptions import StoreError
from linkaudit.services.exclusion_loader import EXCLUDES_RANGE, ExclusionLoader, parse_exclusions


def test_parse_trims_both_columns():
    keywords, schemes = parse_exclusions([["  foo.example ", " mailto: "]])
    assert keywords == ["foo.example"]
    assert schemes == ["mailto:"]


@pytest.mark.parametrize("row", [["", "tel:"], ["   ", "tel:"], [None, "tel:"]])
def test_blank_keyword_cell_contributes_nothing(row):
    keywords, schemes = parse_exclusions([row])
    assert keywords == []
    assert schemes == ["tel:"]


def test_short_rows_and_empty_sheet():
    assert parse_exclusions([["only-keyword"]]) == (["only-keyword"], [])
    assert parse_exclusions([[]]) == ([], [])
    assert parse_exclusions(None) == ([], [])


def test_load_merges_into_options():
    store = MagicMock()
    store.read_range.return_value = [["/private/", "mailto:"], ["logout", ""]]
    opts = CrawlOptions(excluded_schemes=("javascript",))

    merged = ExclusionLoader(store).load(opts)

    store.read_range.assert_called_once_with(EXCLUDES_RANGE)
    assert merged.excluded_keywords == ("/private/", "logout")
    assert merged.excluded_schemes == ("javascript", "mailto:")
    assert opts.excluded_keywords == ()


def test_read_failure_propagates():
    store = MagicMock()
    store.read_range.side_effect = StoreError("read_range", RuntimeError("403"))
    with pytest.raises(StoreError):
        ExclusionLoader(store).load(CrawlOptions())
