import logging

from linkaudit.domain.crawl_options import CrawlOptions
from linkaudit.services.sheet_store import SheetStore

logger = logging.getLogger(__name__)

EXCLUDES_RANGE = "ExcludeKeywords!A2:B"


def _cell(row: list, index: int) -> str:
    if len(row) <= index or row[index] is None:
        return ""
    return str(row[index]).strip()


def parse_exclusions(rows: list) -> tuple[list, list]:
    """Split sheet rows into (keywords, schemes); column A is a keyword, column B a scheme."""
    keywords, schemes = [], []
    for row in rows or []:
        keyword = _cell(row, 0)
        if keyword:
            keywords.append(keyword)
        scheme = _cell(row, 1)
        if scheme:
            schemes.append(scheme)
    return keywords, schemes


class ExclusionLoader:
    def __init__(self, store: SheetStore):
        self.store = store

    def load(self, options: CrawlOptions) -> CrawlOptions:
        """Return `options` extended with the exclusions listed in the sheet.

        A failed read raises `StoreError`.
        """
        logger.info("Retrieving excludes...")
        keywords, schemes = parse_exclusions(self.store.read_range(EXCLUDES_RANGE))
        merged = options.with_exclusions(keywords, schemes)
        logger.info("-> Keywords Excluded: %s", ", ".join(merged.excluded_keywords))
        logger.info("-> Schemes  Excluded: %s", ", ".join(merged.excluded_schemes))
        return merged
