"""Domain objects for one link audit run."""
from .crawl_options import CrawlOptions as CrawlOptions
from .link_result import LinkResult as LinkResult, PageFetchError as PageFetchError
from .page_record import BrokenLinkRow as BrokenLinkRow, PageRecord as PageRecord
from .run_session import RunSession as RunSession
from .run_state import RunState as RunState
from .run_summary import RunSummary as RunSummary

__all__ = [
    "CrawlOptions",
    "LinkResult",
    "PageFetchError",
    "BrokenLinkRow",
    "PageRecord",
    "RunSession",
    "RunState",
    "RunSummary",
]
