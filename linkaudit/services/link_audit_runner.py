import logging
from typing import Callable

from linkaudit.domain.crawl_options import CrawlOptions
from linkaudit.domain.run_session import RunSession
from linkaudit.domain.run_state import RunState
from linkaudit.domain.run_summary import RunSummary
from linkaudit.exceptions import CredentialsError, StoreError
from linkaudit.services.authorizer import Authorizer
from linkaudit.services.event_channels import CrawlEventChannels
from linkaudit.services.exclusion_loader import ExclusionLoader
from linkaudit.services.page_reporter import PageReporter
from linkaudit.services.result_classifier import ResultClassifier
from linkaudit.services.run_reporter import RunReporter
from linkaudit.services.sheet_reset import SheetReset
from linkaudit.services.sheet_store import SheetStore
from linkaudit.utils.datetime_utils import format_timestamp, now_local

logger = logging.getLogger(__name__)


class LinkAuditRunner:
    """Runs one link audit: authorize, load exclusions, reset the sheet, crawl.

    Startup steps run strictly in sequence. A credentials or sheet error
    during startup ends the run in the FAILED state before any crawling.
    """

    def __init__(
        self,
        *,
        site_url: str,
        options: CrawlOptions,
        authorizer: Authorizer,
        store: SheetStore,
        exclusion_loader: ExclusionLoader,
        sheet_reset: SheetReset,
        result_classifier: ResultClassifier,
        page_reporter: PageReporter,
        run_reporter: RunReporter,
        site_checker_factory: Callable,
        clock: Callable = now_local,
    ):
        self.site_url = site_url
        self.options = options
        self.authorizer = authorizer
        self.store = store
        self.exclusion_loader = exclusion_loader
        self.sheet_reset = sheet_reset
        self.result_classifier = result_classifier
        self.page_reporter = page_reporter
        self.run_reporter = run_reporter
        self.site_checker_factory = site_checker_factory
        self._clock = clock

    def new_session(self) -> RunSession:
        return RunSession(self.site_url, RunSummary(started_at=self._clock()), self.options)

    def build_channels(self, session: RunSession) -> CrawlEventChannels:
        channels = CrawlEventChannels()
        channels.on("html", lambda soup, robots, response, page_url: self.page_reporter.on_html(session, page_url))
        channels.on("junk", lambda result: self.result_classifier.handle(session, result))
        channels.on("link", lambda result: self.result_classifier.handle(session, result))
        channels.on("page", lambda error, page_url: self.page_reporter.on_page(session, error, page_url))
        channels.on("robots", lambda page_url: logger.info("robots: %s", page_url))
        channels.on("site", lambda error, site_url: self.run_reporter.on_site(session, error, site_url))
        channels.on("end", lambda: self.run_reporter.on_end(session))
        return channels

    def start(self, session: RunSession) -> bool:
        """Run the startup sequence. Returns False (state FAILED) on a collaborator error."""
        try:
            session.transition(RunState.AUTHORIZING)
            credentials = self.authorizer.authorize()
            self.store.connect(credentials)

            session.transition(RunState.LOADING_EXCLUSIONS)
            session.options = self.exclusion_loader.load(session.options)

            session.transition(RunState.RESETTING_STORE)
            self.sheet_reset.reset(session.summary.started_at)
        except (CredentialsError, StoreError) as e:
            logger.critical("CRITICAL FAILURE while %s: %s", session.state.value, e)
            session.transition(RunState.FAILED)
            return False
        return True

    def run(self) -> RunSession:
        session = self.new_session()
        logger.info("Broken Link Checker for %s", self.site_url)
        logger.info("Started at: %s", format_timestamp(session.summary.started_at))

        if not self.start(session):
            return session

        session.transition(RunState.CRAWLING)
        logger.info("Starting link checker at: %s", self.site_url)
        checker = self.site_checker_factory(options=session.options, channels=self.build_channels(session))
        session.attach_crawler(checker)
        checker.enqueue(self.site_url)
        checker.run()
        return session
