"""Dependency injection container for the application."""
from dependency_injector import containers, providers

from linkaudit import config as env
from linkaudit.configs import load_crawl_options
from linkaudit.services.authorizer import Authorizer
from linkaudit.services.content_review_service import ContentReviewService
from linkaudit.services.exclusion_loader import ExclusionLoader
from linkaudit.services.http_service import HttpService, make_session
from linkaudit.services.link_audit_runner import LinkAuditRunner
from linkaudit.services.link_checker import LinkChecker
from linkaudit.services.page_reporter import PageReporter
from linkaudit.services.pending_writes import PendingWrites
from linkaudit.services.response_cache import ResponseCache
from linkaudit.services.result_classifier import ResultClassifier
from linkaudit.services.robots_service import RobotsService
from linkaudit.services.run_reporter import RunReporter
from linkaudit.services.sheet_reset import SheetReset
from linkaudit.services.sheet_store import SheetStore
from linkaudit.services.site_checker import SiteChecker
from linkaudit.services.write_policy import make_write_policy


# Environment variables used by the container (read via `linkaudit.config` helpers).
#
# LINKAUDIT_SITE_URL (str, default: https://web-central.appspot.com/web/)
#   Root of the site to check. Only pages under this URL are crawled.
#
# LINKAUDIT_SPREADSHEET_ID (str)
#   Google Sheets document that receives the results. Must contain the
#   Summary, Errors, Pages and ExcludeKeywords sheets.
#
# LINKAUDIT_CLIENT_SECRET (str, default: "client_secret.json")
#   OAuth client secrets file downloaded from the Google Cloud console.
#
# LINKAUDIT_OPTIONS_FILE (str | optional)
#   YAML file overriding crawl options (see `linkaudit.configs`).
#
# USER_AGENT (str, default: desktop Chrome)
#   User-Agent header for page fetches, link checks and robots.txt.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for each outbound HTTP request.
#
# LINKAUDIT_VERIFY_TLS (bool, default: false)
#   Verify TLS certificates of checked sites.
#
# LINKAUDIT_DRAIN_ON_EXIT (bool, default: true)
#   Wait for in-flight sheet writes before exiting.
#
# LINKAUDIT_DRAIN_POLL_SECONDS (float seconds, default: 0.75)
#   How often the exit drain reports the pending write count.
#
# LINKAUDIT_WRITE_RETRIES (int, default: 0)
#   Extra attempts for a failed sheet write. 0 logs and drops failures.
ENV = {
    "LINKAUDIT_SITE_URL": env.get_str_env("LINKAUDIT_SITE_URL", env.DEFAULT_SITE_URL),
    "LINKAUDIT_SPREADSHEET_ID": env.get_str_env("LINKAUDIT_SPREADSHEET_ID", env.DEFAULT_SPREADSHEET_ID),
    "LINKAUDIT_CLIENT_SECRET": env.get_str_env("LINKAUDIT_CLIENT_SECRET", "client_secret.json"),
    "LINKAUDIT_OPTIONS_FILE": env.get_optional_str_env("LINKAUDIT_OPTIONS_FILE"),
    "TOKEN_PATH": env.token_path(),
    "USER_AGENT": env.get_str_env("USER_AGENT", env.DEFAULT_USER_AGENT),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "LINKAUDIT_VERIFY_TLS": env.get_bool_env("LINKAUDIT_VERIFY_TLS", False),
    "LINKAUDIT_DRAIN_ON_EXIT": env.get_bool_env("LINKAUDIT_DRAIN_ON_EXIT", True),
    "LINKAUDIT_DRAIN_POLL_SECONDS": env.get_float_env("LINKAUDIT_DRAIN_POLL_SECONDS", 0.75),
    "LINKAUDIT_WRITE_RETRIES": env.get_int_env("LINKAUDIT_WRITE_RETRIES", 0),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for the linkaudit application."""

    config = providers.Configuration(default=ENV)

    crawl_options = providers.Singleton(
        load_crawl_options,
        path=config.LINKAUDIT_OPTIONS_FILE,
        user_agent=config.USER_AGENT,
    )

    # Crawl driver
    http_session = providers.Singleton(
        make_session,
        max_sockets_per_host=crawl_options.provided.max_sockets_per_host,
    )

    http_service = providers.Singleton(
        HttpService,
        user_agent=crawl_options.provided.user_agent,
        http_client=http_session.provided.request,
        timeout=config.HTTP_TIMEOUT.as_(int),
        verify=config.LINKAUDIT_VERIFY_TLS.as_(bool),
    )

    response_cache = providers.Singleton(
        ResponseCache,
        ttl_seconds=crawl_options.provided.cache_expiry_seconds,
        enabled=crawl_options.provided.cache_responses,
    )

    link_checker = providers.Singleton(
        LinkChecker,
        http_service=http_service,
        cache=response_cache,
        request_method=crawl_options.provided.request_method,
    )

    robots_service = providers.Singleton(
        RobotsService,
        http_service=http_service,
        user_agent=crawl_options.provided.user_agent,
    )

    content_review_service = providers.Singleton(ContentReviewService)

    # options and channels are supplied per run
    site_checker = providers.Factory(
        SiteChecker,
        http_service=http_service,
        link_checker=link_checker,
        robots_service=robots_service,
        content_review_service=content_review_service,
    )

    # Sheet store
    authorizer = providers.Singleton(
        Authorizer,
        client_secret_path=config.LINKAUDIT_CLIENT_SECRET,
        token_path=config.TOKEN_PATH,
    )

    sheet_store = providers.Singleton(
        SheetStore,
        spreadsheet_id=config.LINKAUDIT_SPREADSHEET_ID,
    )

    pending_writes = providers.Singleton(PendingWrites)

    write_policy = providers.Singleton(
        make_write_policy,
        pending=pending_writes,
        retries=config.LINKAUDIT_WRITE_RETRIES.as_(int),
    )

    # Reporting pipeline
    result_classifier = providers.Singleton(ResultClassifier)

    page_reporter = providers.Singleton(
        PageReporter,
        store=sheet_store,
        write_policy=write_policy,
    )

    run_reporter = providers.Singleton(
        RunReporter,
        store=sheet_store,
        write_policy=write_policy,
        drain_on_exit=config.LINKAUDIT_DRAIN_ON_EXIT.as_(bool),
        poll_interval=config.LINKAUDIT_DRAIN_POLL_SECONDS.as_(float),
    )

    exclusion_loader = providers.Singleton(ExclusionLoader, store=sheet_store)

    sheet_reset = providers.Singleton(SheetReset, store=sheet_store)

    link_audit_runner = providers.Factory(
        LinkAuditRunner,
        site_url=config.LINKAUDIT_SITE_URL,
        options=crawl_options,
        authorizer=authorizer,
        store=sheet_store,
        exclusion_loader=exclusion_loader,
        sheet_reset=sheet_reset,
        result_classifier=result_classifier,
        page_reporter=page_reporter,
        run_reporter=run_reporter,
        site_checker_factory=site_checker.provider,
    )
