import logging
import os
from dataclasses import fields
from typing import Optional

import yaml

from linkaudit.domain.crawl_options import CrawlOptions

logger = logging.getLogger(__name__)

_OPTION_NAMES = {f.name for f in fields(CrawlOptions)}
_LIST_OPTIONS = ("excluded_keywords", "excluded_schemes")


def load_crawl_options(path: Optional[str] = None, user_agent: Optional[str] = None) -> CrawlOptions:
    """Build `CrawlOptions` from an optional YAML file.

    Every key is optional; anything missing keeps its default. Unknown keys are
    logged and ignored. `user_agent` (from the environment) applies unless the
    file sets one.
    """
    values = {}
    if user_agent:
        values["user_agent"] = user_agent

    if path:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Crawl options file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Crawl options file {path} must contain a mapping")
        for key, value in data.items():
            if key not in _OPTION_NAMES:
                logger.warning("Ignoring unknown crawl option %r in %s", key, path)
                continue
            if key in _LIST_OPTIONS:
                if isinstance(value, str):
                    value = [value]
                value = tuple(str(v).strip() for v in (value or []) if str(v).strip())
            values[key] = value

    return CrawlOptions(**values)
