from enum import Enum


class RunState(str, Enum):
    IDLE = "idle"
    AUTHORIZING = "authorizing"
    LOADING_EXCLUSIONS = "loading_exclusions"
    RESETTING_STORE = "resetting_store"
    CRAWLING = "crawling"
    DRAINING = "draining"
    TERMINATED = "terminated"
    FAILED = "failed"
