"""Error taxonomy for the sync run.

ConfigError is the only fatal one. FetchError abandons a single feed;
the rest skip a single item.
"""


class SyncError(RuntimeError):
    pass


class ConfigError(SyncError):
    pass


class FetchError(SyncError):
    def __init__(self, url: str, cause: object):
        super().__init__(f"could not fetch feed {url}: {cause}")
        self.url = url
        self.cause = cause


class QueryError(SyncError):
    pass


class WriteError(SyncError):
    pass


class ConversionError(SyncError):
    pass


class CancelledError(SyncError):
    """Raised by RateGovernor.acquire when the wait is cancelled or too long."""
