"""Exception hierarchy for a crawl run.

Every failure aborts the run; callers only need to catch :class:`CrawlError`.
"""

from __future__ import annotations


class CrawlError(Exception):
    """Base class for everything that can stop a crawl."""


class ConfigurationError(CrawlError, ValueError):
    """An option is missing or out of range."""


class FetchError(CrawlError):
    """Navigation, connection or the content-ready wait failed."""


class ParseError(CrawlError):
    """The HTML parser rejected a page."""


class FieldNotFoundError(CrawlError, LookupError):
    """A page did not have the structure an extractor expects."""

    def __init__(self, field: str, detail: str | None = None) -> None:
        self.field = field
        message = f"can't find {field}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class PersistError(CrawlError, OSError):
    """Writing a commit file or the summary table failed."""
