"""
Crawl Errors

Per-reference failures cause a single product reference to be skipped.
Only ConfigurationError is allowed to abort a run.
"""

from typing import Optional


class CrawlError(Exception):
    """Base class for per-reference crawl failures."""

    reason = "crawl_error"

    def __init__(self, message: str = "", url: str = "", cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(message or self.reason)

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} ({self.url})" if self.url else base


class FetchError(CrawlError):
    """Network failure, timeout or non-2xx response."""

    reason = "fetch_error"

    def __init__(
        self,
        message: str = "",
        url: str = "",
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(message, url=url, cause=cause)


class ParseError(CrawlError):
    """Document could not be interpreted as the expected markup or JSON."""

    reason = "parse_error"


class IdentifierNotFound(CrawlError):
    """No EAN/GTIN could be recovered, so the record cannot be keyed."""

    reason = "identifier_not_found"


class NutrientBlockNotFound(CrawlError):
    """No analytical constituents block was located on the page."""

    reason = "nutrient_block_not_found"


class IncompleteProfile(CrawlError):
    """One of protein, fat, fiber or ash is missing."""

    reason = "incomplete_profile"


class ConfigurationError(Exception):
    """Invalid static configuration. Fatal for the whole run."""
