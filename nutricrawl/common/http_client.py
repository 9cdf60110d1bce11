"""
HTTP Fetch Client

Shared GET client for catalog and detail fetches.
Sets a stable client identity and locale headers, and converts every
transport failure or non-2xx status into a FetchError.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .errors import FetchError, ParseError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Raw response of a successful GET."""
    url: str
    status_code: int
    body: bytes
    encoding: Optional[str] = None

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding or "utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON, raising ParseError on malformed input."""
        try:
            return json.loads(self.text)
        except (json.JSONDecodeError, ValueError) as e:
            raise ParseError(f"Invalid JSON body: {e}", url=self.url, cause=e) from e


class HttpClient:
    """
    Thin wrapper over requests.Session.

    Usage:
        with HttpClient(user_agent="MyCrawler/1.0", accept_language="de-DE") as client:
            result = client.get("https://example.org/", params={"page": 2})
            html = result.text
    """

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

    def __init__(
        self,
        user_agent: str,
        accept_language: str = "de-DE,de;q=0.9,en;q=0.8",
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            user_agent: Client identity string sent with every request
            accept_language: Locale preference for localized markup
            timeout: Default request timeout in seconds
            headers: Extra default headers
            session: Optional pre-built session (shared or mocked)
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": self.DEFAULT_ACCEPT,
            "Accept-Language": accept_language,
        })
        if headers:
            self.session.headers.update(headers)

        self.requests_made = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> FetchResult:
        """
        Issue a single GET request. No retries.

        Args:
            url: Absolute URL
            params: Query parameters
            headers: Per-request header overrides
            timeout: Timeout in seconds (defaults to the client timeout)

        Returns:
            FetchResult for any 2xx response

        Raises:
            FetchError: On timeout, connection failure or non-2xx status
        """
        self.requests_made += 1
        try:
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning("Request timeout: %s", url)
            raise FetchError("Request timed out", url=url, cause=e) from e
        except requests.exceptions.RequestException as e:
            logger.warning("Request failed: %s (%s)", url, e)
            raise FetchError(f"Request failed: {type(e).__name__}", url=url, cause=e) from e

        status = response.status_code
        if status < 200 or status >= 300:
            logger.warning("HTTP %d on %s", status, url)
            raise FetchError(f"HTTP {status}", url=url, status_code=status)

        return FetchResult(
            url=url,
            status_code=status,
            body=response.content,
            encoding=self._encoding(response),
        )

    @staticmethod
    def _encoding(response: requests.Response) -> Optional[str]:
        """
        Charset declared in the Content-Type header, else detected from the body.

        requests falls back to ISO-8859-1 for text/html without a charset,
        which garbles UTF-8 pages that declare their charset only in <meta>.
        """
        content_type = response.headers.get("Content-Type", "")
        if "charset" in content_type.lower():
            return response.encoding
        return response.apparent_encoding

