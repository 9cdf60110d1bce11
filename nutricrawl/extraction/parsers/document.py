"""
Document Parser Adapters

Wrap an HTML parse tree or a decoded JSON body so extraction code can
query by selector or dotted path without depending on the parsing library.
"""

import json
from typing import Any, Iterator, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ...common.errors import ParseError
from ...common.text_utils import clean_text


class HtmlDocument:
    """
    HTML page wrapper.

    Usage:
        doc = HtmlDocument(html, base_url="https://www.zooplus.de/shop/x/123")
        title = doc.text_of("h1")
        image = doc.attr_of('meta[property="og:image"]', "content")
    """

    def __init__(self, text: str, base_url: str = ""):
        self.raw = text or ""
        self.base_url = base_url
        self.soup = BeautifulSoup(self.raw, "lxml")

    def select(self, css: str) -> list:
        """Return all elements matching a CSS selector."""
        return self.soup.select(css)

    def select_one(self, css: str):
        return self.soup.select_one(css)

    def text_of(self, css: str) -> str:
        """Return cleaned text of the first matching element, or ''."""
        element = self.soup.select_one(css)
        if element is None:
            return ""
        return clean_text(element.get_text(" "))

    def texts(self, css: str) -> Iterator[str]:
        """Yield the text of every matching element."""
        for element in self.soup.select(css):
            yield element.get_text(" ")

    def attr_of(self, css: str, attr: str) -> str:
        """Return an attribute of the first matching element that has it."""
        for element in self.soup.select(css):
            value = element.get(attr)
            if isinstance(value, list):
                value = " ".join(value)
            if value and value.strip():
                return value.strip()
        return ""

    def links(self, css: str = "a[href]") -> List[str]:
        """Return raw href values of matching anchors, in document order."""
        hrefs = []
        for element in self.soup.select(css):
            href = element.get("href")
            if href:
                hrefs.append(href.strip())
        return hrefs

    def json_ld_blocks(self) -> List[str]:
        """Return raw payloads of all <script type="application/ld+json"> tags."""
        blocks = []
        for script in self.soup.find_all("script", type="application/ld+json"):
            payload = script.string or script.get_text()
            if payload and payload.strip():
                blocks.append(payload)
        return blocks

    def absolute(self, url: str) -> str:
        """Rebase a relative URL onto the document's base URL."""
        if not url:
            return ""
        if url.startswith("//"):
            return "https:" + url
        return urljoin(self.base_url, url)


class JsonDocument:
    """
    Decoded JSON body with dotted-path lookup.

    Usage:
        doc = JsonDocument.from_text(body)
        products = doc.get("products", [])
        protein = doc.get("product.nutriments.proteins_100g")
    """

    def __init__(self, data: Any):
        self.data = data

    @classmethod
    def from_text(cls, text: str, url: str = "") -> "JsonDocument":
        """Decode a JSON body, raising ParseError when it is not JSON."""
        try:
            return cls(json.loads(text))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            raise ParseError(f"Invalid JSON document: {e}", url=url, cause=e) from e

    def get(self, path: str, default: Optional[Any] = None) -> Any:
        """Resolve a dotted path through nested dicts; list indices are allowed."""
        current = self.data
        for part in path.split("."):
            if isinstance(current, dict):
                if part not in current:
                    return default
                current = current[part]
            elif isinstance(current, list) and part.isdigit():
                index = int(part)
                if index >= len(current):
                    return default
                current = current[index]
            else:
                return default
        return current
