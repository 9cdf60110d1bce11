"""
Descriptive Field Extractors

Brand, name and image follow the same ordered fallback as the identifier:
JSON-LD first, then CSS selector candidates, then (brand only) matching
the recovered name against the known brands list.
"""

from typing import Any, Dict, Optional, Sequence

from ..common.text_utils import clean_text
from ..models import UNKNOWN
from .brand_matcher import BrandMatcher
from .parsers.document import HtmlDocument
from .parsers.structured_data import StructuredDataParser
from .strategies import Strategy, first_match


class FieldExtractor:
    """
    Extracts brand, name and image URL from a product page.

    Usage:
        fields = FieldExtractor(brand_matcher)
        name = fields.name(doc, product_ld, ["h1", ".product__title"])
        brand = fields.brand(doc, product_ld, name, ['[itemprop="brand"]'])
        image = fields.image(doc, product_ld, ['meta[property="og:image"]'])
    """

    def __init__(
        self,
        brand_matcher: Optional[BrandMatcher] = None,
        structured_parser: Optional[StructuredDataParser] = None,
    ):
        self.brand_matcher = brand_matcher or BrandMatcher()
        self.structured_parser = structured_parser or StructuredDataParser()

    def name(self, doc: HtmlDocument, structured: Dict[str, Any], selectors: Sequence[str]) -> str:
        """Product name, or "Unknown"."""
        strategies = [
            Strategy("json_ld", lambda: self.structured_parser.extract_name(structured)),
            Strategy("selectors", lambda: self._first_text(doc, selectors)),
        ]
        _, value = first_match(strategies, default=UNKNOWN)
        return value

    def brand(
        self,
        doc: HtmlDocument,
        structured: Dict[str, Any],
        name: str,
        selectors: Sequence[str],
    ) -> str:
        """Brand name, or "Unknown"."""
        known_name = name if name and name != UNKNOWN else ""
        strategies = [
            Strategy("json_ld", lambda: self.structured_parser.extract_brand(structured)),
            Strategy("selectors", lambda: self._first_text(doc, selectors)),
            Strategy("known_brands", lambda: self.brand_matcher.match(known_name)),
        ]
        _, value = first_match(strategies, default=UNKNOWN)
        return value

    def image(
        self,
        doc: HtmlDocument,
        structured: Dict[str, Any],
        selectors: Sequence[str],
    ) -> Optional[str]:
        """
        Absolute image URL, or None.

        Selectors are tried for content, src and data-src attributes.
        Relative URLs are rebased onto the page origin.
        """
        strategies = [
            Strategy("json_ld", lambda: self.structured_parser.extract_image(structured)),
            Strategy("selectors", lambda: self._first_image_attr(doc, selectors)),
        ]
        _, value = first_match(strategies, default=None)
        if not value:
            return None
        return doc.absolute(value)

    @staticmethod
    def _first_text(doc: HtmlDocument, selectors: Sequence[str]) -> str:
        for selector in selectors:
            text = clean_text(doc.text_of(selector))
            if text:
                return text
        return ""

    @staticmethod
    def _first_image_attr(doc: HtmlDocument, selectors: Sequence[str]) -> str:
        for selector in selectors:
            for attr in ("content", "src", "data-src"):
                value = doc.attr_of(selector, attr)
                if value:
                    return value
        return ""
