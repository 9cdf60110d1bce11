"""
Identifier Extractor

Recovers the trade identifier (EAN/GTIN) that keys a product record.

Strategies, in order:
1. Regular expressions over the raw page body for common identifier
   field names (gtin, ean, articleNumber, data-ean, data-gtin, sku,
   productID), each requiring an 8-14 digit capture
2. JSON-LD structured data blocks (gtin13, gtin, numeric sku/productID)
"""

import re
from typing import Iterable, List, Pattern, Sequence

from ..common.errors import IdentifierNotFound
from .parsers.structured_data import StructuredDataParser
from .strategies import Strategy, first_match

# Digits must not continue past the capture, so 15+ digit runs never match
_DIGITS = r'(\d{8,14})(?!\d)'
# JSON values may be strings or bare numbers
_JSON_VALUE = r'"?' + _DIGITS + r'(?=["\s,}\]])'

DEFAULT_PATTERNS: List[Pattern] = [
    re.compile(r'"ean"\s*:\s*' + _JSON_VALUE, re.IGNORECASE),
    re.compile(r'"gtin\d*"\s*:\s*' + _JSON_VALUE, re.IGNORECASE),
    re.compile(r'"articleNumber"\s*:\s*' + _JSON_VALUE, re.IGNORECASE),
    re.compile(r'(?<![A-Za-z])(?:EAN|GTIN)(?:-?1[34])?[:\s]*(?<!\d)' + _DIGITS, re.IGNORECASE),
    re.compile(r'data-ean\s*=\s*"' + _DIGITS + r'"', re.IGNORECASE),
    re.compile(r'data-gtin\s*=\s*"' + _DIGITS + r'"', re.IGNORECASE),
    re.compile(r'"sku"\s*:\s*' + _JSON_VALUE, re.IGNORECASE),
    re.compile(r'"productID"\s*:\s*' + _JSON_VALUE, re.IGNORECASE),
]


class IdentifierExtractor:
    """
    Extracts an EAN/GTIN from a raw document.

    Usage:
        extractor = IdentifierExtractor()
        ean = extractor.extract(html, doc.json_ld_blocks())
    """

    def __init__(
        self,
        patterns: Sequence[Pattern] = DEFAULT_PATTERNS,
        structured_parser: StructuredDataParser | None = None,
    ):
        self.patterns = list(patterns)
        self.structured_parser = structured_parser or StructuredDataParser()
        self.strategies = [
            Strategy("raw_patterns", self._from_raw_text),
            Strategy("json_ld", self._from_json_ld),
        ]

    def find(self, raw_text: str, json_ld_blocks: Iterable[str] = ()) -> str:
        """Return the identifier, or '' when none is found."""
        _, identifier = first_match(
            self.strategies, raw_text or "", list(json_ld_blocks), default=""
        )
        return identifier

    def extract(self, raw_text: str, json_ld_blocks: Iterable[str] = (), url: str = "") -> str:
        """
        Return the identifier.

        Raises:
            IdentifierNotFound: When no strategy matches
        """
        identifier = self.find(raw_text, json_ld_blocks)
        if not identifier:
            raise IdentifierNotFound("No EAN/GTIN found", url=url)
        return identifier

    def _from_raw_text(self, raw_text: str, json_ld_blocks: List[str]) -> str:
        for pattern in self.patterns:
            match = pattern.search(raw_text)
            if match:
                return match.group(1)
        return ""

    def _from_json_ld(self, raw_text: str, json_ld_blocks: List[str]) -> str:
        return self.structured_parser.extract_identifier(json_ld_blocks)
