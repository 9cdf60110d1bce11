"""
Specialized parsers for product data extraction.

Each parser handles a specific document shape:
- HtmlDocument: HTML page wrapper (CSS selectors, JSON-LD payloads)
- JsonDocument: decoded JSON body with dotted-path lookup
- StructuredDataParser: JSON-LD structured data (schema.org)
"""

from .document import HtmlDocument, JsonDocument
from .structured_data import StructuredDataParser

__all__ = [
    'HtmlDocument',
    'JsonDocument',
    'StructuredDataParser',
]
