"""
Product extraction modules.

Modules:
    identifier - IdentifierExtractor for EAN/GTIN recovery
    nutrients - NutrientExtractor for analytical constituents and additives
    fields - FieldExtractor for brand, name and image
    brand_matcher - Match product names to known brand names
    strategies - Ordered "first match wins" fallback combinator
    parsers - Document adapters and JSON-LD parsing
"""

from .brand_matcher import BrandMatcher
from .fields import FieldExtractor
from .identifier import IdentifierExtractor
from .nutrients import NutrientExtractor, NutrientResult
from .parsers import HtmlDocument, JsonDocument, StructuredDataParser
from .strategies import Strategy, first_match

__all__ = [
    'IdentifierExtractor',
    'NutrientExtractor',
    'NutrientResult',
    'FieldExtractor',
    'BrandMatcher',
    'Strategy',
    'first_match',
    'HtmlDocument',
    'JsonDocument',
    'StructuredDataParser',
]
