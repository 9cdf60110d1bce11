"""
Structured Data Parser

Extracts product information from JSON-LD structured data (schema.org).
This is the highest priority source for descriptive fields as it's
explicitly structured by the shop for search engines.

Supported schema types: Product, IndividualProduct, ProductModel
"""

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List

from ...common.text_utils import clean_text, is_numeric_identifier

logger = logging.getLogger(__name__)


class StructuredDataParser:
    """
    Parses JSON-LD payloads collected from a page.

    Malformed blocks are skipped, never raised, so one broken script tag
    does not hide the others.

    Usage:
        parser = StructuredDataParser()
        product = parser.parse(doc.json_ld_blocks())
        brand = parser.extract_brand(product)
        gtin = parser.extract_identifier(doc.json_ld_blocks())
    """

    SUPPORTED_TYPES = ['Product', 'IndividualProduct', 'ProductModel']
    IDENTIFIER_FIELDS = ['gtin13', 'gtin', 'gtin14', 'gtin12', 'gtin8']
    NUMERIC_ONLY_FIELDS = ['sku', 'productID']

    def decode_blocks(self, blocks: Iterable[str]) -> List[Any]:
        """Decode each payload, dropping the ones that are not valid JSON."""
        decoded = []
        for block in blocks:
            try:
                decoded.append(json.loads(block))
            except (json.JSONDecodeError, TypeError, ValueError):
                logger.debug("Skipping malformed JSON-LD block")
                continue
        return decoded

    def iter_nodes(self, blocks: Iterable[str]) -> Iterator[Dict[str, Any]]:
        """Yield every dict node in the blocks, flattening lists and @graph."""
        stack = list(reversed(self.decode_blocks(blocks)))
        while stack:
            item = stack.pop()
            if isinstance(item, list):
                stack.extend(reversed(item))
            elif isinstance(item, dict):
                yield item
                graph = item.get('@graph')
                if isinstance(graph, list):
                    stack.extend(reversed(graph))

    def parse(self, blocks: Iterable[str]) -> Dict[str, Any]:
        """
        Return the first Product node.

        Args:
            blocks: Raw JSON-LD payloads

        Returns:
            Product node as dictionary, or empty dict if not found
        """
        for node in self.iter_nodes(blocks):
            node_type = node.get('@type')
            types = node_type if isinstance(node_type, list) else [node_type]
            if any(t in self.SUPPORTED_TYPES for t in types):
                return node
        return {}

    def extract_identifier(self, blocks: Iterable[str]) -> str:
        """
        Find a GTIN in any node.

        gtin fields are accepted as-is when 8-14 digits; sku/productID only
        when purely numeric and 8-14 digits long.
        """
        for node in self.iter_nodes(blocks):
            for key in self.IDENTIFIER_FIELDS + self.NUMERIC_ONLY_FIELDS:
                value = node.get(key)
                if value is None:
                    continue
                value = str(value).strip()
                if is_numeric_identifier(value):
                    return value
        return ""

    def extract_brand(self, data: Dict[str, Any]) -> str:
        """
        Extract brand name from structured data.

        Args:
            data: Parsed JSON-LD product node

        Returns:
            Brand name or empty string
        """
        if not data:
            return ""

        brand_data = data.get("brand")
        if isinstance(brand_data, list) and brand_data:
            brand_data = brand_data[0]
        if isinstance(brand_data, dict):
            return clean_text(brand_data.get("name", ""))
        elif isinstance(brand_data, str):
            return clean_text(brand_data)

        return ""

    def extract_name(self, data: Dict[str, Any]) -> str:
        if not data:
            return ""
        name = data.get("name")
        return clean_text(name) if isinstance(name, str) else ""

    def extract_image(self, data: Dict[str, Any]) -> str:
        """
        Extract main image URL from structured data.

        Lists resolve to their first element, ImageObject dicts to their url.
        """
        if not data:
            return ""

        image = data.get("image")
        if isinstance(image, list):
            image = image[0] if image else ""
        if isinstance(image, dict):
            image = image.get("url") or image.get("contentUrl") or ""
        if isinstance(image, str):
            return image.strip()

        return ""
