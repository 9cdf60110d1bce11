"""
Brand Matcher

Matches product names to known pet-food brand names using two strategies:
1. Name prefix matching (e.g., "Royal Canin Maxi Adult 15kg")
2. Substring matching anywhere in the name (e.g., "Trockenfutter von Bosch")

The known brands list is loaded from config/known_brands.yaml.
"""

import re
from typing import Optional, Set

from ..common.config_loader import get_brands_lowercase_map, load_known_brands


class BrandMatcher:
    """
    Matches product names to known brand names.

    Usage:
        matcher = BrandMatcher()
        brand = matcher.match(
            name="Royal Canin Maxi Adult 15kg",
            structured_brand="",  # From JSON-LD
        )
        # Returns: "Royal Canin"
    """

    def __init__(self, brands: Optional[Set[str]] = None):
        """
        Initialize the brand matcher.

        Args:
            brands: Optional set of known brands. If None, loads from config.
        """
        if brands is None:
            self.known_brands = load_known_brands()
        else:
            self.known_brands = brands

        # Create lowercase lookup for case-insensitive matching
        self.brands_lower = get_brands_lowercase_map(self.known_brands)

        # Longest brands first so "Royal Canin Veterinary" beats "Royal Canin"
        self._by_length = sorted(self.brands_lower, key=len, reverse=True)

    def match(self, name: str, structured_brand: str = "") -> str:
        """
        Match a product to a brand.

        Priority order:
        1. Structured brand (JSON-LD or API field), canonicalized when known
        2. Name prefix matching
        3. Substring matching anywhere in the name

        Returns:
            Matched brand name (canonical capitalization) or empty string
        """
        stripped = structured_brand.strip() if structured_brand else ""
        if stripped:
            return self.get_canonical_name(stripped)

        return self.match_from_title(name) or self.match_in_text(name)

    def match_from_title(self, title: str) -> str:
        """
        Extract brand from product name using prefix matching.

        Checks multi-word brands first (4 words down to 1).

        Example:
            >>> matcher.match_from_title("Wolf of Wilderness Adult 12kg")
            'Wolf of Wilderness'
        """
        if not title:
            return ""

        words = title.split()

        for n in [4, 3, 2, 1]:
            if len(words) >= n:
                candidate = ' '.join(words[:n]).lower()
                if candidate in self.brands_lower:
                    return self.brands_lower[candidate]

        return ""

    def match_in_text(self, text: str) -> str:
        """
        Find a known brand anywhere in the text (whole-word, case-insensitive).

        Example:
            >>> matcher.match_in_text("Trockenfutter von Bosch Adult")
            'Bosch'
        """
        if not text:
            return ""

        lowered = text.lower()
        for brand_lower in self._by_length:
            if re.search(r'(?<!\w)' + re.escape(brand_lower) + r'(?!\w)', lowered):
                return self.brands_lower[brand_lower]

        return ""

    def get_canonical_name(self, brand: str) -> str:
        """
        Get the canonical capitalization of a brand name.

        Example:
            >>> matcher.get_canonical_name("royal canin")
            'Royal Canin'
        """
        return self.brands_lower.get(brand.lower(), brand)
