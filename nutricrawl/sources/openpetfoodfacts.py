"""
OpenPetFoodFacts Source

Structured JSON API. Catalog queries return fully populated products, so
records are parsed during catalog discovery and handed back from cache by
fetch_detail. Direct EAN lookup is supported.

Nutriments are keyed inconsistently across contributors
(crude-protein_100g, proteins_100g, crude-fibre, water, ...); every known
variant is tried before falling back to prose parsing of the ingredient
texts.
"""

import logging
import threading
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..common.errors import ParseError
from ..common.text_utils import clean_text, is_numeric_identifier, parse_decimal
from ..extraction import BrandMatcher, JsonDocument, NutrientExtractor
from ..models import NutrientProfile, ProductRecord, ProductRef
from ..validation.completeness import is_complete
from .base import Source

logger = logging.getLogger(__name__)

CATALOG_FIELDS = ",".join([
    "code",
    "product_name",
    "brands",
    "nutriments",
    "image_url",
    "image_front_url",
    "image_small_url",
    "ingredients_text",
    "ingredients_text_en",
    "ingredients_text_de",
    "ingredients_text_fr",
    "ingredients_text_es",
    "ingredients_text_it",
    "categories_tags",
])

# Contributor key variants per nutrient, most specific first
NUTRIMENT_KEYS: Dict[str, List[str]] = {
    "protein": ["crude-protein", "protein", "proteins"],
    "fat": ["crude-fat", "fat", "fats", "total-fat"],
    "fiber": ["crude-fibre", "crude-fiber", "fiber", "fibre", "fibers"],
    "ash": ["crude-ash", "ash", "minerals"],
    "moisture": ["moisture", "water", "humidity"],
    "carbohydrates": ["carbohydrates"],
    "energy": ["energy-kcal"],
}
_KEY_SUFFIXES = ("_100g", "", "_value", "_g")

INGREDIENT_TEXT_KEYS = [
    "ingredients_text",
    "ingredients_text_en",
    "ingredients_text_de",
    "ingredients_text_fr",
    "ingredients_text_es",
    "ingredients_text_it",
]
IMAGE_KEYS = ["image_url", "image_front_url", "image_small_url"]

_PROSE_FALLBACK_FIELDS = ("protein", "fat", "fiber", "ash", "moisture")


class OpenPetFoodFactsSource(Source):
    """OpenPetFoodFacts category search and product lookup."""

    DEFAULT_ACCEPT_LANGUAGE = "en;q=0.9,de;q=0.8"
    requires_detail_fetch = False

    def __init__(
        self,
        *args,
        lookup_timeout: Optional[float] = None,
        brand_matcher: Optional[BrandMatcher] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.brand_matcher = brand_matcher or BrandMatcher()
        self.lookup_timeout = lookup_timeout or self.timeout
        self.nutrient_extractor = NutrientExtractor()
        self._records: Dict[str, ProductRecord] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, name: str, settings: Dict[str, Any], **kwargs) -> "OpenPetFoodFactsSource":
        lookup_timeout = settings.get("lookup_timeout")
        return super().from_settings(
            name,
            settings,
            lookup_timeout=float(lookup_timeout) if lookup_timeout else None,
            **kwargs,
        )

    # ── Catalog ───────────────────────────────────────────────────────────────

    def category_url(self, category: str) -> str:
        return f"{self.base_url}/category/{quote(category, safe=':')}.json"

    def product_url(self, code: str) -> str:
        return f"{self.base_url}/product/{code}"

    def fetch_category(self, category: str, page: int, page_size: int) -> List[ProductRef]:
        url = self.category_url(category)
        result = self.client.get(
            url,
            params={"page": page, "page_size": page_size, "fields": CATALOG_FIELDS},
            timeout=self.timeout,
        )
        doc = JsonDocument.from_text(result.text, url=url)
        products = doc.get("products", [])
        if not isinstance(products, list):
            raise ParseError("Expected a products list", url=url)

        refs = []
        dropped = 0
        for product in products:
            record = self.parse_product(product)
            if record is None or not is_complete(record):
                dropped += 1
                continue
            ref = ProductRef(url=record.source_url, source_name=self.name, category=category)
            with self._lock:
                self._records[ref.url] = record
            refs.append(ref)

        logger.info("%s: %d complete products in %s (%d dropped)",
                    self.name, len(refs), category, dropped)
        return refs

    def fetch_detail(self, ref: ProductRef) -> Optional[ProductRecord]:
        with self._lock:
            record = self._records.pop(ref.url, None)
        if record is not None:
            return record

        # Ref not produced by this adapter's catalog: fall back to a lookup
        code = ref.url.rstrip("/").rsplit("/", 1)[-1]
        if not is_numeric_identifier(code):
            return None
        record = self.search_by_identifier(code)
        if record is None or not is_complete(record):
            return None
        return record

    # ── Lookup ────────────────────────────────────────────────────────────────

    def search_by_identifier(self, identifier: str) -> Optional[ProductRecord]:
        """
        Look up one product by EAN.

        Returns:
            Parsed ProductRecord (not yet checked for completeness),
            or None when the API reports the product as unknown

        Raises:
            FetchError: Transport failure or non-2xx status
            ParseError: Body is not JSON
        """
        url = f"{self.base_url}/api/v2/product/{quote(identifier.strip())}.json"
        result = self.client.get(url, timeout=self.lookup_timeout)
        doc = JsonDocument.from_text(result.text, url=url)

        if doc.get("status") != 1 or not isinstance(doc.get("product"), dict):
            logger.info("%s: product %s not found", self.name, identifier)
            return None

        product = dict(doc.get("product"))
        if not product.get("code"):
            product["code"] = doc.get("code") or identifier
        return self.parse_product(product)

    # ── Parsing ───────────────────────────────────────────────────────────────

    def parse_product(self, product: Dict[str, Any]) -> Optional[ProductRecord]:
        """
        Convert one API product object into a ProductRecord.

        Returns None when the product has no usable 8-14 digit code.
        """
        if not isinstance(product, dict):
            return None
        code = clean_text(product.get("code"))
        if not is_numeric_identifier(code):
            return None

        profile = self.extract_nutrients(product)
        ingredients = product.get("ingredients_text") or ""

        name = clean_text(product.get("product_name"))
        brand = self.brand_matcher.match(name, structured_brand=self._first_brand(product.get("brands")))

        categories = product.get("categories_tags") or []
        return ProductRecord(
            identifier=code,
            brand=brand,
            name=name,
            nutrients=profile,
            additives=self.nutrient_extractor.extract_additive_list(ingredients),
            image_url=self._image(product),
            source_name=self.name,
            source_url=self.product_url(code),
            categories=[c for c in categories if isinstance(c, str)],
        )

    def extract_nutrients(self, product: Dict[str, Any]) -> NutrientProfile:
        """
        Explicit nutriment fields first; ingredient prose only for gaps.
        """
        nutriments = product.get("nutriments") or {}
        values = {
            name: self.extract_nutriment(nutriments, keys)
            for name, keys in NUTRIMENT_KEYS.items()
        }

        if any(values[name] <= 0 for name in _PROSE_FALLBACK_FIELDS):
            for key in INGREDIENT_TEXT_KEYS:
                text = product.get(key)
                if not text:
                    continue
                parsed = self.nutrient_extractor.extract_from_ingredients(text)
                for name in _PROSE_FALLBACK_FIELDS:
                    if values[name] <= 0:
                        values[name] = getattr(parsed, name)
                if all(values[name] > 0 for name in _PROSE_FALLBACK_FIELDS):
                    break

        return NutrientProfile(**values)

    @staticmethod
    def extract_nutriment(nutriments: Dict[str, Any], keys: List[str]) -> float:
        """First positive value among the key variants, else 0.0."""
        if not isinstance(nutriments, dict):
            return 0.0
        for key in keys:
            for suffix in _KEY_SUFFIXES:
                value = parse_decimal(nutriments.get(key + suffix))
                if value > 0:
                    return value
        return 0.0

    @staticmethod
    def _first_brand(brands: Any) -> str:
        if isinstance(brands, list):
            brands = ",".join(str(b) for b in brands)
        return clean_text((brands or "").split(",")[0])

    @staticmethod
    def _image(product: Dict[str, Any]) -> Optional[str]:
        for key in IMAGE_KEYS:
            value = clean_text(product.get(key))
            if value:
                return value
        return None
