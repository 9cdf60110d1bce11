"""
Source Adapters - shared contract

Every source translates one origin's document shape into ProductRecords:

    fetch_catalog(page, page_size) -> list[ProductRef]
    fetch_detail(ref) -> ProductRecord | None

Per-reference failures are raised as CrawlError subclasses; the
orchestrator skips the reference and moves on.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from ..common.errors import (
    ConfigurationError,
    FetchError,
    IncompleteProfile,
    NutrientBlockNotFound,
    ParseError,
)
from ..common.http_client import HttpClient
from ..extraction import (
    BrandMatcher,
    FieldExtractor,
    HtmlDocument,
    IdentifierExtractor,
    NutrientExtractor,
    StructuredDataParser,
)
from ..models import ProductRecord, ProductRef
from ..validation.completeness import is_complete, missing_nutrients

logger = logging.getLogger(__name__)


class Source(ABC):
    """Base class for all product sources."""

    DEFAULT_ACCEPT_LANGUAGE = "de-DE,de;q=0.9"
    # False when fetch_detail is served from catalog data without a request
    requires_detail_fetch = True

    def __init__(
        self,
        name: str,
        base_url: str,
        user_agent: str,
        categories: Sequence[str],
        accept_language: Optional[str] = None,
        timeout: float = 30.0,
        detail_timeout: Optional[float] = None,
        client: Optional[HttpClient] = None,
    ):
        if not base_url:
            raise ConfigurationError(f"{name}: base_url is required")
        if not categories:
            raise ConfigurationError(f"{name}: at least one category is required")

        self.name = name
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.categories = list(categories)
        self.timeout = timeout
        self.detail_timeout = detail_timeout or timeout
        self.client = client or HttpClient(
            user_agent=user_agent,
            accept_language=accept_language or self.DEFAULT_ACCEPT_LANGUAGE,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, name: str, settings: Dict[str, Any], **kwargs) -> "Source":
        """Build a source from its config/sources.yaml entry."""
        return cls(
            name=name,
            base_url=settings.get("base_url", ""),
            user_agent=settings.get("user_agent", ""),
            categories=settings.get("categories", []),
            accept_language=settings.get("accept_language"),
            timeout=float(settings.get("timeout", 30)),
            detail_timeout=settings.get("detail_timeout"),
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def close(self) -> None:
        self.client.close()

    @abstractmethod
    def fetch_category(self, category: str, page: int, page_size: int) -> List[ProductRef]:
        """
        Discover product references in one sub-category.

        Raises:
            FetchError: When the category page cannot be fetched
            ParseError: When the response cannot be interpreted
        """

    @abstractmethod
    def fetch_detail(self, ref: ProductRef) -> Optional[ProductRecord]:
        """
        Fetch and extract one product.

        Returns:
            A complete ProductRecord, or None when not found

        Raises:
            CrawlError subclasses for per-reference failures
        """

    def fetch_catalog(self, page: int, page_size: int) -> List[ProductRef]:
        """
        Aggregate references across all sub-categories.

        A failing category is logged and skipped; the others still contribute.
        """
        refs: List[ProductRef] = []
        for category in self.categories:
            try:
                refs.extend(self.fetch_category(category, page, page_size))
            except (FetchError, ParseError) as e:
                logger.warning("%s: catalog fetch failed for %s: %s", self.name, category, e)
        return refs

    def search_by_identifier(self, identifier: str) -> Optional[ProductRecord]:
        """Direct EAN lookup. Sources without a lookup endpoint return None."""
        return None

    def probe(self) -> None:
        """
        Check that the origin is reachable.

        Raises:
            ConfigurationError: If the base URL cannot be fetched
        """
        try:
            self.client.get(self.base_url + "/", timeout=self.timeout)
        except FetchError as e:
            raise ConfigurationError(f"{self.name}: origin unreachable ({e})") from e


class HtmlCatalogSource(Source):
    """
    Shared behavior for HTML-scraped retailer catalogs.

    Subclasses declare their pagination parameter, link selector and
    link-shape rule, and the selector candidates for each field.
    """

    PAGE_PARAM = "page"
    LINK_SELECTOR = "a[href]"
    NAME_SELECTORS: Sequence[str] = ("h1",)
    BRAND_SELECTORS: Sequence[str] = ('[itemprop="brand"] [itemprop="name"]',)
    IMAGE_SELECTORS: Sequence[str] = ('meta[property="og:image"]',)
    NUTRITION_SELECTORS: Sequence[str] = ('[role="tabpanel"]',)

    def __init__(self, *args, brand_matcher: Optional[BrandMatcher] = None, **kwargs):
        super().__init__(*args, **kwargs)
        structured = StructuredDataParser()
        self.structured_parser = structured
        self.identifier_extractor = IdentifierExtractor(structured_parser=structured)
        self.nutrient_extractor = NutrientExtractor()
        self.field_extractor = FieldExtractor(brand_matcher=brand_matcher, structured_parser=structured)

    # ── Catalog ───────────────────────────────────────────────────────────────

    def is_product_link(self, href: str) -> bool:
        """URL-shape rule for product detail links."""
        raise NotImplementedError

    def category_share(self, page_size: int) -> int:
        """Number of links to keep per category."""
        return max(1, page_size // len(self.categories))

    def fetch_category(self, category: str, page: int, page_size: int) -> List[ProductRef]:
        url = urljoin(self.base_url + "/", category.lstrip("/"))
        result = self.client.get(url, params={self.PAGE_PARAM: page}, timeout=self.timeout)
        doc = HtmlDocument(result.text, base_url=url)

        links = self.discover_links(doc)
        share = self.category_share(page_size)
        logger.info("%s: found %d product links in %s (keeping %d)",
                    self.name, len(links), category, min(share, len(links)))
        return [ProductRef(url=link, source_name=self.name, category=category) for link in links[:share]]

    def discover_links(self, doc: HtmlDocument) -> List[str]:
        """Absolute product links in document order, deduplicated."""
        seen = set()
        links = []
        for href in doc.links(self.LINK_SELECTOR):
            path = href.split("#", 1)[0].split("?", 1)[0]
            if not path or not self.is_product_link(path):
                continue
            try:
                absolute = doc.absolute(path)
                if urlparse(absolute).netloc != urlparse(self.base_url).netloc:
                    continue
            except ValueError:
                logger.debug("%s: skipping malformed link %r", self.name, href)
                continue
            if absolute not in seen:
                seen.add(absolute)
                links.append(absolute)
        return links

    # ── Detail ────────────────────────────────────────────────────────────────

    def fetch_detail(self, ref: ProductRef) -> Optional[ProductRecord]:
        result = self.client.get(ref.url, timeout=self.detail_timeout)
        return self.parse_detail(result.text, ref.url)

    def parse_detail(self, html: str, url: str) -> ProductRecord:
        """
        Run identifier, field and nutrient extraction on a detail page.

        Raises:
            ParseError: Empty document
            IdentifierNotFound: No EAN/GTIN on the page
            NutrientBlockNotFound: No analytical constituents block
            IncompleteProfile: Protein, fat, fiber or ash missing
        """
        if not html or not html.strip():
            raise ParseError("Empty document", url=url)

        doc = HtmlDocument(html, base_url=url)
        blocks = doc.json_ld_blocks()

        identifier = self.identifier_extractor.extract(html, blocks, url=url)

        product_ld = self.structured_parser.parse(blocks)
        name = self.field_extractor.name(doc, product_ld, self.NAME_SELECTORS)
        brand = self.field_extractor.brand(doc, product_ld, name, self.BRAND_SELECTORS)
        image_url = self.field_extractor.image(doc, product_ld, self.IMAGE_SELECTORS)

        block = self.nutrient_extractor.locate_block(doc, self.NUTRITION_SELECTORS)
        if not block:
            raise NutrientBlockNotFound(f"No analytical constituents for {name}", url=url)

        nutrients = self.nutrient_extractor.extract(block)

        record = ProductRecord(
            identifier=identifier,
            brand=brand,
            name=name,
            nutrients=nutrients.profile,
            additives=nutrients.additives,
            image_url=image_url,
            source_name=self.name,
            source_url=url,
        )

        if not is_complete(record):
            raise IncompleteProfile(
                f"Missing {', '.join(missing_nutrients(record))}", url=url
            )

        return record

