"""
Fressnapf Source

HTML catalog paginated with ?currentPage=N. Product links are relative
and contain a /p/ segment.
"""

import math

from .base import HtmlCatalogSource


class FressnapfSource(HtmlCatalogSource):
    """fressnapf.de dog food catalog."""

    PAGE_PARAM = "currentPage"
    LINK_SELECTOR = 'a[href*="/p/"]'

    NAME_SELECTORS = (
        'h1',
        '.product-stage__title',
        '[itemprop="name"]',
    )
    BRAND_SELECTORS = (
        '[itemprop="brand"] [itemprop="name"]',
        '[itemprop="brand"]',
        '.product-stage__brand',
    )
    IMAGE_SELECTORS = (
        'img[itemprop="image"]',
        '.product-stage__image img',
        '[class*="product-image"] img',
        'meta[property="og:image"]',
    )
    NUTRITION_SELECTORS = (
        '.product-description__content',
        '.product-info__content',
        '.tab-content',
        '.accordion__content',
        '.tab-pane',
        '[class*="detail"]',
        '[class*="ingredient"]',
        '[class*="nutrition"]',
        '[data-testid*="ingredients"]',
        '[data-testid*="nutrition"]',
    )

    def is_product_link(self, href: str) -> bool:
        if "/p/" not in href:
            return False
        # Product pages are linked relatively
        return not href.startswith(("http://", "https://", "//"))

    def category_share(self, page_size: int) -> int:
        return max(1, math.ceil(page_size / len(self.categories)))
