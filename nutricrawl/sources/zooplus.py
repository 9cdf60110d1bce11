"""
Zooplus Source

HTML catalog paginated with ?seite=N. Product links live under /shop/
and end in a numeric article id.
"""

import re

from .base import HtmlCatalogSource

_PRODUCT_PATH = re.compile(r'/\d+/?$')


class ZooplusSource(HtmlCatalogSource):
    """zooplus.de dog food catalog."""

    PAGE_PARAM = "seite"
    LINK_SELECTOR = 'a[href*="/shop/"]'

    NAME_SELECTORS = (
        'h1[itemprop="name"]',
        '.z-product__name',
        '.product__title',
        'h1',
    )
    BRAND_SELECTORS = (
        '.z-product__brand',
        '.product__brand',
        '[itemprop="brand"] [itemprop="name"]',
        '[data-zta="product-brand"]',
    )
    IMAGE_SELECTORS = (
        'meta[property="og:image"]',
        '.z-product__image img',
        '.product__image img',
        '[itemprop="image"]',
        'img[data-zta="productImage"]',
    )
    NUTRITION_SELECTORS = (
        '.z-tabs__content',
        '.product-info__content',
        '.z-accordion__content',
        '[data-zta*="ingredients"]',
        '[data-zta*="nutrition"]',
        '[class*="ProductAttribute"]',
        '[class*="product-info"]',
        '[class*="description"]',
        '.product-description',
        '.tab-panel',
        '[role="tabpanel"]',
    )

    def is_product_link(self, href: str) -> bool:
        return "/shop/" in href and _PRODUCT_PATH.search(href) is not None

