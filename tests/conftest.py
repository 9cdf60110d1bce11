"""Shared test fixtures."""

import json
from unittest.mock import MagicMock

import pytest

from nutricrawl.common.http_client import FetchResult, HttpClient
from nutricrawl.extraction.brand_matcher import BrandMatcher
from nutricrawl.models import NutrientProfile, ProductRecord


ZOOPLUS_DETAIL_HTML = """<!DOCTYPE html>
<html lang="de">
<head>
  <title>Bosch Adult Lamm &amp; Reis | zooplus</title>
  <meta property="og:image" content="https://media.zooplus.com/bilder/4/400/bosch_adult_lamm.jpg">
  <script type="application/ld+json">
  {"@context": "https://schema.org", "@type": "Product",
   "name": "Bosch Adult Lamm & Reis",
   "gtin13": "4015598013543",
   "brand": {"@type": "Brand", "name": "Bosch"},
   "image": "https://media.zooplus.com/bilder/4/400/bosch_adult_lamm.jpg"}
  </script>
</head>
<body>
  <h1>Bosch Adult Lamm &amp; Reis 15 kg</h1>
  <div class="z-tabs__content">Zusammensetzung: Lammmehl (20 %), Reis (20 %), Mais.</div>
  <div class="z-tabs__content">Analytische Bestandteile: Protein 23,0 %, Fettgehalt 12,0 %,
    Rohfaser 2,5 %, Rohasche 6,5 %, Feuchtigkeit 10,0 %.
    Zusatzstoffe je kg: Vitamin A 15000 IE, Vitamin D3 1500 IE.</div>
</body>
</html>
"""

FRESSNAPF_DETAIL_HTML = """<!DOCTYPE html>
<html lang="de">
<head>
  <meta property="og:image" content="https://media.os.fressnapf.com/products-v2/og/1234.jpg">
</head>
<body>
  <div class="product-stage">
    <h1 class="product-stage__title">Real Nature Wilderness Adult Trockenfutter 12 kg</h1>
    <div class="product-stage__image"><img src="/media/products/real-nature-wilderness.jpg"></div>
    <span data-ean="4024875012349"></span>
  </div>
  <div class="product-description__content">Ein artgerechtes Futter.</div>
  <div class="tab-content">
    <h3>Analytische Bestandteile</h3>
    <table>
      <tr><td>Rohprotein</td><td>28,0 %</td></tr>
      <tr><td>Rohfett</td><td>16,0 %</td></tr>
      <tr><td>Rohfaser</td><td>3,0 %</td></tr>
      <tr><td>Rohasche</td><td>7,5 %</td></tr>
    </table>
  </div>
</body>
</html>
"""

ZOOPLUS_CATALOG_HTML = """<html><body>
  <a href="/shop/hunde/hundefutter_trockenfutter/bosch/bosch_adult/123456">Bosch Adult</a>
  <a href="/shop/hunde/hundefutter_trockenfutter/bosch/bosch_adult/123456?variant=2">Bosch Adult 3 kg</a>
  <a href="/shop/hunde/hundefutter_trockenfutter/josera/234567">Josera</a>
  <a href="/shop/hunde/hundefutter_trockenfutter">Category</a>
  <a href="https://www.zooplus.de/shop/hunde/hundefutter_trockenfutter/rocco/345678">Rocco</a>
  <a href="https://partner.example.com/shop/item/999999">Partner</a>
</body></html>
"""

FRESSNAPF_CATALOG_HTML = """<html><body>
  <a href="/p/real-nature-wilderness-adult-12-kg-1234567/">Real Nature</a>
  <a href="/p/select-gold-adult-4-kg-7654321/">Select Gold</a>
  <a href="https://www.fressnapf.de/p/absolute-link-1111111/">Absolute</a>
  <a href="/c/hund/hundefutter/">Category</a>
</body></html>
"""


def _opff_product(code, protein=25.0, fat=14.0, fiber=3.0, ash=7.0, **extra):
    product = {
        "code": code,
        "product_name": "Adult Chicken",
        "brands": "Josera,Josera Petfood",
        "nutriments": {
            "crude-protein_100g": protein,
            "crude-fat_100g": fat,
            "crude-fibre_100g": fiber,
            "crude-ash_100g": ash,
            "moisture_100g": 10.0,
            "energy-kcal_100g": 380,
        },
        "image_url": "https://images.openpetfoodfacts.org/images/products/401/adult.jpg",
        "ingredients_text": "Chicken meal, rice, vitamin A, E300, minerals: zinc",
        "categories_tags": ["en:dog-food", "en:dry-dog-food"],
    }
    product.update(extra)
    return product


@pytest.fixture
def sample_known_brands():
    """Known brands without config file I/O."""
    return {
        "Bosch",
        "Royal Canin",
        "Hill's",
        "Josera",
        "Real Nature",
        "Wolf of Wilderness",
        "Animonda",
        "Select Gold",
    }


@pytest.fixture
def brand_matcher(sample_known_brands):
    return BrandMatcher(brands=sample_known_brands)


@pytest.fixture
def complete_profile():
    return NutrientProfile(protein=23.0, fat=12.0, fiber=2.5, ash=6.5, moisture=10.0)


@pytest.fixture
def make_record(complete_profile):
    """Factory for complete records."""
    def _make(identifier="4015598013543", source_name="zooplus", **kwargs):
        kwargs.setdefault("brand", "Bosch")
        kwargs.setdefault("name", "Bosch Adult Lamm & Reis")
        kwargs.setdefault("nutrients", NutrientProfile(**complete_profile.as_dict()))
        kwargs.setdefault("source_url", f"https://example.org/{source_name}/{identifier}")
        return ProductRecord(identifier=identifier, source_name=source_name, **kwargs)
    return _make


@pytest.fixture
def make_result():
    """Factory for FetchResult objects."""
    def _make(body, url="https://example.org/", status_code=200):
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return FetchResult(url=url, status_code=status_code, body=body, encoding="utf-8")
    return _make


@pytest.fixture
def fake_client(make_result):
    """
    HttpClient stand-in serving canned bodies by URL.

    Usage:
        client = fake_client({"https://x/a": "<html>..."})
        client.get.call_args_list  # inspect requests
    """
    def _make(pages):
        client = MagicMock(spec=HttpClient)

        def get(url, params=None, headers=None, timeout=None):
            body = pages[url]
            if isinstance(body, Exception):
                raise body
            return make_result(body, url=url)

        client.get.side_effect = get
        return client
    return _make


@pytest.fixture
def zooplus_detail_html():
    return ZOOPLUS_DETAIL_HTML


@pytest.fixture
def fressnapf_detail_html():
    return FRESSNAPF_DETAIL_HTML


@pytest.fixture
def zooplus_catalog_html():
    return ZOOPLUS_CATALOG_HTML


@pytest.fixture
def fressnapf_catalog_html():
    return FRESSNAPF_CATALOG_HTML


@pytest.fixture
def opff_product():
    return _opff_product


@pytest.fixture
def opff_category_payload():
    return {
        "count": 3,
        "page": 1,
        "products": [
            _opff_product("4032254745549"),
            # ash missing: dropped by the completeness check
            _opff_product("4032254745556", ash=0),
            # code too short: no usable identifier
            _opff_product("12345"),
        ],
    }
