"""Tests for nutricrawl/sources/openpetfoodfacts.py"""

import pytest

from nutricrawl.common.errors import FetchError, ParseError
from nutricrawl.models import ProductRef
from nutricrawl.sources.openpetfoodfacts import CATALOG_FIELDS, OpenPetFoodFactsSource

BASE = "https://world.openpetfoodfacts.org"
DOG_FOOD_URL = BASE + "/category/en:dog-food.json"
PRODUCT_URL = BASE + "/product/4032254745549"
LOOKUP_URL = BASE + "/api/v2/product/4032254745549.json"


@pytest.fixture
def make_source(fake_client, brand_matcher):
    def _make(pages=None):
        return OpenPetFoodFactsSource(
            name="openpetfoodfacts",
            base_url=BASE,
            user_agent="TestAgent/1.0",
            categories=["en:dog-food", "en:dry-dog-food"],
            lookup_timeout=10.0,
            client=fake_client(pages or {}),
            brand_matcher=brand_matcher,
        )
    return _make


class TestCatalog:
    def test_keeps_only_complete_products(self, make_source, opff_category_payload):
        source = make_source({DOG_FOOD_URL: opff_category_payload})
        refs = source.fetch_category("en:dog-food", page=1, page_size=20)
        assert refs == [ProductRef(url=PRODUCT_URL, source_name="openpetfoodfacts", category="en:dog-food")]

    def test_query_parameters(self, make_source, opff_category_payload):
        source = make_source({DOG_FOOD_URL: opff_category_payload})
        source.fetch_category("en:dog-food", page=2, page_size=20)
        call = source.client.get.call_args
        assert call.args == (DOG_FOOD_URL,)
        assert call.kwargs["params"] == {"page": 2, "page_size": 20, "fields": CATALOG_FIELDS}

    def test_detail_served_from_cache(self, make_source, opff_category_payload):
        source = make_source({DOG_FOOD_URL: opff_category_payload})
        [ref] = source.fetch_category("en:dog-food", page=1, page_size=20)
        record = source.fetch_detail(ref)

        assert source.client.get.call_count == 1
        assert record.identifier == "4032254745549"
        assert record.brand == "Josera"
        assert record.name == "Adult Chicken"
        assert record.nutrients.protein == 25.0
        assert record.nutrients.fat == 14.0
        assert record.nutrients.fiber == 3.0
        assert record.nutrients.ash == 7.0
        assert record.nutrients.moisture == 10.0
        assert record.nutrients.energy == 380.0
        assert record.additives == "vitamin A, E300, minerals: zinc"
        assert record.image_url == "https://images.openpetfoodfacts.org/images/products/401/adult.jpg"
        assert record.categories == ["en:dog-food", "en:dry-dog-food"]
        assert record.source_url == PRODUCT_URL

    def test_detail_without_cache_falls_back_to_lookup(self, make_source, opff_product):
        source = make_source({LOOKUP_URL: {"status": 1, "product": opff_product("4032254745549")}})
        record = source.fetch_detail(ProductRef(url=PRODUCT_URL, source_name="openpetfoodfacts"))
        assert record.identifier == "4032254745549"

    def test_detail_for_foreign_ref(self, make_source):
        ref = ProductRef(url=BASE + "/product/not-a-code", source_name="openpetfoodfacts")
        assert make_source().fetch_detail(ref) is None

    def test_products_not_a_list(self, make_source):
        source = make_source({DOG_FOOD_URL: {"products": {"code": "1"}}})
        with pytest.raises(ParseError):
            source.fetch_category("en:dog-food", page=1, page_size=20)

    def test_invalid_json(self, make_source):
        source = make_source({DOG_FOOD_URL: "<html>maintenance</html>"})
        with pytest.raises(ParseError):
            source.fetch_category("en:dog-food", page=1, page_size=20)

    def test_empty_products(self, make_source):
        source = make_source({DOG_FOOD_URL: {"products": []}})
        assert source.fetch_category("en:dog-food", page=1, page_size=20) == []

    def test_no_detail_fetch_needed(self, make_source):
        assert make_source().requires_detail_fetch is False


class TestLookup:
    def test_found(self, make_source, opff_product):
        source = make_source({LOOKUP_URL: {"status": 1, "product": opff_product("4032254745549")}})
        record = source.search_by_identifier("4032254745549")
        assert record.identifier == "4032254745549"
        assert record.brand == "Josera"
        source.client.get.assert_called_once_with(LOOKUP_URL, timeout=10.0)

    def test_not_found(self, make_source):
        source = make_source({LOOKUP_URL: {"status": 0, "status_verbose": "product not found"}})
        assert source.search_by_identifier("4032254745549") is None

    def test_code_filled_from_request(self, make_source, opff_product):
        product = opff_product("")
        source = make_source({LOOKUP_URL: {"status": 1, "product": product}})
        assert source.search_by_identifier("4032254745549").identifier == "4032254745549"

    def test_transport_failure_propagates(self, make_source):
        source = make_source({LOOKUP_URL: FetchError("Request timed out", url=LOOKUP_URL)})
        with pytest.raises(FetchError):
            source.search_by_identifier("4032254745549")

    def test_incomplete_product_still_returned(self, make_source, opff_product):
        source = make_source({LOOKUP_URL: {"status": 1, "product": opff_product("4032254745549", ash=0)}})
        record = source.search_by_identifier("4032254745549")
        assert record.nutrients.ash == 0.0


class TestParseProduct:
    def test_nutriment_key_variants(self, make_source, opff_product):
        product = opff_product("4032254745549", nutriments={
            "proteins_100g": "24,5",
            "fat": 13,
            "fibre_value": 2,
            "minerals_100g": 6,
            "water_100g": 8,
        })
        profile = make_source().parse_product(product).nutrients
        assert profile.protein == 24.5
        assert profile.fat == 13.0
        assert profile.fiber == 2.0
        assert profile.ash == 6.0
        assert profile.moisture == 8.0

    def test_non_positive_variant_skipped(self, make_source, opff_product):
        product = opff_product("4032254745549", nutriments={
            "crude-protein_100g": 0,
            "proteins_100g": 22,
        })
        assert make_source().parse_product(product).nutrients.protein == 22.0

    def test_prose_fallback_fills_gaps_only(self, make_source, opff_product):
        product = opff_product(
            "4032254745549",
            nutriments={"crude-protein_100g": 30},
            ingredients_text_de=(
                "Zusammensetzung: Fleisch, Reis. Analytische Bestandteile: Rohprotein 26 %, "
                "Rohfett 15 %, Rohfaser 2,5 %, Rohasche 8 %, Feuchtigkeit 9 %."
            ),
        )
        profile = make_source().parse_product(product).nutrients
        assert profile.protein == 30.0
        assert profile.fat == 15.0
        assert profile.fiber == 2.5
        assert profile.ash == 8.0
        assert profile.moisture == 9.0

    def test_prose_without_section_leaves_gaps(self, make_source, opff_product):
        product = opff_product("4032254745549", nutriments={})
        profile = make_source().parse_product(product).nutrients
        assert profile.protein == 0.0

    def test_brand_first_entry(self, make_source, opff_product):
        record = make_source().parse_product(opff_product("4032254745549", brands="Animonda, Vom Feinsten"))
        assert record.brand == "Animonda"

    def test_brand_from_known_brands(self, make_source, opff_product):
        record = make_source().parse_product(
            opff_product("4032254745549", brands="", product_name="Royal Canin Maxi Adult")
        )
        assert record.brand == "Royal Canin"

    def test_brand_canonical_capitalization(self, make_source, opff_product):
        record = make_source().parse_product(opff_product("4032254745549", brands="royal canin,Royal Canin France"))
        assert record.brand == "Royal Canin"

    def test_brand_unknown(self, make_source, opff_product):
        record = make_source().parse_product(
            opff_product("4032254745549", brands=None, product_name="Hausmarke Adult")
        )
        assert record.brand == "Unknown"

    def test_image_fallback(self, make_source, opff_product):
        record = make_source().parse_product(opff_product(
            "4032254745549",
            image_url=None,
            image_front_url="https://images.openpetfoodfacts.org/front.jpg",
        ))
        assert record.image_url == "https://images.openpetfoodfacts.org/front.jpg"

    def test_no_image(self, make_source, opff_product):
        record = make_source().parse_product(opff_product("4032254745549", image_url=None))
        assert record.image_url is None

    @pytest.mark.parametrize("code", ["12345", "", None, "40322547455491234", "abc12345678"])
    def test_unusable_code(self, make_source, opff_product, code):
        assert make_source().parse_product(opff_product(code)) is None

    def test_no_additives(self, make_source, opff_product):
        record = make_source().parse_product(opff_product("4032254745549", ingredients_text="Chicken, rice"))
        assert record.additives is None


class TestSettings:
    def test_from_settings(self, fake_client, brand_matcher):
        source = OpenPetFoodFactsSource.from_settings(
            "openpetfoodfacts",
            {
                "base_url": BASE,
                "user_agent": "TestAgent/1.0",
                "timeout": 30,
                "lookup_timeout": 10,
                "categories": ["en:dog-food"],
            },
            client=fake_client({}),
            brand_matcher=brand_matcher,
        )
        assert source.lookup_timeout == 10.0
        assert source.timeout == 30.0
        assert source.categories == ["en:dog-food"]
