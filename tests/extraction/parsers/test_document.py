"""Tests for nutricrawl/extraction/parsers/document.py"""

import pytest

from nutricrawl.common.errors import ParseError
from nutricrawl.extraction.parsers.document import HtmlDocument, JsonDocument

HTML = """<html><head>
<meta property="og:image" content="https://cdn.example.org/a.jpg">
<script type="application/ld+json">{"@type": "Product", "name": "A"}</script>
<script type="application/ld+json">   </script>
</head><body>
<h1>  Bosch   Adult </h1>
<div class="tab">First <b>tab</b></div>
<div class="tab">Second tab</div>
<a href="/shop/a/1">one</a>
<a href=" /shop/b/2 ">two</a>
<a>no href</a>
</body></html>"""


@pytest.fixture
def doc():
    return HtmlDocument(HTML, base_url="https://www.zooplus.de/shop/x/9")


class TestHtmlDocument:
    def test_text_of_cleans_whitespace(self, doc):
        assert doc.text_of("h1") == "Bosch Adult"

    def test_text_of_missing(self, doc):
        assert doc.text_of(".missing") == ""

    def test_select(self, doc):
        assert len(doc.select(".tab")) == 2
        assert doc.select_one(".tab").get_text(" ", strip=True) == "First tab"
        assert doc.select_one(".missing") is None

    def test_texts_yields_every_match(self, doc):
        texts = [" ".join(t.split()) for t in doc.texts(".tab")]
        assert texts == ["First tab", "Second tab"]

    def test_attr_of(self, doc):
        assert doc.attr_of('meta[property="og:image"]', "content") == "https://cdn.example.org/a.jpg"
        assert doc.attr_of('meta[property="og:image"]', "src") == ""

    def test_links_in_order(self, doc):
        assert doc.links() == ["/shop/a/1", "/shop/b/2"]

    def test_json_ld_blocks_skip_empty(self, doc):
        blocks = doc.json_ld_blocks()
        assert len(blocks) == 1
        assert '"Product"' in blocks[0]

    def test_absolute(self, doc):
        assert doc.absolute("/img/a.jpg") == "https://www.zooplus.de/img/a.jpg"
        assert doc.absolute("//cdn.example.org/a.jpg") == "https://cdn.example.org/a.jpg"
        assert doc.absolute("https://other.org/a.jpg") == "https://other.org/a.jpg"
        assert doc.absolute("") == ""

    def test_empty_document(self):
        doc = HtmlDocument("")
        assert doc.text_of("h1") == ""
        assert doc.json_ld_blocks() == []


class TestJsonDocument:
    def test_dotted_path(self):
        doc = JsonDocument({"product": {"nutriments": {"proteins_100g": 25}}})
        assert doc.get("product.nutriments.proteins_100g") == 25

    def test_list_index(self):
        doc = JsonDocument({"products": [{"code": "1"}, {"code": "2"}]})
        assert doc.get("products.1.code") == "2"
        assert doc.get("products.5.code", "none") == "none"

    def test_missing_path_default(self):
        assert JsonDocument({}).get("a.b", default=[]) == []

    def test_from_text(self):
        assert JsonDocument.from_text('{"status": 1}').get("status") == 1

    def test_from_text_invalid(self):
        with pytest.raises(ParseError):
            JsonDocument.from_text("<html>", url="https://x/api")
