"""Tests for nutricrawl/crawl/state.py"""

import json

from nutricrawl.crawl.state import CrawlState


class TestCrawlState:
    def test_defaults_to_first_page(self, tmp_path):
        state = CrawlState(str(tmp_path / "state.json"))
        assert state.load() is False
        assert state.next_page("zooplus") == 1

    def test_advance_only_when_refs_found(self, tmp_path):
        state = CrawlState(str(tmp_path / "state.json"))
        state.advance("zooplus", refs_found=12, retained=5)
        state.advance("fressnapf", refs_found=0)
        assert state.next_page("zooplus") == 2
        assert state.next_page("fressnapf") == 1
        assert state.sources["zooplus"]["total_retained"] == 5

    def test_save_and_load_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        state = CrawlState(str(path))
        state.advance("openpetfoodfacts", refs_found=20, retained=18)
        state.save()

        loaded = CrawlState(str(path))
        assert loaded.load() is True
        assert loaded.next_page("openpetfoodfacts") == 2
        assert loaded.total_runs == 1
        assert loaded.last_run is not None

    def test_record_error(self, tmp_path):
        path = tmp_path / "state.json"
        state = CrawlState(str(path))
        state.record_error("zooplus", "no references discovered")
        state.save()
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["sources"]["zooplus"]["last_error"] == "no references discovered"

    def test_corrupt_file_ignored(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        state = CrawlState(str(path))
        assert state.load() is False
        assert state.next_page("zooplus") == 1
