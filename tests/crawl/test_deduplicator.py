"""Tests for nutricrawl/crawl/deduplicator.py"""

from nutricrawl.crawl.deduplicator import Deduplicator, deduplicate_records


class TestDeduplicator:
    def test_first_seen_wins(self, make_record):
        first = make_record(identifier="4001234567890", source_name="openpetfoodfacts", brand="Josera")
        second = make_record(identifier="4001234567890", source_name="zooplus", brand="Other")
        result = deduplicate_records([first, second])
        assert result == [first]
        assert result[0].source_name == "openpetfoodfacts"

    def test_preserves_order(self, make_record):
        records = [make_record(identifier=code) for code in ("30000003", "10000007", "20000004")]
        assert [r.identifier for r in deduplicate_records(records)] == ["30000003", "10000007", "20000004"]

    def test_idempotent(self, make_record):
        records = [
            make_record(identifier="10000007"),
            make_record(identifier="20000004", source_name="fressnapf"),
            make_record(identifier="10000007", source_name="fressnapf"),
            make_record(identifier="20000004"),
        ]
        once = deduplicate_records(records)
        twice = deduplicate_records(once)
        assert twice == once
        assert len(once) == 2

    def test_ignores_content_differences(self, make_record):
        a = make_record(identifier="10000007", name="A")
        b = make_record(identifier="10000007", name="B")
        assert deduplicate_records([a, b]) == [a]

    def test_counts_duplicates(self, make_record):
        dedup = Deduplicator()
        dedup.deduplicate([make_record(), make_record(), make_record()])
        assert dedup.duplicates == 2

    def test_add(self, make_record):
        dedup = Deduplicator()
        assert dedup.add(make_record()) is True
        assert dedup.add(make_record(source_name="fressnapf")) is False
        assert dedup.seen == {"4015598013543"}

    def test_empty(self):
        assert deduplicate_records([]) == []
