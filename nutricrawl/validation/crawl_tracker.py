"""
CrawlTracker

Tracks per-run counts (fetched, skipped per reason, retained) and prints
summaries for the invoking job.
"""

from __future__ import annotations

import re
import threading
from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import ProductRecord


class CrawlTracker:
    """
    Aggregate counters for one crawl run. Safe to share across source workers.

    Usage::

        tracker = CrawlTracker()
        # inside the crawl loop:
        tracker.record_fetch(source)
        tracker.record_skip(source, "identifier_not_found", url)
        tracker.record_retained(record)
        # after the run:
        tracker.print_final_report()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

        self.fetched: int = 0
        self.retained: int = 0
        self.duplicates: int = 0
        self.catalog_failures: int = 0
        self.refs_discovered: int = 0

        # reason -> count
        self.skipped: dict[str, int] = defaultdict(int)
        # source -> count
        self.retained_by_source: dict[str, int] = defaultdict(int)
        # "field: problem" prefix -> count, from RecordValidator warnings
        self.field_issue_counts: dict[str, int] = defaultdict(int)

        # (source, reason, url) of the most recent failures
        self.failures: list[tuple[str, str, str]] = []

    # ── Public API ────────────────────────────────────────────────────────────

    def record_catalog(self, source: str, refs: int) -> None:
        with self._lock:
            self.refs_discovered += refs

    def record_catalog_failure(self, source: str, category: str, error: str) -> None:
        with self._lock:
            self.catalog_failures += 1
            self.failures.append((source, "catalog_failure", f"{category}: {error}"))

    def record_fetch(self, source: str) -> None:
        with self._lock:
            self.fetched += 1

    def record_skip(self, source: str, reason: str, url: str = "") -> None:
        """Record a per-reference skip (fetch error, missing identifier, ...)."""
        with self._lock:
            self.skipped[reason] += 1
            self.failures.append((source, reason, url))

    def record_retained(self, record: "ProductRecord") -> None:
        with self._lock:
            self.retained += 1
            self.retained_by_source[record.source_name] += 1

    def record_duplicates(self, count: int) -> None:
        with self._lock:
            self.duplicates += count

    def record_validation(self, record: "ProductRecord", validation_result: dict) -> None:
        """Tally RecordValidator issues by field name."""
        with self._lock:
            for msg in validation_result.get("issues", []):
                self.field_issue_counts[self._extract_field(msg)] += 1

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())

    def summary(self) -> dict:
        """Counts for the invoking job."""
        with self._lock:
            return {
                "refs_discovered": self.refs_discovered,
                "fetched": self.fetched,
                "retained": self.retained,
                "duplicates": self.duplicates,
                "catalog_failures": self.catalog_failures,
                "skipped": dict(self.skipped),
                "retained_by_source": dict(self.retained_by_source),
            }

    def print_final_report(self) -> None:
        """Print a full report table at the end of the crawl."""
        stats = self.summary()

        print("\n" + "=" * 60)
        print("Crawl Report")
        print("=" * 60)
        print(f"  Refs discovered:  {stats['refs_discovered']:>6}")
        print(f"  Detail fetches:   {stats['fetched']:>6}")
        print(f"  Retained:         {stats['retained']:>6}")
        print(f"  Duplicates:       {stats['duplicates']:>6}")
        print(f"  Catalog failures: {stats['catalog_failures']:>6}")

        if stats["skipped"]:
            print("\n  Skipped by reason:")
            for reason, count in sorted(stats["skipped"].items(), key=lambda x: -x[1]):
                print(f"    {reason:<30} {count:>5}")

        if stats["retained_by_source"]:
            print("\n  Retained by source:")
            for source, count in stats["retained_by_source"].items():
                print(f"    {source:<30} {count:>5}")

        if self.field_issue_counts:
            print("\n  Record warnings (top 10):")
            for field, count in sorted(self.field_issue_counts.items(), key=lambda x: -x[1])[:10]:
                print(f"    {field:<30} {count:>5}")

        print("=" * 60)

    # ── Helpers ───────────────────────────────────────────────────────────────

    @staticmethod
    def _extract_field(message: str) -> str:
        """Extract the field name from a message like 'brand: unknown'."""
        match = re.match(r"^([a-z_A-Z][a-z_A-Z0-9 ]+?):", message)
        return match.group(1).strip() if match else "unknown"
