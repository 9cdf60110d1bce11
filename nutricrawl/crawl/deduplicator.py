"""
Deduplicator

Collapses records sharing an identifier. The first record seen wins, so
the caller's ordering (configured source order) decides which source's
data is kept. Brand, name and nutrients are never compared.
"""

from typing import Iterable, List, Set

from ..models import ProductRecord


class Deduplicator:
    """
    First-seen-wins filter keyed by identifier.

    Usage:
        dedup = Deduplicator()
        unique = dedup.deduplicate(records)
        dedup.duplicates  # number of records dropped
    """

    def __init__(self):
        self.seen: Set[str] = set()
        self.duplicates = 0

    def add(self, record: ProductRecord) -> bool:
        """Return True if the record is new, False if its identifier was seen."""
        if record.identifier in self.seen:
            self.duplicates += 1
            return False
        self.seen.add(record.identifier)
        return True

    def deduplicate(self, records: Iterable[ProductRecord]) -> List[ProductRecord]:
        """Keep the first record per identifier, preserving order."""
        return [record for record in records if self.add(record)]


def deduplicate_records(records: Iterable[ProductRecord]) -> List[ProductRecord]:
    return Deduplicator().deduplicate(records)
