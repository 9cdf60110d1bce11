"""
Record validation and crawl observability.

Modules:
    completeness - is_complete predicate (protein, fat, fiber, ash)
    record_validator - RecordValidator quality checks
    crawl_tracker - CrawlTracker run counters and report
"""

from .completeness import REQUIRED_NUTRIENTS, is_complete, missing_nutrients
from .crawl_tracker import CrawlTracker
from .record_validator import RecordValidator, gtin_checksum_valid

__all__ = [
    'REQUIRED_NUTRIENTS',
    'is_complete',
    'missing_nutrients',
    'RecordValidator',
    'gtin_checksum_valid',
    'CrawlTracker',
]
