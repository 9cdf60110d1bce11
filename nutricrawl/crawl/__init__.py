"""
Crawl coordination.

Modules:
    orchestrator - CrawlOrchestrator and crawl/search_by_identifier entry points
    rate_limiter - Per-source minimum-interval limiter
    deduplicator - First-seen-wins identifier dedup
    state - Resumable per-source paging state
"""

from .deduplicator import Deduplicator, deduplicate_records
from .orchestrator import CrawlOrchestrator, crawl, search_by_identifier
from .rate_limiter import RateLimiter
from .state import CrawlState

__all__ = [
    'CrawlOrchestrator',
    'crawl',
    'search_by_identifier',
    'RateLimiter',
    'Deduplicator',
    'deduplicate_records',
    'CrawlState',
]
