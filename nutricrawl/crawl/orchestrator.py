"""
Crawl Orchestrator

Runs every configured source in its own worker thread:

    categories (sequential, paused between)
      -> fetch_category
      -> per ref: rate-limited fetch_detail -> validate -> collector queue

Per-reference and per-category failures are recorded and skipped. After
all workers finish, the main thread drains the collector, orders records
by configured source order and deduplicates once.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from ..common.errors import CrawlError
from ..models import ProductRecord
from ..sources.base import Source
from ..validation import CrawlTracker, RecordValidator, is_complete
from .deduplicator import Deduplicator
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# Unexpected extraction failures on odd markup; skip the ref, keep crawling
_EXTRACTION_ERRORS = (ValueError, KeyError, TypeError, AttributeError, IndexError)


class CrawlOrchestrator:
    """
    Batch crawl over several sources.

    Usage:
        orchestrator = CrawlOrchestrator(RateLimiter(1.5, category_interval=2.0))
        records = orchestrator.crawl(build_sources(), page=1, page_size=20)
        orchestrator.tracker.print_final_report()
    """

    def __init__(
        self,
        rate_limiter: Optional[RateLimiter] = None,
        tracker: Optional[CrawlTracker] = None,
        cancel_event: Optional[threading.Event] = None,
        max_workers: Optional[int] = None,
    ):
        self.rate_limiter = rate_limiter or RateLimiter(0)
        self.tracker = tracker or CrawlTracker()
        self.cancel_event = cancel_event or threading.Event()
        self.max_workers = max_workers

        # source name -> {"refs": n, "collected": n}, filled by crawl()
        self.source_stats: Dict[str, Dict[str, int]] = {}

    # ── Public API ────────────────────────────────────────────────────────────

    def cancel(self) -> None:
        """Stop issuing new fetches. In-flight requests finish."""
        logger.info("Cancellation requested")
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def crawl(
        self,
        sources: Sequence[Source],
        page: int = 1,
        page_size: int = 20,
        pages: Optional[Dict[str, int]] = None,
    ) -> List[ProductRecord]:
        """
        Crawl one catalog page of every source.

        Args:
            sources: Sources in priority order (first seen wins on duplicates)
            page: Catalog page, 1-based
            page_size: Requested references per source page
            pages: Optional per-source page overrides (resume)

        Returns:
            Deduplicated, complete records ordered by source order
        """
        if page < 1:
            raise ValueError("page must be >= 1")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")

        pages = pages or {}
        collector: "queue.Queue[tuple[int, ProductRecord]]" = queue.Queue()
        self.source_stats = {source.name: {"refs": 0, "collected": 0} for source in sources}

        workers = self.max_workers or max(1, len(sources))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="source") as executor:
            futures = [
                executor.submit(
                    self.crawl_source,
                    source,
                    pages.get(source.name, page),
                    page_size,
                    self.rate_limiter.for_source(),
                    collector,
                    index,
                )
                for index, source in enumerate(sources)
            ]
            for future in futures:
                future.result()

        records = self._drain(collector, len(sources))

        dedup = Deduplicator()
        unique = dedup.deduplicate(records)
        self.tracker.record_duplicates(dedup.duplicates)
        for record in unique:
            self.tracker.record_retained(record)

        logger.debug("Done: %d collected, %d unique%s",
                     len(records), len(unique), " (cancelled)" if self.cancelled else "")
        return unique

    def crawl_source(
        self,
        source: Source,
        page: int,
        page_size: int,
        limiter: RateLimiter,
        collector: "queue.Queue",
        index: int = 0,
    ) -> None:
        """Worker body for one source. Never raises on per-ref failures."""
        stats = self.source_stats.setdefault(source.name, {"refs": 0, "collected": 0})

        for position, category in enumerate(source.categories):
            if self.cancelled:
                break
            if position > 0:
                limiter.pause()
                if self.cancelled:
                    break

            logger.debug("%s: FetchingCatalog %s page=%d", source.name, category, page)
            try:
                refs = source.fetch_category(category, page, page_size)
            except CrawlError as e:
                logger.warning("%s: category %s failed: %s", source.name, category, e)
                self.tracker.record_catalog_failure(source.name, category, str(e))
                continue
            except _EXTRACTION_ERRORS as e:
                logger.error("%s: category %s could not be parsed: %s: %s",
                             source.name, category, type(e).__name__, e)
                self.tracker.record_catalog_failure(source.name, category, f"{type(e).__name__}: {e}")
                continue

            self.tracker.record_catalog(source.name, len(refs))
            stats["refs"] += len(refs)

            for ref in refs:
                if self.cancelled:
                    break
                if source.requires_detail_fetch:
                    limiter.wait()
                if self.cancelled:
                    break
                record = self._fetch_one(source, ref)
                if record is not None:
                    collector.put((index, record))
                    stats["collected"] += 1

            logger.debug("%s: CategoryDone %s", source.name, category)

        logger.info("%s: %d refs, %d records collected", source.name, stats["refs"], stats["collected"])

    def search_by_identifier(self, source: Source, identifier: str) -> Optional[ProductRecord]:
        """
        Direct lookup on one source.

        Returns:
            A complete record, or None when not found, incomplete or failed
        """
        try:
            record = source.search_by_identifier(identifier)
        except CrawlError as e:
            logger.warning("%s: lookup of %s failed: %s", source.name, identifier, e)
            self.tracker.record_skip(source.name, e.reason, e.url)
            return None

        if record is None:
            return None
        if not is_complete(record):
            logger.info("%s: %s found but incomplete", source.name, identifier)
            self.tracker.record_skip(source.name, "incomplete_profile", record.source_url)
            return None
        return record

    def probe(self, sources: Sequence[Source]) -> None:
        """
        Check every origin is reachable before crawling.

        Raises:
            ConfigurationError: On the first unreachable origin
        """
        for source in sources:
            source.probe()

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _fetch_one(self, source: Source, ref) -> Optional[ProductRecord]:
        logger.debug("%s: FetchingDetail %s", source.name, ref.url)
        self.tracker.record_fetch(source.name)
        try:
            record = source.fetch_detail(ref)
        except CrawlError as e:
            logger.debug("%s: Discarded %s (%s)", source.name, ref.url, e.reason)
            self.tracker.record_skip(source.name, e.reason, ref.url)
            return None
        except _EXTRACTION_ERRORS as e:
            logger.error("%s: extraction failed on %s: %s: %s",
                         source.name, ref.url, type(e).__name__, e)
            self.tracker.record_skip(source.name, "extraction_error", ref.url)
            return None

        if record is None:
            logger.debug("%s: Discarded %s (not_found)", source.name, ref.url)
            self.tracker.record_skip(source.name, "not_found", ref.url)
            return None
        if not is_complete(record):
            logger.debug("%s: Discarded %s (incomplete_profile)", source.name, ref.url)
            self.tracker.record_skip(source.name, "incomplete_profile", ref.url)
            return None

        result = RecordValidator(record).validate()
        self.tracker.record_validation(record, result)
        if not result["overall_valid"]:
            logger.warning("%s: invalid record %s: %s",
                           source.name, record.identifier, "; ".join(result["errors"]))
            self.tracker.record_skip(source.name, "validation_error", ref.url)
            return None

        logger.debug("%s: Collected %s", source.name, record.identifier)
        return record

    @staticmethod
    def _drain(collector: "queue.Queue", source_count: int) -> List[ProductRecord]:
        """Concatenate per-source buffers in source order."""
        buffers: List[List[ProductRecord]] = [[] for _ in range(source_count)]
        while True:
            try:
                index, record = collector.get_nowait()
            except queue.Empty:
                break
            buffers[index].append(record)
        return [record for buffer in buffers for record in buffer]


def crawl(
    sources: Sequence[Source],
    page: int = 1,
    page_size: int = 20,
    delay: float = 1.5,
    category_delay: Optional[float] = None,
    tracker: Optional[CrawlTracker] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[ProductRecord]:
    """One-shot crawl with a per-source politeness delay."""
    orchestrator = CrawlOrchestrator(
        RateLimiter(delay, category_interval=category_delay),
        tracker=tracker,
        cancel_event=cancel_event,
    )
    return orchestrator.crawl(sources, page=page, page_size=page_size)


def search_by_identifier(source: Source, identifier: str) -> Optional[ProductRecord]:
    return CrawlOrchestrator().search_by_identifier(source, identifier)
