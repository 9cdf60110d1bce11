"""
Crawl State

Persists the next catalog page per source between runs, so repeated
batch runs walk deeper into each catalog instead of refetching page 1.
"""

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict

logger = logging.getLogger(__name__)


class CrawlState:
    """
    JSON-backed per-source paging state.

    File layout:
        {
          "sources": {"zooplus": {"next_page": 3, "total_retained": 41}},
          "total_runs": 5,
          "last_run": "2026-01-01T12:00:00"
        }
    """

    def __init__(self, path: str):
        self.path = path
        self.sources: Dict[str, Dict[str, Any]] = {}
        self.total_runs = 0
        self.last_run = None

    def load(self) -> bool:
        """Load state from disk. Returns False if no usable state exists."""
        if not os.path.exists(self.path):
            return False
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                state = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load crawl state from %s: %s", self.path, e)
            return False

        self.sources = state.get("sources", {}) or {}
        self.total_runs = state.get("total_runs", 0)
        self.last_run = state.get("last_run")
        logger.info("Loaded crawl state: %d sources, %d previous runs",
                    len(self.sources), self.total_runs)
        return True

    def save(self) -> None:
        """Write state to disk, creating the parent directory if needed."""
        self.total_runs += 1
        self.last_run = datetime.now().isoformat()

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        state = {
            "sources": self.sources,
            "total_runs": self.total_runs,
            "last_run": self.last_run,
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2, ensure_ascii=False)

    def next_page(self, source: str) -> int:
        return int(self.sources.get(source, {}).get("next_page", 1))

    def advance(self, source: str, refs_found: int, retained: int = 0) -> None:
        """
        Move a source to its next page.

        The page only advances when the current one yielded references;
        an empty page means the catalog end (or a failed fetch) and is
        retried next run.
        """
        entry = self.sources.setdefault(source, {"next_page": 1, "total_retained": 0})
        if refs_found > 0:
            entry["next_page"] = entry.get("next_page", 1) + 1
        entry["total_retained"] = entry.get("total_retained", 0) + retained

    def record_error(self, source: str, message: str) -> None:
        entry = self.sources.setdefault(source, {"next_page": 1, "total_retained": 0})
        entry["last_error"] = message
        entry["last_error_date"] = datetime.now().isoformat()
