#!/usr/bin/env python3
"""
Batch Crawl Script

Crawls one catalog page of every configured source in parallel, drops
incomplete and duplicate products, and writes the records as JSON or CSV.

Environment (.env supported):
    NUTRICRAWL_DELAY        Seconds between detail fetches per source
    NUTRICRAWL_PAGE_SIZE    References per source page
    NUTRICRAWL_OUTPUT_DIR   Default output directory

Usage:
    python3 scripts/crawl.py
    python3 scripts/crawl.py --sources zooplus fressnapf --page 2
    python3 scripts/crawl.py --format csv --output output/products.csv
    python3 scripts/crawl.py --resume  # continue from the saved page per source
"""

import argparse
import logging
import os
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nutricrawl.common import ConfigurationError, load_crawl_settings
from nutricrawl.common.log_config import setup_logging
from nutricrawl.crawl import CrawlOrchestrator, CrawlState, RateLimiter
from nutricrawl.export import RecordExporter
from nutricrawl.sources import build_sources

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def parse_args(defaults: dict) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl pet food catalogs for complete nutrition records"
    )
    parser.add_argument(
        "--sources", "-s",
        nargs="+",
        help="Sources to crawl, in priority order (default: all enabled)"
    )
    parser.add_argument(
        "--page", "-p",
        type=int,
        default=1,
        help="Catalog page to crawl (default: 1)"
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=int(os.getenv("NUTRICRAWL_PAGE_SIZE", defaults.get("page_size", 20))),
        help="References per source page (default: 20)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=float,
        default=float(os.getenv("NUTRICRAWL_DELAY", defaults.get("detail_delay", 1.5))),
        help="Delay between detail fetches in seconds (default: 1.5)"
    )
    parser.add_argument(
        "--category-delay",
        type=float,
        default=float(defaults.get("category_delay", 2.0)),
        help="Delay between categories in seconds (default: 2.0)"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "csv"],
        default="json",
        help="Output format (default: json)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output file (default: $NUTRICRAWL_OUTPUT_DIR/products.<format>)"
    )
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Crawl each source from its saved next page and advance the state"
    )
    parser.add_argument(
        "--state-file",
        default=defaults.get("state_file", "output/crawl_state.json"),
        help="Crawl state file (default: output/crawl_state.json)"
    )
    parser.add_argument(
        "--probe",
        action="store_true",
        help="Check every origin is reachable before crawling"
    )
    parser.add_argument(
        "--log-file",
        help="Also write a DEBUG-level log to this file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )
    return parser.parse_args()


def main():
    defaults = load_crawl_settings()
    args = parse_args(defaults)
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    output_dir = os.getenv("NUTRICRAWL_OUTPUT_DIR", "output")
    output = args.output or os.path.join(output_dir, f"products.{args.format}")

    try:
        sources = build_sources(args.sources)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(2)

    state = CrawlState(args.state_file)
    pages = {}
    if args.resume:
        state.load()
        pages = {source.name: state.next_page(source.name) for source in sources}

    print("=" * 60)
    print("Pet Food Crawl")
    print("=" * 60)
    print(f"  Sources:          {', '.join(s.name for s in sources)}")
    if args.resume:
        print(f"  Pages:            {', '.join(f'{k}={v}' for k, v in pages.items())}")
    else:
        print(f"  Page:             {args.page}")
    print(f"  Page size:        {args.page_size}")
    print(f"  Request delay:    {args.delay}s")
    print(f"  Output:           {output}")

    orchestrator = CrawlOrchestrator(
        RateLimiter(args.delay, category_interval=args.category_delay),
        max_workers=defaults.get("max_workers"),
    )

    def handle_sigint(signum, frame):
        orchestrator.cancel()

    signal.signal(signal.SIGINT, handle_sigint)

    try:
        if args.probe:
            orchestrator.probe(sources)
        records = orchestrator.crawl(sources, page=args.page, page_size=args.page_size, pages=pages)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(2)
    finally:
        for source in sources:
            source.close()

    RecordExporter().write(records, output, fmt=args.format)

    if args.resume:
        for name, stats in orchestrator.source_stats.items():
            state.advance(name, stats["refs"], stats["collected"])
            if stats["refs"] == 0:
                state.record_error(name, "no references discovered")
        state.save()

    orchestrator.tracker.print_final_report()
    print(f"\n  Output: {output}")


if __name__ == "__main__":
    main()
