#!/usr/bin/env python3
"""
Single Product Extraction

Runs detail extraction on one retailer URL and prints the record with a
validation report. The source is picked from the URL's host.

Usage:
    python3 scripts/extract_url.py --url https://www.zooplus.de/shop/hunde/.../123456
    python3 scripts/extract_url.py --url https://www.fressnapf.de/p/... --verbose
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nutricrawl.common import CrawlError, load_source_settings
from nutricrawl.common.log_config import setup_logging
from nutricrawl.models import ProductRef
from nutricrawl.sources import HtmlCatalogSource, build_sources
from nutricrawl.validation import RecordValidator, missing_nutrients

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def find_source(url: str):
    """Return the configured HTML source whose host matches the URL."""
    host = urlparse(url).netloc
    settings = load_source_settings()
    for name, cfg in settings.items():
        if urlparse((cfg or {}).get("base_url", "")).netloc == host:
            [source] = build_sources([name], settings=settings)
            if isinstance(source, HtmlCatalogSource):
                return source
            source.close()
    return None


def print_report(record, validation: dict) -> None:
    print("\n" + "=" * 80)
    print("EXTRACTION REPORT")
    print("=" * 80)

    print(f"\nSource: {record.source_name}")
    print(f"URL:    {record.source_url}")

    print("\nCORE FIELDS:")
    for label, value in [
        ("Identifier", record.identifier),
        ("Brand", record.brand),
        ("Name", record.name),
        ("Image", record.image_url),
    ]:
        status = "OK" if value and value != "Unknown" else "MISSING"
        print(f"  [{status:7}] {label:14} {value or 'MISSING'}")

    print("\nNUTRIENTS (% / kcal per 100g):")
    for name, value in record.nutrients.as_dict().items():
        print(f"  {name:14} {value:>7.2f}")
    missing = missing_nutrients(record)
    print(f"\n  Complete: {'yes' if not missing else 'no (missing ' + ', '.join(missing) + ')'}")

    if record.additives:
        print(f"\nADDITIVES:\n  {record.additives[:300]}")

    print("\nVALIDATION:")
    for msg in validation["errors"]:
        print(f"  [ERROR]   {msg}")
    for msg in validation["warnings"]:
        print(f"  [WARNING] {msg}")
    if not validation["issues"]:
        print("  No issues")
    print("=" * 80)


def main():
    parser = argparse.ArgumentParser(description="Extract a single product page")
    parser.add_argument("--url", "-u", required=True, help="Product detail URL")
    parser.add_argument("--json", action="store_true", help="Print the record as JSON only")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    source = find_source(args.url)
    if source is None:
        print(f"No HTML source configured for {urlparse(args.url).netloc}")
        sys.exit(2)

    try:
        record = source.fetch_detail(ProductRef(url=args.url, source_name=source.name))
    except CrawlError as e:
        print(f"Extraction failed ({e.reason}): {e}")
        sys.exit(1)
    finally:
        source.close()

    if args.json:
        print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
        return

    print_report(record, RecordValidator(record).validate())


if __name__ == "__main__":
    main()
