#!/usr/bin/env python3
"""
EAN Lookup

Looks up a single product by EAN on a source with a lookup endpoint and
prints the record as JSON. Exits with status 1 when the product is not
found or its nutrient profile is incomplete.

Usage:
    python3 scripts/lookup.py --ean 4017721837194
    python3 scripts/lookup.py --source openpetfoodfacts --ean 4017721837194
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nutricrawl.common import ConfigurationError
from nutricrawl.common.log_config import setup_logging
from nutricrawl.crawl import search_by_identifier
from nutricrawl.sources import build_sources

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Look up a product by EAN")
    parser.add_argument(
        "--ean", "-e",
        required=True,
        help="EAN/GTIN to look up"
    )
    parser.add_argument(
        "--source", "-s",
        default="openpetfoodfacts",
        help="Source to query (default: openpetfoodfacts)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    try:
        [source] = build_sources([args.source])
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(2)

    try:
        record = search_by_identifier(source, args.ean)
    finally:
        source.close()

    if record is None:
        print(f"Not found: {args.ean}")
        sys.exit(1)

    print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
