"""
CSV Utilities

CSV writing helper used by the record exporter.
"""

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


def write_csv(
    file_path: str | Path,
    rows: Iterable[Dict[str, Any]],
    fieldnames: Optional[List[str]] = None,
    encoding: str = 'utf-8'
) -> int:
    """
    Write rows to a CSV file.

    A header is always written when fieldnames are given, so an empty
    crawl still produces a readable file. Keys outside fieldnames are
    ignored.

    Args:
        file_path: Path to output CSV file
        rows: Row dictionaries
        fieldnames: Column order (if None, uses keys of the first row)
        encoding: File encoding (default: utf-8)

    Returns:
        Number of rows written
    """
    rows = list(rows)
    if fieldnames is None:
        if not rows:
            return 0
        fieldnames = list(rows[0].keys())

    with open(file_path, 'w', encoding=encoding, newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction='ignore')
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

    return len(rows)
