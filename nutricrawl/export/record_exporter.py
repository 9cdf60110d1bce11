"""
Record Exporter

Writes crawled records as JSON (one array) or CSV (one row per record,
nutrients flattened, categories joined with '|').
"""

import json
import logging
import os
from typing import Dict, Iterable, List

from ..common.csv_utils import write_csv
from ..models import ProductRecord

logger = logging.getLogger(__name__)

RECORD_FIELDNAMES = [
    'identifier', 'brand', 'name',
    'protein', 'fat', 'fiber', 'ash', 'moisture', 'carbohydrates', 'energy',
    'additives', 'image_url', 'source_name', 'source_url', 'categories',
]


class RecordExporter:
    """
    Exports ProductRecords for the downstream store.

    Usage:
        exporter = RecordExporter()
        exporter.write_json(records, "output/products.json")
        exporter.write_csv(records, "output/products.csv")
    """

    def record_to_row(self, record: ProductRecord) -> Dict[str, str]:
        """Flatten one record into a CSV row."""
        data = record.to_dict()
        row = {}
        for field in RECORD_FIELDNAMES:
            value = data.get(field)
            if field == 'categories':
                value = '|'.join(value or [])
            elif value is None:
                value = ''
            row[field] = value
        return row

    def write_json(self, records: Iterable[ProductRecord], path: str) -> int:
        """Write records as a JSON array. Returns the number written."""
        items = [record.to_dict() for record in records]
        self._ensure_dir(path)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(items, f, indent=2, ensure_ascii=False)
        logger.info("Wrote %d records to %s", len(items), path)
        return len(items)

    def write_csv(self, records: Iterable[ProductRecord], path: str) -> int:
        """Write records as CSV with a fixed header. Returns the number written."""
        rows: List[Dict[str, str]] = [self.record_to_row(r) for r in records]
        self._ensure_dir(path)
        count = write_csv(path, rows, fieldnames=RECORD_FIELDNAMES)
        logger.info("Wrote %d records to %s", count, path)
        return count

    def write(self, records: Iterable[ProductRecord], path: str, fmt: str = 'json') -> int:
        if fmt == 'json':
            return self.write_json(records, path)
        if fmt == 'csv':
            return self.write_csv(records, path)
        raise ValueError(f"Unsupported export format: {fmt}")

    @staticmethod
    def _ensure_dir(path: str) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
