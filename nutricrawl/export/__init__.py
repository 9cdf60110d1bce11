"""
Export modules.

Modules:
    record_exporter - JSON and CSV output of crawled records
"""

from .record_exporter import RECORD_FIELDNAMES, RecordExporter

__all__ = [
    'RecordExporter',
    'RECORD_FIELDNAMES',
]
