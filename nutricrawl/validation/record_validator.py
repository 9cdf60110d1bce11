"""
Record Validator

Quality checks on records that already passed the completeness check.
Errors mark data the downstream store should not trust; warnings are
informational and never drop a record.
"""

from __future__ import annotations

import re

from ..models import UNKNOWN, ProductRecord

_PERCENT_FIELDS = ('protein', 'fat', 'fiber', 'ash', 'moisture', 'carbohydrates')
_SUM_FIELDS = ('protein', 'fat', 'fiber', 'ash', 'moisture')
_MAX_ENERGY_KCAL = 1000.0
_MAX_ADDITIVES_LENGTH = 1000


def gtin_checksum_valid(code: str) -> bool:
    """
    Verify the GS1 check digit of an EAN-8/UPC-A/EAN-13/GTIN-14.

    Weights alternate 3, 1 starting from the digit next to the check digit.
    """
    if not code or not code.isdigit() or len(code) not in (8, 12, 13, 14):
        return False
    digits = [int(c) for c in code]
    body, check = digits[:-1], digits[-1]
    total = sum(d * (3 if i % 2 == 0 else 1) for i, d in enumerate(reversed(body)))
    return (10 - total % 10) % 10 == check


class RecordValidator:
    """Validates a ProductRecord for the downstream store."""

    def __init__(self, record: ProductRecord):
        self.record = record

    def validate(self) -> dict:
        """
        Run all validations.

        Returns a dict with keys:
          overall_valid - False if any error fires
          errors        - list of blocking messages ("field: problem")
          warnings      - list of non-blocking messages
          issues        - errors + warnings
        """
        errors: list[str] = []
        warnings: list[str] = []
        r = self.record
        n = r.nutrients

        # identifier: 8-14 digits
        if not re.fullmatch(r'[0-9]{8,14}', r.identifier or ""):
            errors.append(f"identifier: must be 8-14 digits (got {r.identifier!r})")
        elif len(r.identifier) in (8, 12, 13, 14) and not gtin_checksum_valid(r.identifier):
            warnings.append(f"identifier: check digit mismatch ({r.identifier})")

        # nutrients: percentages within 0-100
        for name in _PERCENT_FIELDS:
            value = getattr(n, name)
            if value < 0 or value > 100:
                errors.append(f"{name}: out of range ({value})")

        if n.energy < 0 or n.energy > _MAX_ENERGY_KCAL:
            errors.append(f"energy: out of range ({n.energy} kcal/100g)")

        total = sum(getattr(n, name) for name in _SUM_FIELDS)
        if total > 100:
            warnings.append(f"nutrients: sum exceeds 100% ({total:.1f})")

        if r.brand == UNKNOWN:
            warnings.append("brand: unknown")
        if r.name == UNKNOWN:
            warnings.append("name: unknown")

        if r.image_url and not r.image_url.startswith(("http://", "https://")):
            warnings.append(f"image_url: not absolute ({r.image_url[:50]!r})")

        if r.additives and len(r.additives) > _MAX_ADDITIVES_LENGTH:
            warnings.append(f"additives: too long ({len(r.additives)} chars)")

        return {
            "overall_valid": not errors,
            "errors": errors,
            "warnings": warnings,
            "issues": errors + warnings,
        }
