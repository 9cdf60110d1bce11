"""
Completeness Validator

A record is complete when protein, fat, fiber and ash are all positive.
Moisture is not part of the predicate: dry-food listings routinely omit
it, and those products are kept.
"""

from typing import List, Union

from ..models import NutrientProfile, ProductRecord

REQUIRED_NUTRIENTS = ('protein', 'fat', 'fiber', 'ash')


def _profile(item: Union[ProductRecord, NutrientProfile]) -> NutrientProfile:
    return item.nutrients if isinstance(item, ProductRecord) else item


def is_complete(item: Union[ProductRecord, NutrientProfile]) -> bool:
    """protein > 0 and fat > 0 and fiber > 0 and ash > 0."""
    profile = _profile(item)
    return all(getattr(profile, name) > 0 for name in REQUIRED_NUTRIENTS)


def missing_nutrients(item: Union[ProductRecord, NutrientProfile]) -> List[str]:
    """Names of required nutrients that are not positive."""
    profile = _profile(item)
    return [name for name in REQUIRED_NUTRIENTS if not getattr(profile, name) > 0]
