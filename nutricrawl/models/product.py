"""
Product data models.

Pure data classes for representing crawled pet-food products.
No business logic - only data structure definitions.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

# Sentinel for brand/name fields that could not be recovered
UNKNOWN = "Unknown"


@dataclass
class NutrientProfile:
    """
    Analytical constituents, percentages per 100g.

    A value of 0.0 means the extractor found no percentage claim for that
    nutrient, which is different from the source declaring 0%.
    Energy is kcal/100g.
    """
    protein: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    ash: float = 0.0
    moisture: float = 0.0
    carbohydrates: float = 0.0
    energy: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            try:
                value = float(value or 0.0)
            except (TypeError, ValueError):
                value = 0.0
            setattr(self, f.name, value if value > 0 else 0.0)

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ProductRef:
    """Handle emitted by catalog discovery, consumed by fetch_detail."""
    url: str
    source_name: str
    category: str = ""


@dataclass
class ProductRecord:
    """
    Canonical product nutrition record, keyed by trade identifier.

    Field Groups:
    - Identity: identifier (EAN/GTIN), brand, name
    - Nutrition: analytical constituents and additive text
    - Provenance: source name and the URL the record was derived from
    """

    # Identity
    identifier: str
    brand: str = UNKNOWN
    name: str = UNKNOWN

    # Nutrition
    nutrients: NutrientProfile = field(default_factory=NutrientProfile)
    additives: Optional[str] = None

    # Media
    image_url: Optional[str] = None

    # Provenance
    source_name: str = ""
    source_url: str = ""
    categories: List[str] = field(default_factory=list)  # structured API only

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.identifier:
            raise ValueError("Product identifier is required")
        if not self.brand:
            self.brand = UNKNOWN
        if not self.name:
            self.name = UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the record (nutrients inlined) for export."""
        data: Dict[str, Any] = {
            "identifier": self.identifier,
            "brand": self.brand,
            "name": self.name,
        }
        data.update(self.nutrients.as_dict())
        data.update({
            "additives": self.additives,
            "image_url": self.image_url,
            "source_name": self.source_name,
            "source_url": self.source_url,
            "categories": list(self.categories),
        })
        return data
