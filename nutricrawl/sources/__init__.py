"""
Source adapters.

Modules:
    base - Source contract and shared HTML catalog behavior
    zooplus - zooplus.de HTML catalog
    fressnapf - fressnapf.de HTML catalog
    openpetfoodfacts - OpenPetFoodFacts JSON API
"""

from typing import Any, Dict, Iterable, List, Optional

from ..common.config_loader import get_enabled_sources, load_source_settings
from ..common.errors import ConfigurationError
from ..extraction import BrandMatcher
from .base import HtmlCatalogSource, Source
from .fressnapf import FressnapfSource
from .openpetfoodfacts import OpenPetFoodFactsSource
from .zooplus import ZooplusSource

SOURCE_ADAPTERS = {
    'zooplus': ZooplusSource,
    'fressnapf': FressnapfSource,
    'openpetfoodfacts': OpenPetFoodFactsSource,
}


def build_source(
    name: str,
    settings: Dict[str, Any],
    brand_matcher: Optional[BrandMatcher] = None,
) -> Source:
    """
    Instantiate one source from its settings entry.

    The adapter is chosen by the 'adapter' key, defaulting to the source name.

    Raises:
        ConfigurationError: Unknown adapter or missing required settings
    """
    adapter = (settings or {}).get('adapter', name)
    source_cls = SOURCE_ADAPTERS.get(adapter)
    if source_cls is None:
        raise ConfigurationError(
            f"Unknown source adapter {adapter!r} for {name!r} "
            f"(available: {', '.join(sorted(SOURCE_ADAPTERS))})"
        )
    return source_cls.from_settings(name, settings or {}, brand_matcher=brand_matcher)


def build_sources(
    names: Optional[Iterable[str]] = None,
    settings: Optional[Dict[str, Dict[str, Any]]] = None,
    brand_matcher: Optional[BrandMatcher] = None,
) -> List[Source]:
    """
    Instantiate sources in configured order.

    Args:
        names: Source names to build (default: all enabled sources)
        settings: Per-source settings (default: config/sources.yaml)
        brand_matcher: Shared brand matcher (default: known_brands.yaml)

    Returns:
        Sources in the order given by names, or configuration order
    """
    if settings is None:
        settings = load_source_settings()
    if names is None:
        names = get_enabled_sources(settings)

    matcher = brand_matcher or BrandMatcher()
    sources = []
    for name in names:
        if name not in settings:
            raise ConfigurationError(
                f"Unknown source {name!r} (configured: {', '.join(settings)})"
            )
        sources.append(build_source(name, settings[name], brand_matcher=matcher))
    return sources


__all__ = [
    'Source',
    'HtmlCatalogSource',
    'ZooplusSource',
    'FressnapfSource',
    'OpenPetFoodFactsSource',
    'SOURCE_ADAPTERS',
    'build_source',
    'build_sources',
]
