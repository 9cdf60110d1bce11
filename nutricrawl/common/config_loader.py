"""
Configuration Loader

Loads YAML configuration files for crawl settings, per-source static
configuration, and known pet-food brands.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'sources.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_source_settings() -> Dict[str, Dict[str, Any]]:
    """
    Load per-source static configuration.

    Returns:
        Dictionary mapping source name to its settings

    Example:
        {
            'zooplus': {
                'base_url': 'https://www.zooplus.de',
                'user_agent': 'Mozilla/5.0 ...',
                'categories': ['/shop/hunde/hundefutter_trockenfutter', ...],
            },
            ...
        }
    """
    config = load_config('sources.yaml')
    return config.get('sources', {})


def load_crawl_settings() -> Dict[str, Any]:
    """
    Load crawl politeness and paging defaults.

    Returns:
        Dictionary with detail_delay, category_delay, page_size, max_workers
    """
    config = load_config('crawl.yaml')
    return config.get('crawl', {})


def load_known_brands() -> set:
    """
    Load known brand names for name-based brand matching.

    Returns:
        Set of brand names (canonical capitalization)

    Example:
        {'Bosch', 'Royal Canin', "Hill's", 'Animonda', ...}
    """
    config = load_config('known_brands.yaml')
    brands = config.get('brands', [])
    return set(brands)


def get_brands_lowercase_map(brands: Optional[set] = None) -> Dict[str, str]:
    """
    Get mapping from lowercase brand name to canonical form.

    Args:
        brands: Set of brand names (if None, loads from config)

    Returns:
        Dictionary mapping lowercase brand to canonical form

    Example:
        {
            'royal canin': 'Royal Canin',
            "hill's": "Hill's",
            ...
        }
    """
    if brands is None:
        brands = load_known_brands()

    return {brand.lower(): brand for brand in brands}


def get_enabled_sources(settings: Optional[Dict[str, Dict[str, Any]]] = None) -> List[str]:
    """
    Get source names in configured order, skipping disabled ones.

    Args:
        settings: Source settings (if None, loads from config)

    Returns:
        List of source names
    """
    if settings is None:
        settings = load_source_settings()

    return [name for name, cfg in settings.items() if (cfg or {}).get('enabled', True)]
