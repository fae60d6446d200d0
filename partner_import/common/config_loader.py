"""
Configuration Loader

Loads YAML configuration files for importer settings, partner site
extraction strategies, and category keywords.
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
        filename: Name of the config file (e.g., 'importer.yaml')

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


def load_importer_settings() -> Dict[str, Any]:
    """
    Load importer settings (timeouts, headers, record limits, filters).

    Returns:
        Dictionary with keys such as 'fetch', 'max_records',
        'min_name_length', 'blacklisted_names', 'default_category'
    """
    return load_config('importer.yaml')


def load_partner_sites() -> Dict[str, Any]:
    """
    Load the partner site table.

    Returns:
        Dictionary with 'sites' (keyed by site kind value) and
        'brand_strategies' (ordered list of strategy mappings)
    """
    return load_config('partner_sites.yaml')


def load_category_keywords() -> Dict[str, List[str]]:
    """
    Load category keyword lists.

    Returns:
        Ordered dictionary mapping category slug to keyword substrings

    Example:
        {
            'skin-care': ['skin', 'face', 'cleanser', ...],
            'hair-care': ['hair', 'shampoo', ...],
            ...
        }
    """
    config = load_config('category_keywords.yaml')
    return config.get('categories', {})


def get_blacklist_lowercase(names: Optional[List[str]] = None) -> set:
    """
    Get the set of disallowed candidate names, lowercased.

    Args:
        names: Blacklisted labels (if None, loads from importer settings)

    Returns:
        Set of lowercase names

    Example:
        {'all', 'view all', 'shop now', ...}
    """
    if names is None:
        names = load_importer_settings().get('blacklisted_names', [])

    return {name.strip().lower() for name in names}
