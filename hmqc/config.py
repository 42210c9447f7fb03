# file: hmqc/config.py

"""
Configuration loading.

The shipped default_config.yaml provides every key; a user file only
needs the keys it overrides.
"""

import copy
import os
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError


DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "default_config.yaml")


def get_default_config() -> Dict[str, Any]:
    """
    Hardcoded defaults, used when default_config.yaml is not available.

    Returns:
        Configuration dictionary
    """
    return {
        "system": {
            "verbose": False,
        },
        "metadata": {
            "strict_content_type": True,
        },
        "compression": {
            "pattern_support_threshold": 3,
            "max_patterns": 15,
        },
        "fec": {
            "type": "reed_solomon",
            "reed_solomon": {"n": 255, "k": 223, "nsym": 32},
        },
        "layout": {
            "bits_per_module": 32,
        },
        "raster": {
            "module_px": 4,
        },
    }


def _read_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot load config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config {path} must be a mapping, got {type(data).__name__}"
        )
    return data


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration.

    Args:
        config_path: Optional path to a YAML file with overrides.

    Returns:
        Fully populated configuration dictionary

    Raises:
        ConfigurationError: If a file cannot be read or is not a mapping
    """
    if os.path.exists(DEFAULT_CONFIG_PATH):
        config = merge_config(get_default_config(), _read_yaml(DEFAULT_CONFIG_PATH))
    else:
        config = get_default_config()

    if config_path is not None:
        config = merge_config(config, _read_yaml(config_path))

    return config
