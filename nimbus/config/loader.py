"""YAML config loader with dotted-key lookup."""

import logging
from pathlib import Path
from typing import Any

import yaml

from nimbus.config.schema import NimbusConfig

logger = logging.getLogger(__name__)


def load_config(path: str | Path | None) -> NimbusConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults.
    """
    if path is None:
        return NimbusConfig()
    path = Path(path)
    if not path.exists():
        logger.debug("Config %s not found, using defaults", path)
        return NimbusConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return NimbusConfig(**raw)


def get_config_value(config: NimbusConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'search.debounce_ms'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict) and part in obj:
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
