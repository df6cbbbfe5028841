"""Load configuration defaults and bundled data from YAML files."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

# Looked up relative to the working directory unless overridden
_CONFIG_PATH = Path(os.environ.get("DOMAIN_PARSER_CONFIG_PATH", "domain-parser.yml"))

_cache: dict | None = None


def load_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def _load() -> dict:
    global _cache
    if _cache is None:
        _cache = load_yaml(_CONFIG_PATH)
    return _cache


def get_defaults() -> dict:
    """Return the defaults section, or empty dict if config is unavailable."""
    try:
        return _load().get("defaults", {})
    except (FileNotFoundError, OSError):
        return {}
