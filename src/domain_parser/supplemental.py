"""Hand-curated suffixes merged into every ingested suffix list."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from .errors import MalformedSource
from .yaml_config import load_yaml

log = structlog.get_logger()


def load_supplemental(path: Path) -> dict[str, list[str]]:
    """Read the ``group: [suffix, ...]`` mapping, or an empty mapping if absent.

    Anything but a mapping of lists of strings raises ``MalformedSource``.
    """
    try:
        data = load_yaml(path)
    except FileNotFoundError:
        log.warning("supplemental_list_missing", path=str(path))
        return {}
    except yaml.YAMLError as exc:
        raise MalformedSource(f"Supplemental list {path} is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedSource(f"Supplemental list {path} must map groups to suffix lists.")

    supplemental: dict[str, list[str]] = {}
    for group, suffixes in data.items():
        if suffixes is None:
            suffixes = []
        if not isinstance(suffixes, list) or not all(isinstance(s, str) for s in suffixes):
            raise MalformedSource(f"Supplemental group {group!r} in {path} must be a list of suffixes.")
        supplemental[str(group)] = [s.strip().lower() for s in suffixes]
    return supplemental


def supplemental_mtime(path: Path) -> float | None:
    """Modification time of the supplemental list, ``None`` if it does not exist."""
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return None
