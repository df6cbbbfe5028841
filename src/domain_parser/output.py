from __future__ import annotations

from typing import Any

import yaml

from .models import ParseResult

FORMATS = ("object", "dict", "array", "json", "yaml")


def render(result: ParseResult, fmt: str = "object") -> Any:
    """Render a parse result as the model itself, a dict, JSON or YAML text."""
    match fmt:
        case "object":
            return result
        case "dict" | "array":
            return result.model_dump()
        case "json":
            return result.model_dump_json()
        case "yaml":
            return yaml.safe_dump(result.model_dump(), sort_keys=False, allow_unicode=True)
        case _:
            raise ValueError(f"Unknown output format {fmt!r}, expected one of {', '.join(FORMATS)}")


def format_line(result: ParseResult) -> str:
    """One-line human readable summary, used when printing ``object`` results."""
    if result.error:
        return f"error: {result.error}"
    status = "valid" if result.valid_hostname else "invalid"
    line = f"{result.label} | {result.suffix} | group: {result.group or '-'} | {status}"
    if result.label_encoded != result.label or result.suffix_encoded != result.suffix:
        line += f" | idn: {result.domain_encoded}"
    return line
