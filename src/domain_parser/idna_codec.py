"""IDNA conversion between Unicode domain names and their ASCII form.

Conversion works label by label. Pure-ASCII labels are passed through
untouched so that malformed tokens (spaces, punctuation) survive encoding and
can be reported by hostname validation later on.
"""

from __future__ import annotations

import idna

from .errors import EncodingError

ACE_PREFIX = "xn--"


def _encode_label(label: str) -> str:
    if label.isascii():
        return label
    try:
        mapped = idna.uts46_remap(label, std3_rules=False, transitional=False)
        return idna.alabel(mapped).decode("ascii")
    except (idna.IDNAError, UnicodeError) as exc:
        raise EncodingError(f"Could not encode label {label!r}: {exc}") from exc


def _decode_label(label: str) -> str:
    if not label.lower().startswith(ACE_PREFIX):
        return label
    try:
        return idna.ulabel(label)
    except (idna.IDNAError, UnicodeError) as exc:
        raise EncodingError(f"Could not decode label {label!r}: {exc}") from exc


def encode(name: str) -> str:
    """Convert a (possibly Unicode) domain name to its ASCII-compatible form."""
    return ".".join(_encode_label(label) for label in name.split("."))


def decode(name: str) -> str:
    """Convert ``xn--`` labels of an ASCII-compatible name back to Unicode."""
    return ".".join(_decode_label(label) for label in name.split("."))
