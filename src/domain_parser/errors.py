"""Error kinds raised by the suffix catalog and the parser."""

from __future__ import annotations


class DomainParserError(Exception):
    """Base class for every error the package raises on purpose."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CacheUnavailable(DomainParserError):
    """The cache file is missing or cannot be deserialized."""


class SourceUnreachable(DomainParserError):
    """The remote suffix list could not be fetched."""


class MalformedSource(DomainParserError):
    """The fetched document has no ICANN section."""


class CacheWriteError(DomainParserError):
    """The cache file could not be written."""


class EncodingError(DomainParserError):
    """A string could not be converted to or from its IDNA form."""


class UnparsableString(DomainParserError):
    """The input cannot be split into label and suffix."""
