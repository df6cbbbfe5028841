"""Split arbitrary strings into registrable label and public suffix."""

from __future__ import annotations

import codecs
import re

import structlog

from . import idna_codec
from .catalog import SuffixCatalog
from .config import Settings, settings as default_settings
from .errors import CacheUnavailable, CacheWriteError, DomainParserError, EncodingError, UnparsableString
from .models import ParseResult

log = structlog.get_logger()

MAX_LABEL_LENGTH = 63

# Group whose multi-level names are kept whole instead of collapsed
UNCOLLAPSED_GROUP = "name"

_HOST_PART = re.compile(r"^((http|https|ftp|ftps|news|ssh|sftp|gopher):/{2,})?([^/]+)")
_INVALID_HOSTNAME_CHARS = re.compile(r"[^a-zA-Z0-9\-.]")


def scrub_hostname(value: str) -> tuple[str, bool]:
    """Drop characters not allowed in a hostname.

    Returns the cleaned string and whether anything had to be removed.
    """
    cleaned, removed = _INVALID_HOSTNAME_CHARS.subn("", value)
    return cleaned, removed > 0


class DomainParser:
    def __init__(self, catalog: SuffixCatalog | None = None, settings: Settings | None = None) -> None:
        self.settings = (settings or default_settings).model_copy()
        self.catalog = catalog or SuffixCatalog.from_settings(self.settings)
        self.throw_exceptions = self.settings.throw_exceptions
        self.encoding = self.settings.encoding

    def set_throw_exceptions(self, throw_exceptions: bool = False) -> None:
        """Raise parse errors instead of returning them inside the result."""
        self.throw_exceptions = bool(throw_exceptions)

    def set_encoding(self, encoding: str = "utf-8") -> None:
        """Encoding used to decode ``bytes`` input."""
        codecs.lookup(encoding)
        self.encoding = encoding

    def set_cache_ttl(self, seconds: int = 432000) -> None:
        self.catalog.set_cache_ttl(seconds)

    def set_reload_always(self, reload_always: bool = False) -> None:
        self.catalog.set_reload_always(reload_always)

    def is_valid(self, candidate: str | bytes) -> bool:
        """Whether ``candidate`` is a hostname made of allowed characters only."""
        return self.parse(candidate, "").valid_hostname

    def parse(self, raw: str | bytes, default_suffix: str | None = None) -> ParseResult:
        """Parse ``raw`` into label and suffix.

        Strings without a known suffix are treated as a bare label and get
        ``default_suffix`` attached. Errors are returned in ``ParseResult.error``
        unless ``throw_exceptions`` is set.
        """
        if default_suffix is None:
            default_suffix = self.settings.default_suffix
        try:
            self._ensure_catalog()
            return self._decompose(raw, default_suffix)
        except DomainParserError as exc:
            if self.throw_exceptions:
                raise
            log.debug("parse_failed", input=raw, error=exc.message, kind=type(exc).__name__)
            return ParseResult(error=exc.message)

    def _ensure_catalog(self) -> None:
        if self.catalog.loaded:
            return
        try:
            self.catalog.ensure_loaded()
        except CacheUnavailable:
            log.info("ingesting_suffix_list", reason="cache_unavailable", url=self.catalog.source_url)
            try:
                self.catalog.refresh()
            except CacheWriteError as exc:
                log.warning("suffix_cache_not_persisted", error=exc.message)

    def _host_token(self, raw: str | bytes) -> str:
        if isinstance(raw, bytes):
            try:
                raw = raw.decode(self.encoding)
            except UnicodeDecodeError as exc:
                raise EncodingError(f"Input is not valid {self.encoding}.") from exc

        match = _HOST_PART.match(raw.strip().lower())
        return match.group(3) if match else ""

    def _match_suffix(self, encoded: str) -> tuple[str, str, str]:
        # First hit in catalog order wins; groups are ordered longest suffix first
        for group in self.catalog.groups():
            for suffix in group.suffixes:
                if encoded == suffix:
                    return "", suffix, group.name
                if encoded.endswith("." + suffix):
                    label = encoded[: -(len(suffix) + 1)].strip(".")
                    if "." in label and group.name != UNCOLLAPSED_GROUP:
                        label = label.rsplit(".", 1)[-1]
                    if " " in label:
                        label = label.split(" ")[-1]
                    return label, suffix, group.name
        return "", "", ""

    def _decompose(self, raw: str | bytes, default_suffix: str) -> ParseResult:
        token = self._host_token(raw)
        encoded = idna_codec.encode(token)
        label, suffix, group = self._match_suffix(encoded)
        valid_hostname = True

        if not label and not suffix and len(encoded) <= MAX_LABEL_LENGTH:
            cleaned, had_invalid = scrub_hostname(encoded)
            valid_hostname = not had_invalid
            label = idna_codec.decode(cleaned)
            return ParseResult(
                label=label,
                label_encoded=idna_codec.encode(label),
                suffix=default_suffix,
                suffix_encoded=default_suffix,
                group=group,
                valid_hostname=valid_hostname,
            )

        if label and suffix and len(label) <= MAX_LABEL_LENGTH:
            cleaned, had_invalid = scrub_hostname(label)
            valid_hostname = not had_invalid
            label = idna_codec.decode(cleaned)
        elif suffix and not label:
            valid_hostname = False
        else:
            raise UnparsableString("Unparsable domain name.")

        return ParseResult(
            label=label,
            label_encoded=idna_codec.encode(label),
            suffix=idna_codec.decode(suffix),
            suffix_encoded=suffix,
            group=group,
            valid_hostname=valid_hostname,
        )
