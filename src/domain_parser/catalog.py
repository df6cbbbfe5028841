"""Suffix catalog: cached public suffix list grouped by top-level label.

The catalog is loaded from a JSON cache file and refreshed from the ICANN
section of the public suffix list. Suffixes are grouped by their right-most
label and each group is ordered longest first, so that a parser walking a
group in order always tries the most specific suffix first.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Callable

import structlog
from pydantic import ValidationError

from . import idna_codec
from .config import Settings
from .errors import CacheUnavailable, CacheWriteError, MalformedSource, SourceUnreachable
from .models import CatalogSnapshot, SuffixGroup
from .source import Fetcher, fetch
from .supplemental import load_supplemental, supplemental_mtime

log = structlog.get_logger()

DEFAULT_CACHE_TTL = 432000

_ICANN_SECTION = re.compile(
    r"//\s*===BEGIN ICANN DOMAINS===(.*?)//\s*===END ICANN DOMAINS===",
    re.DOTALL,
)


def _group_key(suffix: str) -> str:
    return suffix.rsplit(".", 1)[-1]


def _dedupe(suffixes: list[str]) -> list[str]:
    return list(dict.fromkeys(suffixes))


def _by_length(suffixes: list[str]) -> list[str]:
    # sorted() is stable: equal lengths keep ingestion order
    return sorted(suffixes, key=len, reverse=True)


class SuffixCatalog:
    def __init__(
        self,
        cache_path: Path,
        supplemental_path: Path,
        *,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        reload_always: bool = False,
        source_url: str = "https://publicsuffix.org/list/public_suffix_list.dat",
        fetch_timeout: float = 30.0,
        fetcher: Fetcher | None = None,
        encode: Callable[[str], str] = idna_codec.encode,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache_path = Path(cache_path)
        self.supplemental_path = Path(supplemental_path)
        self.cache_ttl = cache_ttl
        self.reload_always = reload_always
        self.source_url = source_url
        self.fetch_timeout = fetch_timeout
        self._fetcher = fetcher or fetch
        self._encode = encode
        self._clock = clock
        self._snapshot: CatalogSnapshot | None = None
        self._groups: tuple[SuffixGroup, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> SuffixCatalog:
        return cls(
            settings.cache_path,
            settings.supplemental_path,
            cache_ttl=settings.cache_ttl,
            reload_always=settings.reload_always,
            source_url=settings.source_url,
            fetch_timeout=settings.fetch_timeout,
            **kwargs,
        )

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> CatalogSnapshot | None:
        return self._snapshot

    @property
    def timestamp(self) -> int | None:
        return self._snapshot.timestamp if self._snapshot else None

    def groups(self) -> tuple[SuffixGroup, ...]:
        return self._groups

    def set_cache_ttl(self, seconds: int = DEFAULT_CACHE_TTL) -> None:
        self.cache_ttl = int(seconds)

    def set_reload_always(self, reload_always: bool = False) -> None:
        self.reload_always = bool(reload_always)

    def _install(self, snapshot: CatalogSnapshot) -> None:
        # groups are built before the snapshot is swapped in
        groups = snapshot.groups()
        self._groups = groups
        self._snapshot = snapshot

    def ensure_loaded(self) -> None:
        """Load the cache file unless a snapshot is already installed."""
        if self.loaded:
            return
        try:
            raw = self.cache_path.read_text(encoding="utf-8")
            snapshot = CatalogSnapshot.model_validate_json(raw)
        except (OSError, UnicodeDecodeError) as exc:
            log.info("suffix_cache_unavailable", path=str(self.cache_path), error=str(exc))
            raise CacheUnavailable(f"Could not open cache file {self.cache_path}.") from exc
        except ValidationError as exc:
            log.warning("suffix_cache_corrupt", path=str(self.cache_path), errors=exc.error_count())
            raise CacheUnavailable(f"Cache file {self.cache_path} is corrupt.") from exc

        self._install(snapshot)
        log.info(
            "suffix_cache_loaded",
            path=str(self.cache_path),
            groups=len(snapshot.content),
            timestamp=snapshot.timestamp,
        )

    def needs_refresh(self, now: float | None = None) -> bool:
        """Whether the installed snapshot should be re-ingested from source."""
        if self.reload_always:
            return True
        if self._snapshot is None:
            return True

        now = self._clock() if now is None else now
        if now - self._snapshot.timestamp > self.cache_ttl:
            log.info("suffix_cache_expired", age=int(now - self._snapshot.timestamp), ttl=self.cache_ttl)
            return True

        mtime = supplemental_mtime(self.supplemental_path)
        if mtime is not None and mtime > self._snapshot.timestamp:
            log.info("supplemental_list_changed", path=str(self.supplemental_path))
            return True
        return False

    def ingest(self, document: bytes | str) -> CatalogSnapshot:
        """Parse a public suffix list document into a new snapshot.

        Only the ICANN section is used. Exception rules (``!``) are dropped,
        wildcard rules (``*.``) are reduced to their base suffix. The
        supplemental list is merged in afterwards.
        """
        if isinstance(document, bytes):
            document = document.decode("utf-8", errors="replace")

        section = _ICANN_SECTION.search(document)
        if section is None:
            raise MalformedSource("Could not find ICANN domains in suffix list.")

        content: dict[str, list[str]] = {}
        for line in section.group(1).splitlines():
            line = line.strip()
            if not line or line.startswith("//") or "!" in line:
                continue
            if line.startswith("*."):
                line = line[2:]

            suffix = self._encode(line)
            content.setdefault(_group_key(suffix), []).append(suffix)

        parsed = sum(len(suffixes) for suffixes in content.values())
        for group, suffixes in load_supplemental(self.supplemental_path).items():
            content.setdefault(group, []).extend(suffixes)

        content = {group: _by_length(_dedupe(suffixes)) for group, suffixes in content.items()}
        snapshot = CatalogSnapshot(timestamp=int(self._clock()), content=content)
        log.info(
            "suffix_list_ingested",
            groups=len(content),
            parsed=parsed,
            total=snapshot.suffix_count(),
        )
        return snapshot

    def persist(self, snapshot: CatalogSnapshot | None = None) -> None:
        """Write ``snapshot`` (default: the installed one) to the cache file."""
        if snapshot is None:
            snapshot = self._snapshot
        if snapshot is None:
            raise CacheWriteError("No suffix list loaded, nothing to write.")

        payload = json.dumps(snapshot.model_dump(), indent=4, ensure_ascii=False) + "\n"
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.cache_path.parent, prefix=self.cache_path.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.cache_path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            log.error("suffix_cache_write_failed", path=str(self.cache_path), error=str(exc))
            raise CacheWriteError(f"Could not open cache file {self.cache_path} for writing.") from exc

        log.info("suffix_cache_written", path=str(self.cache_path), timestamp=snapshot.timestamp)

    def refresh(self) -> CatalogSnapshot:
        """Fetch, ingest and persist a new snapshot, then install it.

        Fetch and parse failures leave the installed snapshot untouched. A
        failed write still installs the new snapshot before the
        ``CacheWriteError`` propagates.
        """
        document = self._fetcher(self.source_url, self.fetch_timeout)
        snapshot = self.ingest(document)
        try:
            self.persist(snapshot)
        finally:
            self._install(snapshot)
        return snapshot

    def refresh_if_stale(self, now: float | None = None) -> bool:
        """Load the cache and re-ingest it when stale. Returns True if refreshed."""
        try:
            self.ensure_loaded()
        except CacheUnavailable:
            pass

        if not self.needs_refresh(now):
            return False

        try:
            self.refresh()
        except SourceUnreachable:
            if not self.loaded:
                raise
            log.warning("keeping_stale_suffix_list", timestamp=self.timestamp)
            return False
        return True
