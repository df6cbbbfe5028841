"""Download the raw public suffix list document."""

from __future__ import annotations

from typing import Callable

import httpx
import structlog

from .errors import SourceUnreachable

log = structlog.get_logger()

Fetcher = Callable[[str, float], bytes]


def fetch(url: str, timeout: float = 30.0) -> bytes:
    """Return the body of ``url``, raising ``SourceUnreachable`` on any HTTP failure."""
    log.info("fetching_suffix_list", url=url, timeout=timeout)
    try:
        response = httpx.get(url, follow_redirects=True, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        log.warning("suffix_list_fetch_failed", url=url, error=str(exc))
        raise SourceUnreachable(f"Could not fetch suffix list from {url}: {exc}") from exc

    log.info("suffix_list_fetched", url=url, size=len(response.content))
    return response.content
