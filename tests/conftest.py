import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

import pytest
import structlog

from domain_parser.catalog import SuffixCatalog
from domain_parser.parser import DomainParser

NOW = 1_700_000_000

SUFFIX_LIST = """\
// This Source Code Form is subject to the terms of the Mozilla Public
// License, v. 2.0.

// ===BEGIN ICANN DOMAINS===

// com : https://en.wikipedia.org/wiki/.com
com

// uk : https://en.wikipedia.org/wiki/.uk
uk
ac.uk
co.uk
gov.uk
*.sch.uk

// au : https://en.wikipedia.org/wiki/.au
au
com.au
net.au

// fr : https://en.wikipedia.org/wiki/.fr
fr
gouv.fr

// jp : https://en.wikipedia.org/wiki/.jp
jp
*.kawasaki.jp
!city.kawasaki.jp

// name : http://www.iana.org/domains/root/db/name.html
name

// xn--p1ai ("rf", Russian-Cyrillic) : RU
рф

// ===END ICANN DOMAINS===
// ===BEGIN PRIVATE DOMAINS===

// Google, Inc.
blogspot.com

// ===END PRIVATE DOMAINS===
"""

SUPPLEMENTAL = """\
com:
  - uk.com
  - com
de:
  - com.de
"""


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture()
def supplemental_path(tmp_path: Path) -> Path:
    path = tmp_path / "additional.yml"
    path.write_text(SUPPLEMENTAL, encoding="utf-8")
    os.utime(path, (NOW - 3600, NOW - 3600))
    return path


@pytest.fixture()
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "tlds.json"


@pytest.fixture()
def fetched_urls() -> list:
    return []


@pytest.fixture()
def make_catalog(cache_path: Path, supplemental_path: Path, fetched_urls: list):
    def fetch_suffix_list(url, timeout):
        fetched_urls.append(url)
        return SUFFIX_LIST.encode("utf-8")

    def build(fetcher=fetch_suffix_list, **kwargs) -> SuffixCatalog:
        return SuffixCatalog(
            cache_path,
            supplemental_path,
            source_url="https://suffixes.test/list.dat",
            fetcher=fetcher,
            clock=lambda: NOW,
            **kwargs,
        )

    return build


@pytest.fixture()
def catalog(make_catalog) -> SuffixCatalog:
    return make_catalog()


@pytest.fixture()
def populated_cache(catalog: SuffixCatalog, cache_path: Path) -> Path:
    catalog.persist(catalog.ingest(SUFFIX_LIST))
    return cache_path


@pytest.fixture()
def parser(catalog: SuffixCatalog, populated_cache: Path) -> DomainParser:
    return DomainParser(catalog)
