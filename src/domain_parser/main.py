"""Command line interface: parse domain names from arguments."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import structlog

from .catalog import SuffixCatalog
from .config import settings
from .errors import CacheWriteError, DomainParserError
from .logging_config import setup_logging
from .output import FORMATS, format_line, render
from .parser import DomainParser

log = structlog.get_logger()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Split domain names into label and public suffix")
    parser.add_argument("inputs", nargs="+", help="URLs, hostnames or bare names to parse")
    parser.add_argument("--default-suffix", default=settings.default_suffix, help="Suffix for names without one")
    parser.add_argument("--format", choices=FORMATS, default=settings.output_format, help="Output format")
    parser.add_argument("--cache-path", type=Path, help="Suffix list cache file")
    parser.add_argument("--refresh", action="store_true", help="Re-ingest the suffix list before parsing")
    parser.add_argument("--check", action="store_true", help="Only report whether each input is a valid hostname")
    parser.add_argument("--throw", action="store_true", help="Abort on the first parse error")
    parser.add_argument("--verbose", action="store_true", help="Log catalog activity to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    setup_logging(logging.INFO if args.verbose else logging.WARNING)

    run_settings = settings.model_copy()
    if args.cache_path is not None:
        run_settings.cache_path = args.cache_path
    catalog = SuffixCatalog.from_settings(run_settings)
    domain_parser = DomainParser(catalog, run_settings)
    domain_parser.set_throw_exceptions(args.throw)

    if args.refresh:
        domain_parser.set_reload_always(True)
        try:
            catalog.refresh_if_stale()
        except CacheWriteError as exc:
            log.warning("suffix_cache_not_persisted", error=exc.message)
        except DomainParserError as exc:
            log.error("suffix_list_refresh_failed", error=exc.message)
        domain_parser.set_reload_always(False)
        if not catalog.loaded:
            return 1

    failed = False
    for raw in args.inputs:
        if args.check:
            valid = domain_parser.is_valid(raw)
            failed = failed or not valid
            print(f"{raw}\t{'valid' if valid else 'invalid'}")
            continue

        try:
            result = domain_parser.parse(raw, args.default_suffix)
        except DomainParserError as exc:
            log.error("parse_aborted", input=raw, error=exc.message)
            return 1
        failed = failed or result.error is not None

        rendered = render(result, args.format)
        if args.format == "object":
            print(format_line(rendered))
        elif args.format == "yaml":
            print(rendered, end="")
        else:
            print(rendered)

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
