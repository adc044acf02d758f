#!/usr/bin/env python3
"""
LinkedIn Public Profile Scraper - CLI

Extracts the publicly visible part of a LinkedIn profile (what a logged-out
visitor sees) and appends it to a JSON file.

Usage:
    python scraper.py <LINKEDIN_PROFILE_URL>

Example:
    python scraper.py https://www.linkedin.com/in/johndoe/
    HEADLESS=true MAX_RETRIES=5 python scraper.py https://www.linkedin.com/in/johndoe/
"""

import argparse
import asyncio
import json
import os
import sys
from urllib.parse import urlparse

from profile_scraper_pkg import scraper_logging as log
from profile_scraper_pkg.config import ScraperConfig
from profile_scraper_pkg.controller import scrape_profile
from profile_scraper_pkg.errors import ExhaustedRetries, InvalidInputUrl
from profile_scraper_pkg.storage import JsonFileStore, persist


ENV_HELP = """
Environment Variables:
  HEADLESS=true|false      Run in headless mode (default: false)
  MAX_RETRIES=n            Maximum attempts on auth wall or failure (default: 3)
  TIMEOUT=n                Page operation timeout in ms (default: 30000)
  NAVIGATION_TIMEOUT=n     Navigation timeout in ms (default: 60000)
  OUTPUT_FILE=path         Output JSON file (default: linkedin_public_profile.json)
  OUTPUT_MODE=append|single  Append to a list or write one record (default: append)
  DEBUG=true|false         Enable debug logging and failure snapshots (default: false)
"""


def is_valid_profile_url(url: str) -> bool:
    """A profile URL is http(s) on linkedin.com with an /in/ or /pub/ path."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return (
        parsed.scheme in ("http", "https")
        and "linkedin.com" in (parsed.hostname or "")
        and ("/in/" in parsed.path or "/pub/" in parsed.path)
    )


def validate_url(url: str) -> str:
    if not is_valid_profile_url(url):
        raise InvalidInputUrl(
            f"Invalid LinkedIn profile URL: {url} "
            "(expected e.g. https://www.linkedin.com/in/username/)"
        )
    return url


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        description="LinkedIn Public Profile Scraper - extract logged-out profile data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=ENV_HELP,
    )


def main(argv=None, environ=None, store=None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = build_parser()
    parser.add_argument(
        "url",
        nargs="?",
        help="LinkedIn profile URL to scrape (e.g., https://www.linkedin.com/in/username/)",
    )
    args = parser.parse_args(argv)

    if not args.url:
        print("Error: Please provide a LinkedIn profile URL", file=sys.stderr)
        parser.print_usage(sys.stderr)
        print(ENV_HELP, file=sys.stderr)
        return 1

    try:
        url = validate_url(args.url)
    except InvalidInputUrl as e:
        log.error(str(e))
        return 1

    config = ScraperConfig.from_env(os.environ if environ is None else environ)
    store = store or JsonFileStore()

    try:
        state = asyncio.run(scrape_profile(url, config))
    except ExhaustedRetries as e:
        for attempt in e.attempts:
            log.error(f"  attempt {attempt.attempt_index}: {attempt.outcome.value} {attempt.detail}")
            if config.debug and attempt.debug:
                log.error(f"    trail: {' | '.join(attempt.debug)}")
        log.error(f"Fatal error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n⚠️ Interrupted by user")
        return 130
    except Exception as e:
        log.error(f"Fatal error: {e}")
        return 1

    record = state.record
    log.info("=" * 70)
    log.info("EXTRACTED DATA")
    log.info("=" * 70)
    # stdout first: a failed write must not lose the record
    print(json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False))

    try:
        persist(store, config, record)
    except OSError as e:
        log.error(f"Could not write {config.output_file}: {e}")
        return 1
    log.success("SCRAPING COMPLETED SUCCESSFULLY!")
    log.info(f"Output file: {config.output_file}")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
