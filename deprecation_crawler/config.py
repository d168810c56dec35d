from __future__ import annotations
import argparse
from dataclasses import dataclass
from typing import Mapping, Sequence
from deprecation_crawler.domain.errors import ConfigurationError

DEFAULT_PAGES       = 2
DEFAULT_PER_PAGE    = 20
DEFAULT_CONCURRENCY = 2
DEFAULT_OUTPUT      = "projects.json"
DEFAULT_PLATFORM    = "npm"


@dataclass(frozen=True)
class CrawlConfig:
    """Immutable run parameters, fixed before any worker starts."""
    api_key:      str
    github_token: str
    pages:        int
    per_page:     int
    concurrency:  int
    output:       str
    platform:     str
    log_level:    str


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crawl libraries.io for npm packages, enrich them with GitHub data "
                    "and save the deprecated ones"
    )
    parser.add_argument(
        "--pages",
        type    = int,
        default = DEFAULT_PAGES,
        help    = f"Number of listing pages to crawl (default: {DEFAULT_PAGES})",
    )
    parser.add_argument(
        "--per-page",
        type    = int,
        default = DEFAULT_PER_PAGE,
        help    = f"Packages per page (default: {DEFAULT_PER_PAGE})",
    )
    parser.add_argument(
        "--concurrency",
        type    = int,
        default = DEFAULT_CONCURRENCY,
        help    = f"Number of concurrent workers, keep it small (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--output",
        default = DEFAULT_OUTPUT,
        help    = f"JSON output file (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--platform",
        default = DEFAULT_PLATFORM,
        help    = f"libraries.io platform to search (default: {DEFAULT_PLATFORM})",
    )
    parser.add_argument(
        "--log-level",
        default = "INFO",
        choices = ["DEBUG", "INFO", "WARNING", "ERROR"],
        help    = "Logging verbosity (default: INFO)",
    )
    return parser


def load_config(argv: Sequence[str] | None, environ: Mapping[str, str]) -> CrawlConfig:
    """
    Parse CLI flags and read credentials from the environment.
    Raises ConfigurationError with a clear message if anything required is missing.
    """
    args = build_parser().parse_args(argv)

    api_key = environ.get("LIBRARIES_API_KEY")
    token   = environ.get("GITHUB_TOKEN")

    if not api_key:
        raise ConfigurationError("LIBRARIES_API_KEY environment variable is required")
    if not token:
        raise ConfigurationError("GITHUB_TOKEN environment variable is required")

    for flag, value in (("--pages", args.pages), ("--per-page", args.per_page), ("--concurrency", args.concurrency)):
        if value < 1:
            raise ConfigurationError(f"{flag} must be at least 1 (got {value})")

    return CrawlConfig(
        api_key      = api_key,
        github_token = token,
        pages        = args.pages,
        per_page     = args.per_page,
        concurrency  = args.concurrency,
        output       = args.output,
        platform     = args.platform,
        log_level    = args.log_level,
    )
