"""
main.py: Dependency Wiring (Composition Root)
------------------------------------------------
Wires all the pieces together and runs the crawl. No business logic here:
  1. Reads configuration (CLI flags + environment variables)
  2. Creates concrete implementations of each interface
  3. Injects them into the classes that need them
  4. Calls the top-level use case (CrawlApplicationService.execute)
  5. Reports the result and exits

Dependency graph:
                         main.py  (wires everything)
                            │
              ┌─────────────┴──────────────┐
              ▼                            ▼
    CrawlApplicationService         JsonRecordStorage
              │
              ▼
       PaginationEngine
              │
       ┌──────┴────────┐
       ▼               ▼
RetryingPageFetcher  RecordEnricher
       │               │
       ▼               ▼
LibrariesIoClient   GitHubClient
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import httpx

# Application layer
from deprecation_crawler.application.crawl_service import CrawlApplicationService
from deprecation_crawler.application.enricher import RecordEnricher
from deprecation_crawler.application.orchestrator import PaginationEngine
from deprecation_crawler.application.retry_policy import RetryingPageFetcher

# Infrastructure layer
from deprecation_crawler.infrastructure.github_client import GitHubClient
from deprecation_crawler.infrastructure.json_storage import JsonRecordStorage
from deprecation_crawler.infrastructure.libraries_client import LibrariesIoClient

from deprecation_crawler.config import CrawlConfig, load_config
from deprecation_crawler.domain.errors import ConfigurationError

log = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every request at INFO, which drowns out page progress
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def build_and_run(config: CrawlConfig) -> int:
    """
    Wires all dependencies together and executes the crawl use case.
    Returns the process exit code.
    """
    listing_http = httpx.AsyncClient()
    github_http  = httpx.AsyncClient()

    try:
        # Infrastructure implementations
        listing_client = LibrariesIoClient(
            api_key  = config.api_key,
            client   = listing_http,
            platform = config.platform,
        )
        github_client = GitHubClient(
            token  = config.github_token,
            client = github_http,
        )
        storage = JsonRecordStorage(config.output)

        # Application services
        engine = PaginationEngine(
            fetcher  = RetryingPageFetcher(listing_client),
            enricher = RecordEnricher(github_client),
        )
        crawl_service = CrawlApplicationService(
            engine  = engine,
            storage = storage,
        )

        result = await crawl_service.execute(config.pages, config.per_page, config.concurrency)

        if result.status == "success":
            log.info(
                "✅ Done | %d deprecated of %d packages saved to %s | %d page(s) skipped | %.0fs",
                result.persisted_records,
                result.total_records,
                storage.path,
                len(result.failed_pages),
                result.elapsed_secs,
            )
            return 0

        log.error(
            "❌ Failed | %d records collected before failure | error: %s",
            result.total_records,
            result.error_message,
        )
        return 1

    finally:
        # Always clean up connections, even if an exception occurred
        await listing_http.aclose()
        await github_http.aclose()


def main(argv: list[str] | None = None) -> int:
    try:
        config = load_config(argv, os.environ)
    except ConfigurationError as exc:
        _setup_logging("INFO")
        log.error("%s", exc)
        return 1

    _setup_logging(config.log_level)
    return asyncio.run(build_and_run(config))


if __name__ == "__main__":
    sys.exit(main())
