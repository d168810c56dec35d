"""
GitHub repository info lookup
-----------------------------
Looks up a list of owner/name repositories through the same GraphQL client
the crawler uses and logs stars, forks, URL and description for each.

    python repo_info.py vpulim/node-soap cloudinary/cloudinary_npm
    python repo_info.py --file repos.txt

A failing lookup is logged and the script moves on to the next repository.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Sequence

import httpx

from deprecation_crawler.domain.errors import RepositoryLookupError
from deprecation_crawler.domain.interfaces import IRepositoryLookup
from deprecation_crawler.infrastructure.github_client import GitHubClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_repo_path(repo_path: str) -> tuple[str, str]:
    """Split "owner/name" (a trailing slash is allowed) into its two parts."""
    parts = repo_path.strip().rstrip("/").split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"expected owner/name, got {repo_path!r}")
    return parts[0], parts[1]


async def report(lookup: IRepositoryLookup, repo_paths: Sequence[str]) -> int:
    """Look up each repository in turn. Returns how many lookups failed."""
    failures = 0
    for repo_path in repo_paths:
        try:
            owner, name = parse_repo_path(repo_path)
            log.info("📌 Fetching %s/%s", owner, name)
            repo = await lookup.fetch_repository_info(owner, name)
        except (ValueError, RepositoryLookupError) as exc:
            log.error("❌ Could not fetch info for %s: %s", repo_path, exc)
            failures += 1
            continue

        log.info("✅ Repository: %s", repo.name_with_owner)
        log.info("   🌟 Stars: %d", repo.star_count)
        log.info("   🍴 Forks: %d", repo.fork_count)
        log.info("   🔗 URL: %s", repo.url)
        log.info("   📝 Description: %s", repo.description or "no description")
    return failures


async def run(token: str, repo_paths: Sequence[str]) -> int:
    async with httpx.AsyncClient() as client:
        failures = await report(GitHubClient(token=token, client=client), repo_paths)
    log.info("Done | %d looked up | %d failed", len(repo_paths) - failures, failures)
    return failures


def _read_repo_file(path: str) -> list[str]:
    with open(path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print GitHub metadata for owner/name repositories")
    parser.add_argument("repos", nargs="*", help="Repositories as owner/name")
    parser.add_argument("--file", help="Text file with one owner/name per line")
    args = parser.parse_args()

    token = os.environ.get("GITHUB_TOKEN")
    if not token:
        log.error("GITHUB_TOKEN environment variable is required")
        sys.exit(1)

    repo_paths = list(args.repos)
    if args.file:
        repo_paths += _read_repo_file(args.file)
    if not repo_paths:
        parser.error("give at least one owner/name or --file")

    asyncio.run(run(token, repo_paths))
