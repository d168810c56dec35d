from __future__ import annotations
import asyncio
import logging
import re
from typing import Sequence
from deprecation_crawler.domain.entities import EnrichedRecord, RawRecord
from deprecation_crawler.domain.interfaces import IRepositoryLookup

log = logging.getLogger(__name__)

MAX_CONCURRENT_LOOKUPS = 10

# Matches https://, git+https://, git://, ssh:// and git@github.com: forms
GITHUB_URL_RE = re.compile(r"(?:^|[/@.])github\.com[/:]+([^/#?\s]+)/([^/#?\s]+)", re.IGNORECASE)


def parse_github_url(url: str | None) -> tuple[str, str] | None:
    """
    Extract (owner, name) from a repository URL pointing at github.com.
    Returns None when the URL is missing or not a usable GitHub URL.
    """
    if not isinstance(url, str) or not url:
        return None
    match = GITHUB_URL_RE.search(url.strip())
    if not match:
        return None
    owner, name = match.group(1), match.group(2)
    if name.lower().endswith(".git"):
        name = name[:-4]
    if not owner or not name:
        return None
    return owner, name


class RecordEnricher:
    """
    Adds GitHub repository metadata to package records.

    A failed lookup never escapes this class: it is logged and the record
    comes back with repository_meta=None. At most `max_concurrent` lookups
    are in flight at once.
    """

    def __init__(self, lookup: IRepositoryLookup, max_concurrent: int = MAX_CONCURRENT_LOOKUPS) -> None:
        self._lookup    = lookup
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def enrich(self, record: RawRecord) -> EnrichedRecord:
        parsed = parse_github_url(record.repository_url)
        if parsed is None:
            return EnrichedRecord.from_raw(record)

        owner, name = parsed
        try:
            async with self._semaphore:
                meta = await self._lookup.fetch_repository_info(owner, name)
        except Exception as exc:
            log.warning("Failed to fetch GitHub info for %s: %s", record.repository_url, exc)
            return EnrichedRecord.from_raw(record)

        return EnrichedRecord.from_raw(record, meta)

    async def enrich_page(self, records: Sequence[RawRecord]) -> list[EnrichedRecord]:
        """Enrich every record of one page concurrently; output order matches input order."""
        return list(await asyncio.gather(*[self.enrich(r) for r in records]))
