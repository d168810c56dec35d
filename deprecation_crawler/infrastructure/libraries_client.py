from __future__ import annotations

import logging

import httpx

from deprecation_crawler.domain.entities import PageRequest, RawRecord
from deprecation_crawler.domain.interfaces import IPageFetcher
from deprecation_crawler.domain.outcomes import (
    FatalError,
    FetchOutcome,
    RateLimited,
    Success,
    TransientError,
)

log = logging.getLogger(__name__)

LIBRARIES_API_BASE = "https://libraries.io/api"
DEFAULT_PLATFORM   = "npm"
DEFAULT_SORT       = "rank"
DEFAULT_ORDER      = "desc"
REQUEST_TIMEOUT    = 30.0


def _text_or_none(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


class LibrariesIoClient(IPageFetcher):
    """
    Concrete implementation of IPageFetcher for the libraries.io search API.

    One call to fetch() is one HTTP request. Retrying is the caller's job;
    this class only classifies what came back. The httpx.AsyncClient is
    injected so the caller owns its lifecycle.
    """

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        base_url: str = LIBRARIES_API_BASE,
        platform: str = DEFAULT_PLATFORM,
        sort: str = DEFAULT_SORT,
        order: str = DEFAULT_ORDER,
    ) -> None:
        self._api_key  = api_key
        self._client   = client
        self._url      = f"{base_url.rstrip('/')}/search"
        self._platform = platform
        self._sort     = sort
        self._order    = order

    # Anti-Corruption Layer
    @staticmethod
    def _parse_item(item: object) -> RawRecord | None:
        """
        Translate one package object from the API into a RawRecord.

        The API sends:              We store as:
          "repository_url"      →   repository_url
          "deprecation_reason"  →   deprecation_reason ("" becomes None)

        Non-string URL or reason values are dropped to None.
        """
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            log.debug("Skipping malformed package entry: %.80r", item)
            return None
        return RawRecord(
            name               = item["name"],
            repository_url     = _text_or_none(item.get("repository_url")),
            deprecation_reason = _text_or_none(item.get("deprecation_reason")),
        )

    @staticmethod
    def _failure(cause: str, remaining_retries: int) -> FetchOutcome:
        if remaining_retries > 0:
            return TransientError(cause)
        return FatalError(cause)

    # IPageFetcher implementation
    async def fetch(self, request: PageRequest, remaining_retries: int) -> FetchOutcome:
        params = {
            "api_key":   self._api_key,
            "platforms": self._platform,
            "sort":      self._sort,
            "order":     self._order,
            "page":      request.page,
            "per_page":  request.per_page,
        }

        try:
            response = await self._client.get(
                self._url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=REQUEST_TIMEOUT,
            )
        except httpx.RequestError as exc:
            return self._failure(f"request error: {exc!r}", remaining_retries)

        if response.status_code == 429:
            return RateLimited()

        if not response.is_success:
            return self._failure(
                f"HTTP {response.status_code}: {response.text[:200]}",
                remaining_retries,
            )

        try:
            body = response.json()
        except ValueError as exc:
            return self._failure(f"invalid JSON body: {exc}", remaining_retries)

        if not isinstance(body, list):
            return self._failure(
                f"expected a JSON array, got {type(body).__name__}",
                remaining_retries,
            )

        records = tuple(parsed for item in body if (parsed := self._parse_item(item)) is not None)
        return Success(records)
