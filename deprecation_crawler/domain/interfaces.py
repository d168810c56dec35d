"""
Domain Layer: Interfaces (Abstract Contracts)
--------------------------------------------
What the infrastructure must provide, defined from the application's side.

  IPageFetcher       : one page of the package listing, classified
  IRepositoryLookup  : GitHub metadata for one owner/name pair
  IRecordStorage     : where the finished collection ends up

The pagination engine and the enricher depend only on these, so tests can
hand them fakes without touching the network or the disk.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Sequence

from .entities import EnrichedRecord, PageRequest, RepositoryInfo
from .outcomes import FetchOutcome


class IPageFetcher(ABC):
    """Contract for a client of the paginated package listing API."""

    @abstractmethod
    async def fetch(self, request: PageRequest, remaining_retries: int) -> FetchOutcome:
        """
        Perform exactly one request for `request` and classify the response.

        `remaining_retries` tells the fetcher whether a failure is still
        retryable (TransientError) or must be reported as FatalError.
        Must not raise for HTTP or transport failures.
        """
        ...


class IRepositoryLookup(ABC):
    """Contract for the secondary repository metadata source."""

    @abstractmethod
    async def fetch_repository_info(self, owner: str, name: str) -> RepositoryInfo:
        """
        Return metadata for `owner/name`.
        Raises RepositoryLookupError when the repository cannot be looked up.
        """
        ...


class IRecordStorage(ABC):
    """Contract for the final persistence step."""

    @abstractmethod
    def persist(
        self,
        records: Sequence[EnrichedRecord],
        predicate: Callable[[EnrichedRecord], bool],
    ) -> int:
        """Store `records`, keep only those matching `predicate`. Returns how many were kept."""
        ...
