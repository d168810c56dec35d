from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class PageRequest:
    """One page of the listing API, identified by a 1-based page number."""
    page:     int
    per_page: int

    def __post_init__(self) -> None:
        if self.page < 1 or self.per_page < 1:
            raise ValueError(
                f"page and per_page must be positive (got {self.page}, {self.per_page})"
            )


@dataclass(frozen=True)
class RawRecord:
    """
    Immutable package record as returned by the listing API.

    Field names are OURS, translated from the API's JSON keys by the
    listing client. An empty deprecation reason is stored as None.
    """
    name:               str
    repository_url:     str | None
    deprecation_reason: str | None


@dataclass(frozen=True)
class RepositoryInfo:
    """
    Repository metadata returned by the lookup collaborator.

    The crawl engine never looks inside this object; it is carried through
    to the output file as-is.
    """
    name_with_owner: str
    description:     str | None
    star_count:      int
    fork_count:      int
    url:             str
    is_archived:     bool
    is_fork:         bool
    created_at:      datetime | None
    updated_at:      datetime | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name_with_owner": self.name_with_owner,
            "description":     self.description,
            "star_count":      self.star_count,
            "fork_count":      self.fork_count,
            "url":             self.url,
            "is_archived":     self.is_archived,
            "is_fork":         self.is_fork,
            "created_at":      self.created_at.isoformat() if self.created_at else None,
            "updated_at":      self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepositoryInfo:
        created = data.get("created_at")
        updated = data.get("updated_at")
        return cls(
            name_with_owner = data["name_with_owner"],
            description     = data.get("description"),
            star_count      = data.get("star_count", 0),
            fork_count      = data.get("fork_count", 0),
            url             = data["url"],
            is_archived     = data.get("is_archived", False),
            is_fork         = data.get("is_fork", False),
            created_at      = datetime.fromisoformat(created) if created else None,
            updated_at      = datetime.fromisoformat(updated) if updated else None,
        )


@dataclass(frozen=True)
class EnrichedRecord:
    """
    A RawRecord plus its repository metadata.

    repository_meta is None when the record has no usable GitHub URL or
    the lookup failed. Neither case is a failure of the page.
    """
    name:               str
    repository_url:     str | None
    deprecation_reason: str | None
    repository_meta:    RepositoryInfo | None = None

    @classmethod
    def from_raw(cls, record: RawRecord, meta: RepositoryInfo | None = None) -> EnrichedRecord:
        return cls(
            name               = record.name,
            repository_url     = record.repository_url,
            deprecation_reason = record.deprecation_reason,
            repository_meta    = meta,
        )

    def to_dict(self) -> dict[str, Any]:
        # "github" is the key earlier output files used for the metadata
        return {
            "name":               self.name,
            "repository_url":     self.repository_url,
            "deprecation_reason": self.deprecation_reason,
            "github":             self.repository_meta.to_dict() if self.repository_meta else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnrichedRecord:
        meta = data.get("github")
        return cls(
            name               = data["name"],
            repository_url     = data.get("repository_url"),
            deprecation_reason = data.get("deprecation_reason"),
            repository_meta    = RepositoryInfo.from_dict(meta) if meta else None,
        )


@dataclass(frozen=True)
class PageFailure:
    """A page that was skipped after its retry budget ran out."""
    page:  int
    cause: str


@dataclass(frozen=True)
class PaginationReport:
    """What the pagination engine hands back once every worker has joined."""
    records:         tuple[EnrichedRecord, ...]
    failed_pages:    tuple[PageFailure, ...]
    pages_completed: int


@dataclass(frozen=True)
class CrawlResult:
    """
    Summary of one crawl: how many packages were aggregated, how many
    deprecated ones reached the output file, and which pages were skipped.
    status is "failed" only when persisting (or something unexpected) broke.
    """
    total_records:     int
    persisted_records: int
    pages_completed:   int
    failed_pages:      tuple[PageFailure, ...]
    status:            str
    elapsed_secs:      float
    error_message:     str | None = None


def is_deprecated(record: EnrichedRecord) -> bool:
    """Default output filter: keep packages that carry a non-blank deprecation reason."""
    return bool(record.deprecation_reason and record.deprecation_reason.strip())
