"""
Fetch outcomes for a single page request.

The listing client never raises for HTTP or transport problems. It returns
one of these values instead and the retry loop decides what happens next:

  Success         -> records to enrich
  RateLimited     -> long cooldown, then retry
  TransientError  -> short delay, then retry
  FatalError      -> give up on this page (the run carries on)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from .entities import RawRecord


@dataclass(frozen=True)
class Success:
    records: tuple[RawRecord, ...]


@dataclass(frozen=True)
class RateLimited:
    pass


@dataclass(frozen=True)
class TransientError:
    cause: str


@dataclass(frozen=True)
class FatalError:
    cause: str


FetchOutcome = Union[Success, RateLimited, TransientError, FatalError]
