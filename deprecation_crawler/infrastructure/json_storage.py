from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Sequence

from deprecation_crawler.domain.entities import EnrichedRecord, is_deprecated
from deprecation_crawler.domain.interfaces import IRecordStorage

log = logging.getLogger(__name__)


class JsonRecordStorage(IRecordStorage):
    """
    Concrete implementation of IRecordStorage writing a pretty-printed JSON array.

    persist() writes in two phases:
      1. the full collection goes to disk first
      2. that file is read back, filtered, and overwritten with the subset
    so a crash during filtering leaves the unfiltered data on disk.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _write(self, payload: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        self._path.write_text(text + "\n", encoding="utf-8")

    def _read(self) -> list[EnrichedRecord]:
        with self._path.open(encoding="utf-8") as f:
            return [EnrichedRecord.from_dict(item) for item in json.load(f)]

    def persist(
        self,
        records: Sequence[EnrichedRecord],
        predicate: Callable[[EnrichedRecord], bool] = is_deprecated,
    ) -> int:
        self._write([r.to_dict() for r in records])
        log.info("Saved %d records to %s", len(records), self._path)

        kept = [r for r in self._read() if predicate(r)]
        self._write([r.to_dict() for r in kept])
        log.info("Filtering done | kept %d/%d records in %s", len(kept), len(records), self._path)
        return len(kept)
