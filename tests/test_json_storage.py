import json

import pytest

from deprecation_crawler.domain.entities import EnrichedRecord, is_deprecated
from deprecation_crawler.infrastructure.json_storage import JsonRecordStorage
from fakes import make_repo_info


@pytest.fixture
def records():
    return [
        EnrichedRecord("old-pkg", "https://github.com/acme/old-pkg", "use new-pkg", make_repo_info("acme", "old-pkg")),
        EnrichedRecord("fine-pkg", None, None),
        EnrichedRecord("blank-pkg", None, "   "),
        EnrichedRecord("ünïcode", None, "deprecated — see docs"),
    ]


def test_is_deprecated():
    assert is_deprecated(EnrichedRecord("a", None, "gone"))
    assert not is_deprecated(EnrichedRecord("a", None, None))
    assert not is_deprecated(EnrichedRecord("a", None, ""))
    assert not is_deprecated(EnrichedRecord("a", None, " \n"))


def test_persist_keeps_only_deprecated(tmp_path, records):
    storage = JsonRecordStorage(tmp_path / "projects.json")

    kept = storage.persist(records, is_deprecated)

    assert kept == 2
    data = json.loads((tmp_path / "projects.json").read_text(encoding="utf-8"))
    assert [item["name"] for item in data] == ["old-pkg", "ünïcode"]
    assert data[0]["github"]["name_with_owner"] == "acme/old-pkg"
    assert data[0]["github"]["created_at"] == "2015-03-01T12:00:00+00:00"
    assert data[1]["github"] is None


def test_output_is_pretty_printed_utf8(tmp_path, records):
    path = tmp_path / "projects.json"
    JsonRecordStorage(path).persist(records, is_deprecated)

    text = path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {\n")
    assert text.endswith("]\n")
    assert "ünïcode" in text


def test_persist_is_idempotent(tmp_path, records):
    path = tmp_path / "projects.json"
    storage = JsonRecordStorage(path)

    storage.persist(records, is_deprecated)
    first = path.read_bytes()
    storage.persist(records, is_deprecated)

    assert path.read_bytes() == first


def test_round_trip_restores_records(tmp_path, records):
    path = tmp_path / "projects.json"

    JsonRecordStorage(path).persist(records, lambda r: True)

    restored = [EnrichedRecord.from_dict(item) for item in json.loads(path.read_text(encoding="utf-8"))]
    assert restored == records


def test_full_set_is_written_before_filtering(tmp_path, records):
    path = tmp_path / "projects.json"
    seen_on_disk = []

    def predicate(record):
        if not seen_on_disk:
            seen_on_disk.extend(item["name"] for item in json.loads(path.read_text(encoding="utf-8")))
        return False

    kept = JsonRecordStorage(path).persist(records, predicate)

    assert kept == 0
    assert seen_on_disk == [r.name for r in records]
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_creates_missing_parent_directory(tmp_path):
    path = tmp_path / "out" / "nested" / "projects.json"

    JsonRecordStorage(path).persist([EnrichedRecord("a", None, "x")], is_deprecated)

    assert path.exists()
