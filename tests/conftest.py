from __future__ import annotations

import pytest

from deprecation_crawler.domain.entities import RepositoryInfo
from fakes import FakeLookup, FakeSleep, make_repo_info


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def fake_lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture
def repo_info() -> RepositoryInfo:
    return make_repo_info()
