from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

from domain import ContractConfig
from repository import SqlKeyValueStore, WorkHoursRepository
from session import TrackerSession


class InMemoryStore:
    def __init__(self, data=None):
        self.data = dict(data or {})
        self.writes = 0

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.writes += 1
        self.data[key] = value


class FailingStore(InMemoryStore):
    def set(self, key, value):
        raise OperationalError("INSERT", {}, Exception("disk full"))


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def repo(store):
    return WorkHoursRepository(store)


@pytest.fixture()
def tracker(repo):
    return TrackerSession.load(repo)


@pytest.fixture()
def sqlite_repo(tmp_path: Path):
    url = f"sqlite:///{(tmp_path / 'workhours.db').as_posix()}"
    return WorkHoursRepository(SqlKeyValueStore(url))


@pytest.fixture()
def default_config():
    return ContractConfig(contract_hours_per_month=40, hourly_rate=7.65, extra_hourly_rate=9)


class UnreadableStore(InMemoryStore):
    def get(self, key):
        raise OperationalError("SELECT", {}, Exception("database is locked"))
