"""Shared fixtures: an in-memory versioned zone that records every call."""

from __future__ import annotations

import itertools

import pytest

from zonesync.base.zone_api import ZoneAPIBlueprint
from zonesync.base.ip_source import PublicIPSourceBlueprint
from zonesync.base.models import RecordInfo
from zonesync.base.exceptions import PublicIPError, TransientAPIError, ZoneAPIError

MUTATING = {"clone_version", "delete_version", "activate_version", "add_record", "delete_record"}


class FakeZoneAPI(ZoneAPIBlueprint):
    """Versioned zone kept in memory.

    ``calls`` lists ``(method, args)`` in call order. ``fail`` maps a
    method name to the exception it raises on its next call.
    """

    def __init__(self, zone_id: int = 1, records: list[tuple[str, str, str]] | None = None):
        self.zone_id = zone_id
        self._ids = itertools.count(100)
        self._versions = itertools.count(2)
        self.versions: dict[int, list[RecordInfo]] = {
            1: [self._new(n, t, v) for n, t, v in (records or [("home", "A", "1.2.3.4")])]
        }
        self.active = 1
        self.calls: list[tuple[str, tuple]] = []
        self.fail: dict[str, Exception] = {}

    def _new(self, name: str, rtype: str, value: str, ttl: int = 300) -> RecordInfo:
        return RecordInfo(id=next(self._ids), name=name, type=rtype, value=value, ttl=ttl)

    def _enter(self, method: str, *args) -> None:
        self.calls.append((method, args))
        if method in self.fail:
            raise self.fail.pop(method)

    def _version(self, version_id: int) -> list[RecordInfo]:
        if version_id not in self.versions:
            raise ZoneAPIError(f"no version {version_id}")
        return self.versions[version_id]

    def _inactive(self, version_id: int) -> list[RecordInfo]:
        if version_id == self.active:
            raise ZoneAPIError(f"version {version_id} is active")
        return self._version(version_id)

    @property
    def mutating_calls(self) -> list[tuple[str, tuple]]:
        return [c for c in self.calls if c[0] in MUTATING]

    def calls_to(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    def active_records(self) -> list[RecordInfo]:
        return self.versions[self.active]

    # --- ZoneAPIBlueprint ---

    def current_active_version(self, zone_id):
        self._enter("current_active_version", zone_id)
        return self.active

    def clone_version(self, zone_id, version_id):
        self._enter("clone_version", zone_id, version_id)
        new = next(self._versions)
        self.versions[new] = [
            self._new(r.name, r.type, r.value, r.ttl) for r in self._version(version_id)
        ]
        return new

    def delete_version(self, zone_id, version_id):
        self._enter("delete_version", zone_id, version_id)
        self._inactive(version_id)
        del self.versions[version_id]

    def activate_version(self, zone_id, version_id):
        self._enter("activate_version", zone_id, version_id)
        self._version(version_id)
        self.active = version_id

    def list_records(self, zone_id, version_id):
        self._enter("list_records", zone_id, version_id)
        return list(self._version(version_id))

    def add_record(self, zone_id, version_id, name, record_type, value, ttl):
        self._enter("add_record", zone_id, version_id, name, record_type, value, ttl)
        record = self._new(name, record_type, value, ttl)
        self._inactive(version_id).append(record)
        return record

    def delete_record(self, zone_id, version_id, record_id):
        self._enter("delete_record", zone_id, version_id, record_id)
        records = self._inactive(version_id)
        for r in records:
            if r.id == record_id:
                records.remove(r)
                return
        raise ZoneAPIError(f"no record {record_id}")


class FakeIPSource(PublicIPSourceBlueprint):
    """Returns queued answers; an exception in the queue is raised."""

    def __init__(self, *answers):
        self.answers = list(answers)

    def current_ipv4(self):
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def zone():
    return FakeZoneAPI()


@pytest.fixture
def transient():
    return TransientAPIError("connection reset")


@pytest.fixture
def ip_error():
    return PublicIPError("lookup timed out")


_ENV = (
    "GANDI_API_KEY", "GANDI_ZONE_ID", "ZONESYNC_RECORD", "ZONESYNC_REFRESH",
    "GANDI_TEST_PLATFORM", "ZONESYNC_IP_SOURCE", "ZONESYNC_IP_URL",
    "ZONESYNC_TIMEOUT", "ZONESYNC_IP_ATTEMPTS", "ZONESYNC_MAX_FAILURES",
    "ZONESYNC_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _ENV:
        monkeypatch.delenv(var, raising=False)
