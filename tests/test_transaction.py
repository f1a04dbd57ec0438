"""Tests for the versioned zone update transaction."""

from http.client import IncompleteRead
from unittest.mock import MagicMock, patch
from xml.parsers.expat import ExpatError
import pytest

from conftest import FakeZoneAPI
from zonesync.base.config import UpdaterConfig
from zonesync.gandi.zone_api import ZoneAPI
from zonesync.base.models import RecordInfo
from zonesync.base.exceptions import ZoneAPIError
from zonesync.core.transaction import TxState, UpdateTransaction


def _desired(zone: FakeZoneAPI, name: str = "home", value: str = "5.6.7.8") -> RecordInfo:
    current = next(r for r in zone.active_records() if r.name == name)
    return current.with_value(value)


class WatchedZone(FakeZoneAPI):
    """Snapshots the active version's records before every call."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.snapshots = []

    def _enter(self, method, *args):
        self.snapshots.append((method, self.active, list(self.versions[self.active])))
        super()._enter(method, *args)


# --- success path ---

class TestSuccess:
    def test_replaces_record_and_activates_clone(self, zone):
        tx = UpdateTransaction(zone, 1)
        outcome = tx.execute(1, _desired(zone))

        assert outcome.ok
        assert outcome.version == 2
        assert zone.active == 2
        [record] = zone.active_records()
        assert (record.name, record.type, record.value, record.ttl) == ("home", "A", "5.6.7.8", 300)

    def test_call_sequence(self, zone):
        UpdateTransaction(zone, 1).execute(1, _desired(zone))
        cloned_id = 101  # first id handed out after the seed record

        assert zone.calls == [
            ("clone_version", (1, 1)),
            ("list_records", (1, 2)),
            ("delete_record", (1, 2, cloned_id)),
            ("add_record", (1, 2, "home", "A", "5.6.7.8", 300)),
            ("activate_version", (1, 2)),
            ("delete_version", (1, 1)),
        ]

    def test_retires_exactly_the_old_version(self, zone):
        outcome = UpdateTransaction(zone, 1).execute(1, _desired(zone))
        assert zone.calls_to("delete_version") == [(1, 1)]
        assert outcome.version != 1
        assert set(zone.versions) == {2}

    def test_history(self, zone):
        tx = UpdateTransaction(zone, 1)
        tx.execute(1, _desired(zone))
        assert tx.history == [
            TxState.START,
            TxState.VERSION_CREATED,
            TxState.OLD_RECORD_FOUND,
            TxState.RECORD_DELETED,
            TxState.RECORD_ADDED,
            TxState.VERSION_ACTIVE,
            TxState.DONE,
        ]

    def test_retire_failure_is_still_success(self, zone, transient):
        zone.fail["delete_version"] = transient
        outcome = UpdateTransaction(zone, 1).execute(1, _desired(zone))

        assert outcome.ok
        assert outcome.version == 2
        assert zone.active == 2
        # stale but harmless
        assert set(zone.versions) == {1, 2}

    def test_stale_id_on_desired_record_is_ignored(self, zone):
        desired = _desired(zone).model_copy(update={"id": 999})
        outcome = UpdateTransaction(zone, 1).execute(1, desired)
        assert outcome.ok
        assert zone.calls_to("delete_record") == [(1, 2, 101)]


# --- failure paths ---

class TestRollback:
    @pytest.mark.parametrize(
        "method, step",
        [
            ("list_records", "locate"),
            ("delete_record", "delete_record"),
            ("add_record", "add_record"),
            ("activate_version", "activate"),
        ],
    )
    def test_failure_after_clone_deletes_clone(self, zone, transient, method, step):
        zone.fail[method] = transient
        tx = UpdateTransaction(zone, 1)
        outcome = tx.execute(1, _desired(zone))

        assert not outcome.ok
        assert outcome.failed_step == step
        assert "connection reset" in outcome.reason
        assert zone.calls_to("delete_version") == [(1, 2)]
        assert zone.active == 1
        assert set(zone.versions) == {1}
        assert tx.history[-2:] == [TxState.ROLLBACK, TxState.FAILED]

    def test_clone_failure_needs_no_rollback(self, zone, transient):
        zone.fail["clone_version"] = transient
        tx = UpdateTransaction(zone, 1)
        outcome = tx.execute(1, _desired(zone))

        assert not outcome.ok
        assert outcome.failed_step == "clone"
        assert zone.calls == [("clone_version", (1, 1))]
        assert tx.history == [TxState.START, TxState.FAILED]

    def test_add_failure_never_activates(self, zone, transient):
        zone.fail["add_record"] = transient
        UpdateTransaction(zone, 1).execute(1, _desired(zone))
        assert zone.calls_to("activate_version") == []
        assert zone.active_records()[0].value == "1.2.3.4"

    def test_missing_record_rolls_back(self, zone):
        desired = RecordInfo(name="nothere", type="A", value="5.6.7.8")
        outcome = UpdateTransaction(zone, 1).execute(1, desired)

        assert not outcome.ok
        assert outcome.failed_step == "locate"
        assert zone.calls_to("delete_record") == []
        assert zone.calls_to("delete_version") == [(1, 2)]

    def test_ambiguous_record_rolls_back(self):
        zone = FakeZoneAPI(records=[("home", "A", "1.2.3.4"), ("home", "TXT", "hello")])
        desired = RecordInfo(name="home", type="A", value="5.6.7.8", ttl=300)
        outcome = UpdateTransaction(zone, 1).execute(1, desired)

        assert not outcome.ok
        assert outcome.failed_step == "locate"
        assert zone.calls_to("delete_record") == []
        assert zone.calls_to("delete_version") == [(1, 2)]

    def test_rollback_failure_is_still_failure(self, zone, transient):
        zone.fail["activate_version"] = transient
        zone.fail["delete_version"] = ZoneAPIError("version busy")
        outcome = UpdateTransaction(zone, 1).execute(1, _desired(zone))

        assert not outcome.ok
        assert outcome.failed_step == "activate"
        assert "version busy" in outcome.rollback_error
        assert zone.active == 1

    def test_failure_is_logged(self, zone, transient):
        log = MagicMock()
        zone.fail["add_record"] = transient
        UpdateTransaction(zone, 1, logger=log).execute(1, _desired(zone))

        log.error.assert_called_once()
        assert log.error.call_args.kwargs["operation"] == "add_record"

    def test_no_retry_within_attempt(self, zone, transient):
        zone.fail["add_record"] = transient
        UpdateTransaction(zone, 1).execute(1, _desired(zone))
        assert len(zone.calls_to("add_record")) == 1
        assert len(zone.calls_to("clone_version")) == 1


# --- visibility and name matching ---

class TestVisibility:
    def test_active_records_unchanged_until_activation(self):
        zone = WatchedZone()
        before = list(zone.active_records())
        UpdateTransaction(zone, 1).execute(1, _desired(zone))

        for method, active, records in zone.snapshots:
            if method == "delete_version":
                # retirement runs after activation
                continue
            assert active == 1
            assert records == before

    def test_only_named_record_is_touched(self):
        zone = FakeZoneAPI(records=[("www", "A", "1.2.3.4"), ("mail", "A", "9.9.9.9")])
        mail_before = next(r for r in zone.active_records() if r.name == "mail")
        outcome = UpdateTransaction(zone, 1).execute(1, _desired(zone, "www"))

        assert outcome.ok
        cloned = {r.id: r for r in zone.active_records()}
        [(_, _, deleted_id)] = zone.calls_to("delete_record")
        assert deleted_id not in cloned
        [added] = zone.calls_to("add_record")
        assert added[2] == "www"
        mail_after = next(r for r in zone.active_records() if r.name == "mail")
        assert mail_after.value == mail_before.value
        # cloning renumbered the record
        assert mail_after.id != mail_before.id

    def test_programming_errors_propagate(self, zone):
        zone.fail["add_record"] = TypeError("bug")
        with pytest.raises(TypeError):
            UpdateTransaction(zone, 1).execute(1, _desired(zone))


# --- against the XML-RPC client ---

@pytest.fixture
def gandi():
    with patch("zonesync.gandi.zone_api.ServerProxy") as mock_proxy_cls:
        client = MagicMock()
        mock_proxy_cls.return_value = client
        client.domain.zone.version.new.return_value = 2
        client.domain.zone.record.list.return_value = [
            {"id": 11, "name": "home", "type": "A", "value": "1.2.3.4", "ttl": 300},
        ]
        client.domain.zone.record.delete.return_value = 1
        client.domain.zone.version.delete.return_value = True
        client.domain.zone.version.set.return_value = True
        api = ZoneAPI(UpdaterConfig(api_key="KEY", zone_id=1, record="home"))
        yield api, client


class TestGandiClientFailures:
    @pytest.mark.parametrize("add", [
        {"side_effect": IncompleteRead(b"")},
        {"side_effect": ExpatError("no element found: line 1, column 0")},
        {"return_value": {"name": "home"}},
    ], ids=["incomplete-read", "bad-xml", "malformed-record"])
    def test_add_failure_deletes_clone(self, gandi, add):
        api, client = gandi
        client.domain.zone.record.add.configure_mock(**add)

        outcome = UpdateTransaction(api, 1).execute(
            1, RecordInfo(name="home", type="A", value="5.6.7.8", ttl=300)
        )

        assert not outcome.ok
        assert outcome.failed_step == "add_record"
        client.domain.zone.version.set.assert_not_called()
        client.domain.zone.version.delete.assert_called_once_with("KEY", 1, 2)

    def test_malformed_clone_id_fails_without_rollback(self, gandi):
        api, client = gandi
        client.domain.zone.version.new.return_value = "not-a-version"

        outcome = UpdateTransaction(api, 1).execute(
            1, RecordInfo(name="home", type="A", value="5.6.7.8", ttl=300)
        )

        assert not outcome.ok
        assert outcome.failed_step == "clone"
        client.domain.zone.record.list.assert_not_called()
        client.domain.zone.version.delete.assert_not_called()

    def test_success_retires_old_version(self, gandi):
        api, client = gandi
        client.domain.zone.record.add.return_value = {
            "id": 21, "name": "home", "type": "A", "value": "5.6.7.8", "ttl": 300,
        }

        outcome = UpdateTransaction(api, 1).execute(
            1, RecordInfo(name="home", type="A", value="5.6.7.8", ttl=300)
        )

        assert outcome.ok
        assert outcome.version == 2
        client.domain.zone.record.delete.assert_called_once_with("KEY", 1, 2, {"id": 11})
        client.domain.zone.version.set.assert_called_once_with("KEY", 1, 2)
        client.domain.zone.version.delete.assert_called_once_with("KEY", 1, 1)
