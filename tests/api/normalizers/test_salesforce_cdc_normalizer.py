"""Testes do normalizer de change events da Salesforce."""

from __future__ import annotations

from datetime import UTC, datetime
from types import MappingProxyType

import pytest

from api.normalizers.salesforce_cdc import (
    epoch_millis_to_iso,
    extract_changed_values,
    extract_header,
    extract_replay_id,
    normalize_change_event,
    to_iso8601,
)
from tests.fakes.fake_salesforce import make_raw_event

RECEIVED_AT = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=UTC)


class TestNormalizeChangeEvent:
    """Conversão de evento bruto para NormalizedChangeEvent."""

    def test_contact_update_is_normalized(self) -> None:
        raw = make_raw_event(
            42,
            record_ids=("003xx000004TmiQ",),
            changed_fields=("Email", "LastModifiedDate"),
            values={"Email": "new@example.com", "LastModifiedDate": "2023-11-14T22:13:20Z"},
        )

        event = normalize_change_event(raw, received_at=RECEIVED_AT)

        assert event.replay_id == 42
        assert event.received_at == "2024-01-02T03:04:05.678Z"
        assert event.entity_name == "Contact"
        assert event.change_type == "UPDATE"
        assert event.record_ids == ("003xx000004TmiQ",)
        assert event.changed_fields == ("Email", "LastModifiedDate")
        assert dict(event.changed_values) == {
            "Email": "new@example.com",
            "LastModifiedDate": "2023-11-14T22:13:20Z",
        }
        assert event.commit_timestamp == "2023-11-14T22:13:20.000Z"
        assert event.commit_user == "005xx0000012345"
        assert event.sequence_number == 1
        assert event.schema_id == "IeRuaY6cbI_HsV8Rv1Mc5g"

    def test_header_never_leaks_into_changed_values(self) -> None:
        event = normalize_change_event(make_raw_event(1))
        assert "ChangeEventHeader" not in event.changed_values

    def test_unknown_payload_keys_are_kept(self) -> None:
        raw = make_raw_event(1, values={"Custom_Field__c": 7, "Email": None})
        event = normalize_change_event(raw)
        assert dict(event.changed_values) == {"Custom_Field__c": 7, "Email": None}

    def test_missing_optional_fields_become_empty(self) -> None:
        raw = {"payload": {"ChangeEventHeader": {"entityName": "Contact"}}, "event": {}}

        event = normalize_change_event(raw)

        assert event.replay_id is None
        assert event.change_type is None
        assert event.record_ids == ()
        assert event.changed_fields == ()
        assert dict(event.changed_values) == {}
        assert event.commit_timestamp is None

    @pytest.mark.parametrize("raw", [None, "oops", 42, [], {}, {"payload": "x", "event": 3}])
    def test_malformed_input_never_raises(self, raw: object) -> None:
        event = normalize_change_event(raw)
        assert event.replay_id is None
        assert event.entity_name is None

    def test_non_list_record_ids_become_empty(self) -> None:
        raw = make_raw_event(1)
        raw["payload"]["ChangeEventHeader"]["recordIds"] = "003xx"
        assert normalize_change_event(raw).record_ids == ()

    def test_header_lists_are_copied_verbatim(self) -> None:
        """Itens de recordIds/changedFields não são convertidos nem filtrados."""
        raw = make_raw_event(1)
        header = raw["payload"]["ChangeEventHeader"]
        header["recordIds"] = ["003xx", None, 7]
        header["changedFields"] = ["Email", "Phone"]

        event = normalize_change_event(raw)

        assert event.record_ids == ("003xx", None, 7)
        assert event.changed_fields == ("Email", "Phone")
        assert event.to_dict()["recordIds"] == ["003xx", None, 7]

    def test_received_at_defaults_to_now(self) -> None:
        event = normalize_change_event(make_raw_event(1))
        assert event.received_at.endswith("Z")
        parsed = datetime.fromisoformat(event.received_at.replace("Z", "+00:00"))
        assert abs((datetime.now(UTC) - parsed).total_seconds()) < 5

    def test_gap_events_pass_through(self) -> None:
        event = normalize_change_event(make_raw_event(9, change_type="GAP_UPDATE"))
        assert event.change_type == "GAP_UPDATE"
        assert event.is_gap is True

    def test_result_is_immutable(self) -> None:
        event = normalize_change_event(make_raw_event(1))
        assert isinstance(event.changed_values, MappingProxyType)
        with pytest.raises(TypeError):
            event.changed_values["Email"] = "x"  # type: ignore[index]
        with pytest.raises(AttributeError):
            event.replay_id = 2  # type: ignore[misc]

    def test_to_dict_uses_wire_field_names(self) -> None:
        payload = normalize_change_event(make_raw_event(42), received_at=RECEIVED_AT).to_dict()

        assert payload["replayId"] == 42
        assert payload["entityName"] == "Contact"
        assert payload["recordIds"] == ["003xx000004TmiQ"]
        assert payload["changedValues"] == {"Email": "a@b.com"}
        assert payload["commitTimestamp"] == "2023-11-14T22:13:20.000Z"

    def test_to_log_dict_omits_values(self) -> None:
        log_dict = normalize_change_event(make_raw_event(1)).to_log_dict()
        assert "a@b.com" not in str(log_dict)
        assert log_dict["record_count"] == 1


class TestEpochMillisToIso:
    """Conversão de commitTimestamp."""

    def test_known_instant(self) -> None:
        assert epoch_millis_to_iso(1700000000000) == "2023-11-14T22:13:20.000Z"

    def test_numeric_string_is_accepted(self) -> None:
        assert epoch_millis_to_iso("1700000000123") == "2023-11-14T22:13:20.123Z"

    @pytest.mark.parametrize(
        "value", [None, 0, "", False, True, "abc", [1], float("nan"), 10**20]
    )
    def test_unusable_values_become_none(self, value: object) -> None:
        assert epoch_millis_to_iso(value) is None

    def test_to_iso8601_converts_to_utc(self) -> None:
        from datetime import timedelta, timezone

        local = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=-3)))
        assert to_iso8601(local) == "2024-01-01T04:00:00.000Z"


class TestExtractor:
    """Extração estrutural."""

    def test_extract_header_and_values(self) -> None:
        raw = make_raw_event(5)
        assert extract_header(raw)["entityName"] == "Contact"
        assert extract_changed_values(raw) == {"Email": "a@b.com"}
        assert extract_replay_id(raw) == 5

    def test_missing_blocks_are_empty(self) -> None:
        assert extract_header({}) == {}
        assert extract_changed_values({"payload": None}) == {}
        assert extract_replay_id({"event": None}) is None
