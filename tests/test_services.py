import json

import pytest

from models import LogEntry
from services import log_service, rate_limit_service
from services.document_service import coerce_document, to_room_state


def _entry(entry_id: int) -> LogEntry:
    return LogEntry(id=str(entry_id), timestamp="t", count=1, username="u")


def test_remaining_seconds_rounds_up() -> None:
    assert rate_limit_service.remaining_seconds(100_000, 105_000) == 15
    assert rate_limit_service.remaining_seconds(100_000, 100_001) == 20
    assert rate_limit_service.remaining_seconds(100_000, 119_001) == 1
    assert rate_limit_service.remaining_seconds(100_000, 120_000) == 0


def test_is_enabled_at_window_boundary() -> None:
    assert not rate_limit_service.is_enabled(100_000, 119_999)
    assert rate_limit_service.is_enabled(100_000, 120_000)
    assert rate_limit_service.is_enabled(0, 20_000)


def test_prepend_entry_truncates_oldest() -> None:
    log = [_entry(i) for i in range(20, 0, -1)]
    result = log_service.prepend_entry(log, _entry(21), limit=20)
    assert len(result) == 20
    assert result[0].id == "21"
    assert result[-1].id == "2"


def test_latest_increment_time_uses_largest_id() -> None:
    log = [_entry(5), _entry(9), _entry(7)]
    assert log_service.latest_increment_time(log) == 9
    assert log_service.latest_increment_time([]) == 0


def test_find_entry_index() -> None:
    log = [_entry(3), _entry(2)]
    assert log_service.find_entry_index(log, "2") == 1
    assert log_service.find_entry_index(log, "99") is None


def test_coerce_document_replaces_wrong_types() -> None:
    doc = coerce_document({"count": "5", "log": None, "theme": "dark"}, "abc")
    assert doc == {
        "count": 0,
        "log": [],
        "lastIncrementTime": 0,
        "pushSubscriptions": [],
        "accessCode": "abc",
        "theme": "dark",
    }


def test_coerce_document_rejects_bool_numbers() -> None:
    doc = coerce_document({"count": True, "lastIncrementTime": False}, "abc")
    assert doc["count"] == 0
    assert doc["lastIncrementTime"] == 0


@pytest.mark.parametrize("field", ["count", "lastIncrementTime"])
@pytest.mark.parametrize("literal", ["1e400", "-1e400", "NaN"])
def test_coerce_document_resets_non_finite_numbers(field: str, literal: str) -> None:
    raw = json.loads('{"%s": %s, "log": []}' % (field, literal))

    doc = coerce_document(raw, "abc")

    assert doc[field] == 0


def test_coerce_document_keeps_numeric_log_ids() -> None:
    raw = {
        "count": 1,
        "log": [{"id": 1700000000000, "timestamp": "t", "count": 1, "username": "a"}],
    }

    doc = coerce_document(raw, "abc")

    assert [entry["id"] for entry in doc["log"]] == ["1700000000000"]


def test_coerce_document_drops_malformed_log_entries() -> None:
    raw = {
        "count": 2,
        "log": [
            {"id": "10", "timestamp": "t", "count": 2, "username": "a"},
            "garbage",
            {"timestamp": "no id", "count": 1},
        ],
    }
    doc = coerce_document(raw, "abc")
    assert [entry["id"] for entry in doc["log"]] == ["10"]
    assert raw["log"][1] == "garbage"


def test_to_room_state_keeps_valid_fields() -> None:
    state = to_room_state(
        {"accessCode": "abc", "count": 3, "log": [], "lastIncrementTime": 42}, "abc"
    )
    assert state.count == 3
    assert state.last_increment_time == 42
    assert state.access_code == "abc"
