import uuid

import pytest

from staffdesk.schemas.tasks import TaskHoursLog
from staffdesk.services import revalidation
from staffdesk.services.actions import (
    ActionResponse,
    InvalidState,
    NotFound,
    ValidationFailed,
    parse_id,
    server_action,
    validate_payload,
)
from staffdesk.services.aggregates import percent, round_half_up


# --- envelope ---

def test_ok_without_data_omits_data_key():
    assert ActionResponse.ok().to_json() == {"success": True}


def test_ok_with_none_data_keeps_null():
    assert ActionResponse.ok(None).to_json() == {"success": True, "data": None}


def test_ok_with_message():
    body = ActionResponse.ok({"a": 1}, message="Done").to_json()
    assert body == {"success": True, "data": {"a": 1}, "message": "Done"}


def test_fail_shape():
    assert ActionResponse.fail("Nope").to_json() == {"success": False, "error": "Nope"}


# --- decorator ---

@server_action("Failed to do the thing", revalidate=("/employee/things",))
def _do_thing(db, caller, value):
    if value == "missing":
        raise NotFound("Thing")
    if value == "locked":
        raise InvalidState("Thing is locked")
    if value == "boom":
        raise RuntimeError("database exploded")
    return {"value": value}


@server_action("Failed to log", schema=TaskHoursLog)
def _log(db, caller, thing_id, payload):
    return {"id": thing_id, "hours": payload.hours}


class _FakeSession:
    def __init__(self):
        self.rollbacks = 0

    def rollback(self):
        self.rollbacks += 1


def test_missing_caller_is_unauthorized_and_handler_not_run():
    s = _FakeSession()
    res = _do_thing(s, None, "boom")
    assert res.to_json() == {"success": False, "error": "Unauthorized"}
    assert s.rollbacks == 0
    assert revalidation.path_version("/employee/things") == 0


def test_success_wraps_data_and_revalidates(caller):
    res = _do_thing(_FakeSession(), caller, "x")
    assert res.to_json() == {"success": True, "data": {"value": "x"}}
    assert revalidation.path_version("/employee/things") == 1


def test_action_error_message_passes_through(caller):
    s = _FakeSession()
    res = _do_thing(s, caller, "missing")
    assert res.error == "Thing not found or access denied"
    assert s.rollbacks == 1
    assert revalidation.path_version("/employee/things") == 0


def test_invalid_state_message(caller):
    assert _do_thing(_FakeSession(), caller, "locked").error == "Thing is locked"


def test_internal_error_is_hidden(caller, caplog):
    s = _FakeSession()
    res = _do_thing(s, caller, "boom")
    assert res.error == "Failed to do the thing"
    assert "exploded" not in res.to_json()["error"]
    assert s.rollbacks == 1
    assert "database exploded" in caplog.text


def test_schema_validates_last_positional(caller):
    res = _log(_FakeSession(), caller, "abc", {"hours": 3})
    assert res.data == {"id": "abc", "hours": 3.0}


def test_schema_validation_failure(caller):
    res = _log(_FakeSession(), caller, "abc", {"hours": 25})
    assert res.success is False
    assert res.error == "Hours must be between 0 and 24"


def test_schema_missing_field_message(caller):
    res = _log(_FakeSession(), caller, "abc", {})
    assert res.error == "Hours is required"


def test_decorated_handler_exposes_paths():
    assert _do_thing.revalidates == ("/employee/things",)


# --- helpers ---

def test_validate_payload_raises_validation_failed():
    with pytest.raises(ValidationFailed):
        validate_payload(TaskHoursLog, {"hours": 0})


def test_parse_id_rejects_garbage_as_not_found():
    with pytest.raises(NotFound) as exc:
        parse_id("not-a-uuid", "Goal")
    assert exc.value.message == "Goal not found or access denied"
    uid = uuid.uuid4()
    assert parse_id(str(uid), "Goal") == uid


@pytest.mark.parametrize("value,expected", [(2.5, 3), (0.5, 1), (1.4, 1), (66.666, 67)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_one_decimal():
    assert round_half_up(4.25, 1) == pytest.approx(4.3)


def test_percent_of_zero_is_zero():
    assert percent(3, 0) == 0
    assert percent(1, 3) == 33
