import pytest

from sctx.core.error_response import (
    ERR_BAD_REQUEST,
    ERR_CONFLICT,
    ERR_NOT_FOUND,
    ERR_INTERNAL_SERVER_ERROR,
    DefaultError,
    RecordNotFoundError,
    to_default_error,
)


def test_predefined_not_found():
    assert ERR_NOT_FOUND.to_dict() == {
        "code": 404,
        "status": "Not Found",
        "message": "The requested resource could not be found",
    }


def test_predefined_conflict_status_code_property():
    assert ERR_CONFLICT.with_reason("dup").status_code == 409


def test_with_reason_returns_copy():
    err = ERR_BAD_REQUEST.with_reason("field %s missing", "name")
    assert err.reason == "field name missing"
    assert ERR_BAD_REQUEST.reason == ""
    assert err.status_code == 400


def test_with_error_changes_message_and_str():
    err = ERR_BAD_REQUEST.with_error("bad %d", 7)
    assert str(err) == "bad 7"
    assert err.message == "bad 7"
    assert str(ERR_BAD_REQUEST) == ERR_BAD_REQUEST.message


def test_with_id_and_debug():
    err = ERR_NOT_FOUND.with_id("user_missing").with_debug("sql: %s", "no rows")
    assert err.id == "user_missing"
    assert err.debug == "sql: no rows"
    assert ERR_NOT_FOUND.id == ""


def test_with_detail_does_not_share_details():
    first = ERR_NOT_FOUND.with_detail("a", 1)
    second = first.with_detail("b", 2)
    assert first.details == {"a": 1}
    assert second.details == {"a": 1, "b": 2}
    assert ERR_NOT_FOUND.details is None


def test_with_detailf_formats():
    err = DefaultError("x").with_detailf("key", "%s-%s", "a", "b")
    assert err.details == {"key": "a-b"}


def test_matches_compares_identity_fields():
    assert ERR_NOT_FOUND.with_reason("other").matches(ERR_NOT_FOUND)
    assert not ERR_NOT_FOUND.with_id("x").matches(ERR_NOT_FOUND)
    assert not ERR_NOT_FOUND.matches(ERR_CONFLICT)
    assert not ERR_NOT_FOUND.matches(ValueError("x"))


def test_to_dict_omits_empty_fields():
    assert DefaultError("boom").to_dict() == {"message": "boom"}


def test_to_dict_full():
    err = DefaultError(
        "boom", code=400, status="Bad Request", id="i", request_id="r",
        reason="why", debug="dbg", details={"k": "v"},
    )
    assert err.to_dict() == {
        "id": "i", "code": 400, "status": "Bad Request", "request": "r",
        "reason": "why", "debug": "dbg", "message": "boom", "details": {"k": "v"},
    }


def test_wrap_sets_cause():
    cause = ValueError("inner")
    err = ERR_BAD_REQUEST.with_wrap(cause)
    assert err.__cause__ is cause
    assert ERR_BAD_REQUEST.__cause__ is None


def test_stack_trace_empty_without_cause():
    assert DefaultError("x").stack_trace() == []


def test_stack_trace_empty_when_wrapping_self():
    err = DefaultError("x")
    err.wrap(err)
    assert err.stack_trace() == []


def test_with_trace_records_stack():
    err = ERR_BAD_REQUEST.with_reason("r")
    result = err.with_trace(ValueError("boom"))
    assert result is err
    frames = err.stack_trace()
    assert frames
    assert any(frame.name == "test_with_trace_records_stack" for frame in frames)


def test_stack_trace_from_raised_cause():
    try:
        raise ValueError("boom")
    except ValueError as exc:
        cause = exc
    err = DefaultError("x").with_wrap(cause)
    assert err.stack_trace()[-1].name == "test_stack_trace_from_raised_cause"


def test_verbose_lists_fields():
    err = DefaultError("boom", id="abc", request_id="rq", reason="why", debug="dbg",
                       details={"k": "v"})
    lines = err.verbose().splitlines()
    assert lines[:6] == [
        "id=abc", "rid=rq", "error=boom", "reason=why", "details=map[k:v]", "debug=dbg",
    ]


def test_to_default_error_from_plain_exception():
    de = to_default_error(ValueError("broken"), "req-1")
    assert de.code == 500
    assert de.status == "Internal Server Error"
    assert de.message == "broken"
    assert de.request_id == "req-1"
    assert de.details == {}
    assert de.__cause__ is not None


def test_to_default_error_from_default_error():
    source = ERR_NOT_FOUND.with_reason("gone").with_id("nf").with_debug("d")
    de = to_default_error(source, "req-2")
    assert de.code == 404
    assert de.status == "Not Found"
    assert de.reason == "gone"
    assert de.id == "nf"
    assert de.debug == "d"
    assert de.request_id == "req-2"
    assert de.message == source.message


def test_to_default_error_prefers_carried_request_id():
    source = DefaultError("x", code=400, request_id="inner")
    assert to_default_error(source, "outer").request_id == "inner"


def test_to_default_error_walks_cause_chain():
    inner = ERR_CONFLICT.with_reason("dup").with_detail("field", "email")
    try:
        try:
            raise inner
        except DefaultError as exc:
            raise RuntimeError("outer failure") from exc
    except RuntimeError as outer:
        de = to_default_error(outer, "")
    assert de.message == "outer failure"
    assert de.code == 409
    assert de.reason == "dup"
    assert de.details == {"field": "email"}


def test_to_default_error_status_from_code_when_missing():
    de = to_default_error(DefaultError("x", code=404), "")
    assert de.status == ERR_NOT_FOUND.status


def test_internal_error_roundtrip_matches():
    de = to_default_error(ERR_INTERNAL_SERVER_ERROR, "")
    assert de.matches(ERR_INTERNAL_SERVER_ERROR)


def test_record_not_found_error():
    err = RecordNotFoundError()
    assert str(err) == "record not found"


def test_default_error_can_be_raised_and_caught():
    err = ERR_BAD_REQUEST.with_reason("bad")
    caught = None
    try:
        raise err
    except DefaultError as exc:
        caught = exc
    assert caught is err
    assert caught.reason == "bad"
    assert caught.status_code == 400