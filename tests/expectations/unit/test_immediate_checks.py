"""Immediate assertion tests."""

from __future__ import annotations

import pytest
from baas_e2e_tester.expectations import (
    AssertionMismatch,
    UnexpectedStatus,
    assert_defined,
    assert_has_key,
    assert_immediate,
    expect_status,
    first_row,
)


def test_assert_immediate_reports_actual_and_expected() -> None:
    with pytest.raises(AssertionMismatch) as exc_info:
        assert_immediate("1", "2", location="record_count")

    assert exc_info.value.actual == "1"
    assert exc_info.value.expected == "2"
    assert exc_info.value.kind == "assertion_mismatch"
    assert "record_count" in str(exc_info.value)


def test_assert_immediate_accepts_equal_values() -> None:
    assert_immediate({"a": 1}, {"a": 1}, location="body")


def test_assert_defined_rejects_none_but_accepts_falsy_values() -> None:
    assert assert_defined([], location="rows") == []
    assert assert_defined(0, location="count") == 0
    with pytest.raises(AssertionMismatch):
        assert_defined(None, location="body")


def test_assert_has_key_returns_value_including_null() -> None:
    assert assert_has_key({"site_url": None}, "site_url", location="auth") is None


def test_assert_has_key_rejects_missing_key_and_non_objects() -> None:
    with pytest.raises(AssertionMismatch, match="property 'site_url'"):
        assert_has_key({"other": 1}, "site_url", location="auth")
    with pytest.raises(AssertionMismatch, match="a JSON object"):
        assert_has_key(["site_url"], "site_url", location="auth")


def test_first_row_accepts_bare_list_and_rows_object() -> None:
    assert first_row([{"record_count": "2"}], location="q") == {"record_count": "2"}
    assert first_row({"rows": [{"table_exists": False}]}, location="q") == {
        "table_exists": False
    }


def test_first_row_rejects_empty_results() -> None:
    with pytest.raises(AssertionMismatch, match="at least one result row"):
        first_row([], location="q")


def test_unexpected_status_truncates_body() -> None:
    error = UnexpectedStatus(endpoint="POST /x", expected=(201,), actual=500, body="e" * 900)

    assert error.kind == "unexpected_status"
    assert "HTTP 500, expected 201" in str(error)
    assert len(str(error)) < 600


class _Response:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


def test_expect_status_accepts_any_documented_status() -> None:
    expect_status(_Response(402), (201, 402), endpoint="POST /v1/projects/b/database/query")


def test_expect_status_reports_endpoint_and_body() -> None:
    with pytest.raises(UnexpectedStatus) as exc_info:
        expect_status(_Response(500, "boom"), [200], endpoint="PATCH /v1/projects/r/config/auth")

    assert exc_info.value.expected == (200,)
    assert exc_info.value.actual == 500
    assert "PATCH /v1/projects/r/config/auth returned HTTP 500, expected 200: boom" in str(
        exc_info.value
    )
