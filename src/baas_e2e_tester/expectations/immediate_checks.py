"""Direct value checks used inside steps."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .expectation_failures import AssertionMismatch, UnexpectedStatus


def assert_immediate(actual: Any, expected: Any, *, location: str) -> None:
    """Fail with AssertionMismatch unless ``actual == expected``."""
    if actual != expected:
        raise AssertionMismatch(actual=actual, expected=expected, location=location)


def assert_defined(value: Any, *, location: str) -> Any:
    """Fail when ``value`` is None; return it otherwise."""
    if value is None:
        raise AssertionMismatch(actual=None, expected="a defined value", location=location)
    return value


def assert_has_key(mapping: Any, key: str, *, location: str) -> Any:
    """Fail unless ``mapping`` is a mapping containing ``key``; return the value."""
    if not isinstance(mapping, Mapping):
        raise AssertionMismatch(
            actual=type(mapping).__name__, expected="a JSON object", location=location
        )
    if key not in mapping:
        raise AssertionMismatch(
            actual=sorted(str(name) for name in mapping),
            expected=f"property '{key}'",
            location=location,
        )
    return mapping[key]


def first_row(body: Any, *, location: str) -> Mapping[str, Any]:
    """Return the first row of a query result (either a bare list or ``{"rows": [...]}``)."""
    rows = body.get("rows") if isinstance(body, Mapping) else body
    if not isinstance(rows, list) or not rows:
        raise AssertionMismatch(actual=body, expected="at least one result row", location=location)
    row = rows[0]
    if not isinstance(row, Mapping):
        raise AssertionMismatch(actual=row, expected="a row object", location=location)
    return row


def expect_status(response: Any, expected: Iterable[int], *, endpoint: str) -> None:
    """Fail with UnexpectedStatus unless ``response.status_code`` is one of ``expected``."""
    accepted = tuple(expected)
    if response.status_code not in accepted:
        raise UnexpectedStatus(
            endpoint=endpoint,
            expected=accepted,
            actual=response.status_code,
            body=getattr(response, "text", "") or "",
        )
