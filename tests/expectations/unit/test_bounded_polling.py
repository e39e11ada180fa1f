"""Bounded polling tests."""

from __future__ import annotations

import threading

import pytest
from baas_e2e_tester.expectations import PollTimeout, poll_until


def test_returns_first_accepted_value_without_sleeping_after_it() -> None:
    values = iter(["CREATING", "CREATING", "ACTIVE", "HEALTHY"])
    sleeps: list[float] = []

    result = poll_until(
        lambda: next(values),
        lambda status: status in {"ACTIVE", "HEALTHY"},
        interval_seconds=5,
        max_attempts=60,
        description="branch ready",
        sleep=sleeps.append,
    )

    assert result == "ACTIVE"
    assert sleeps == [5, 5]


def test_times_out_after_exactly_max_attempts() -> None:
    calls: list[int] = []
    sleeps: list[float] = []

    def _fetch() -> bool:
        calls.append(1)
        return True

    with pytest.raises(PollTimeout) as exc_info:
        poll_until(
            _fetch,
            lambda exists: not exists,
            interval_seconds=10,
            max_attempts=30,
            description="table removed",
            sleep=sleeps.append,
        )

    assert len(calls) == 30
    assert len(sleeps) == 29
    assert exc_info.value.attempts == 30
    assert exc_info.value.last_value is True
    assert exc_info.value.kind == "timeout"


def test_exceptions_from_fetch_propagate() -> None:
    def _fetch() -> str:
        raise RuntimeError("connection refused")

    with pytest.raises(RuntimeError, match="connection refused"):
        poll_until(
            _fetch,
            lambda _: True,
            interval_seconds=0,
            max_attempts=3,
            description="anything",
            sleep=lambda _: None,
        )



def test_stop_event_ends_the_poll_before_the_next_attempt() -> None:
    stop = threading.Event()
    calls: list[int] = []

    def _fetch() -> str:
        calls.append(1)
        return "CREATING"

    with pytest.raises(PollTimeout) as exc_info:
        poll_until(
            _fetch,
            lambda status: status == "ACTIVE",
            interval_seconds=5,
            max_attempts=60,
            description="branch ready",
            sleep=lambda _: stop.set(),
            stop_event=stop,
        )

    assert len(calls) == 1
    assert exc_info.value.attempts == 1
    assert exc_info.value.last_value == "CREATING"


def test_stop_event_wakes_the_default_pause_early() -> None:
    stop = threading.Event()
    threading.Timer(0.1, stop.set).start()

    with pytest.raises(PollTimeout):
        poll_until(
            lambda: False,
            bool,
            interval_seconds=30,
            max_attempts=3,
            description="never true",
            stop_event=stop,
        )

    assert stop.is_set()

@pytest.mark.parametrize(("interval", "attempts"), [(1, 0), (-1, 3)])
def test_rejects_invalid_bounds(interval: float, attempts: int) -> None:
    with pytest.raises(ValueError):
        poll_until(
            lambda: None,
            lambda _: True,
            interval_seconds=interval,
            max_attempts=attempts,
            description="invalid",
        )
