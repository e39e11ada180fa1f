"""Bounded polling for asynchronous platform state transitions."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from .expectation_failures import PollTimeout

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def poll_until(  # pylint: disable=too-many-arguments
    fetch: Callable[[], T],
    predicate: Callable[[T], bool],
    *,
    interval_seconds: float,
    max_attempts: int,
    description: str,
    sleep: Callable[[float], object] | None = None,
    stop_event: threading.Event | None = None,
) -> T:
    """Re-fetch state until ``predicate`` accepts it.

    ``fetch`` is called at most ``max_attempts`` times. The call returns the first
    accepted value immediately; there is no sleep after the final failed attempt.
    A set ``stop_event`` ends the poll before the next attempt; without an explicit
    ``sleep`` the wait between attempts also wakes up as soon as it is set.

    Raises:
      PollTimeout: after exactly ``max_attempts`` rejected values, or earlier when
        ``stop_event`` is set.
      ValueError: if the bounds are not positive.
    """
    if max_attempts <= 0:
        raise ValueError("max_attempts must be greater than zero.")
    if interval_seconds < 0:
        raise ValueError("interval_seconds must not be negative.")
    pause = sleep
    if pause is None:
        pause = stop_event.wait if stop_event is not None else time.sleep

    last_value: T | None = None
    for attempt in range(1, max_attempts + 1):
        if stop_event is not None and stop_event.is_set():
            _LOGGER.info("%s: poll stopped after %d attempt(s)", description, attempt - 1)
            raise PollTimeout(
                description=f"{description} (stopped)",
                attempts=attempt - 1,
                last_value=last_value,
            )
        last_value = fetch()
        if predicate(last_value):
            _LOGGER.debug("%s reached after %d attempt(s)", description, attempt)
            return last_value
        _LOGGER.debug("%s not reached (attempt %d/%d)", description, attempt, max_attempts)
        if attempt < max_attempts:
            pause(interval_seconds)
    raise PollTimeout(description=description, attempts=max_attempts, last_value=last_value)
