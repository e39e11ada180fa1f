"""Admission control for groups that touch shared external resources."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from baas_e2e_tester.suite_definition import TestGroup


class ResourceGate:
    """Blocks a group until none of its shared resources is in use.

    Exclusive groups wait for every running group to finish and keep new groups
    out until they are done.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._busy: set[str] = set()
        self._active = 0
        self._exclusive_active = False
        self._exclusive_waiting = 0

    @contextmanager
    def hold(self, group: TestGroup) -> Iterator[None]:
        with self._condition:
            if group.exclusive:
                self._exclusive_waiting += 1
            try:
                self._condition.wait_for(lambda: self._can_start(group))
            finally:
                if group.exclusive:
                    self._exclusive_waiting -= 1
            self._active += 1
            self._busy.update(group.shared_resources)
            if group.exclusive:
                self._exclusive_active = True
        try:
            yield
        finally:
            with self._condition:
                self._active -= 1
                self._busy.difference_update(group.shared_resources)
                if group.exclusive:
                    self._exclusive_active = False
                self._condition.notify_all()

    def _can_start(self, group: TestGroup) -> bool:
        if self._exclusive_active:
            return False
        if group.exclusive:
            return self._active == 0
        if self._exclusive_waiting:
            return False
        return not self._busy.intersection(group.shared_resources)
