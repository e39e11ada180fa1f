"""Group declaration, carried state and group resources tests."""

from __future__ import annotations

from contextlib import contextmanager

import pytest
from baas_e2e_tester.configuration import (
    ACCESS_TOKEN,
    BASE_URL,
    EMAIL,
    PASSWORD,
    PROJECT_REF,
    Configuration,
)
from baas_e2e_tester.expectations import MissingCarriedState
from baas_e2e_tester.suite_definition import (
    CarriedState,
    GroupResources,
    TestGroup,
    excluded_step,
    step,
)


def _noop(_context) -> None:
    return None


def test_duplicate_step_names_are_rejected() -> None:
    with pytest.raises(ValueError, match="duplicate steps"):
        TestGroup(name="Broken", steps=(step("a", _noop), step("a", _noop)))


def test_session_groups_require_login_settings() -> None:
    group = TestGroup(
        name="UI",
        steps=(step("open", _noop),),
        required_keys=frozenset({PROJECT_REF}),
        needs_session=True,
    )

    assert group.effective_required_keys == {PROJECT_REF, BASE_URL, EMAIL, PASSWORD}


def test_api_groups_keep_declared_keys() -> None:
    group = TestGroup(
        name="API", steps=(step("q", _noop),), required_keys=frozenset({ACCESS_TOKEN})
    )

    assert group.effective_required_keys == {ACCESS_TOKEN}


@pytest.mark.parametrize(
    ("wanted", "expected"),
    [((), True), (("@api",), True), (("API",), True), (("ui", "database"), True), (("ui",), False)],
)
def test_tag_matching(wanted: tuple[str, ...], expected: bool) -> None:
    group = TestGroup(name="API", steps=(step("q", _noop),), tags=("api", "database"))

    assert group.matches_tags(wanted) is expected


def test_excluded_step_keeps_its_reason() -> None:
    declared = excluded_step("Rollback", _noop, reason="not yet stable")

    assert declared.excluded is True
    assert declared.exclusion_reason == "not yet stable"


def test_carried_state_seed_and_missing_key() -> None:
    state = CarriedState({"table_name": "t1"})
    state.set("checkpoint", "cp")

    assert state.require("table_name") == "t1"
    assert "checkpoint" in state
    assert state.snapshot() == {"table_name": "t1", "checkpoint": "cp"}
    with pytest.raises(MissingCarriedState) as exc_info:
        state.require("branch_ref")
    assert exc_info.value.kind == "missing_state"
    assert exc_info.value.actual == ("checkpoint", "table_name")


def test_carried_state_instances_do_not_share_values() -> None:
    seed = {"table_name": "t1"}
    first = CarriedState(seed)
    second = CarriedState(seed)

    first.set("table_name", "changed")

    assert second.require("table_name") == "t1"
    assert seed == {"table_name": "t1"}


class _FakeApi:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_group_resources_are_lazy_and_closed_once() -> None:
    created: list[_FakeApi] = []
    opened: list[dict] = []
    released: list[str] = []

    def _api_factory(_configuration) -> _FakeApi:
        created.append(_FakeApi())
        return created[-1]

    @contextmanager
    def _opener(*, storage_state, headless):
        opened.append({"storage_state": storage_state, "headless": headless})
        yield object()
        released.append("page")

    resources = GroupResources(
        Configuration(values={"BASE_URL": "https://dash.test"}),
        api_client_factory=_api_factory,
        page_opener=_opener,
        headless=False,
    )
    assert created == [] and opened == []

    assert resources.api is resources.api
    assert resources.dashboard is resources.dashboard
    resources.close()

    assert len(created) == 1 and created[0].closed
    assert opened == [{"storage_state": None, "headless": False}]
    assert released == ["page"]
