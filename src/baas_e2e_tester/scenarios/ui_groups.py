"""Dashboard navigation groups that run inside the authenticated browser session."""

from __future__ import annotations

import re
from dataclasses import dataclass

from baas_e2e_tester.configuration import BASE_URL, ORG_REF, PROJECT_REF
from baas_e2e_tester.suite_definition import StepContext, TestGroup, step

from .scenario_support import DOCS_URL


@dataclass(frozen=True)
class ProjectTool:
    """A project sidebar entry and the route it must land on."""

    label: str
    link_name: re.Pattern[str]
    route: str
    tag: str

    @property
    def group_name(self) -> str:
        return f"{self.label} UI"


PROJECT_TOOLS = (
    ProjectTool(
        "Table Editor", re.compile("table editor", re.IGNORECASE), "editor", "table-editor"
    ),
    ProjectTool("SQL Editor", re.compile("sql editor", re.IGNORECASE), "sql", "sql-editor"),
)


def project_tool_group(tool: ProjectTool) -> TestGroup:
    """Open the project dashboard, follow ``tool``'s link and check the resulting URL."""

    def _open_project(context: StepContext) -> None:
        context.dashboard.open_project(context.project_ref)

    def _follow_link(context: StepContext) -> None:
        context.dashboard.click_link(tool.link_name)
        context.dashboard.expect_url(
            re.compile(f"/dashboard/project/{re.escape(context.project_ref)}/{tool.route}")
        )

    return TestGroup(
        name=tool.group_name,
        steps=(
            step("Open project dashboard", _open_project),
            step(f"{tool.label} navigation and accessibility", _follow_link),
        ),
        required_keys=frozenset({BASE_URL, PROJECT_REF}),
        tags=("ui", "projects", tool.tag),
        docs=(DOCS_URL,),
        needs_session=True,
    )


def _open_organization(context: StepContext) -> None:
    context.dashboard.open_organization(context.configuration.org_ref)


def _expect_new_project_link(context: StepContext) -> None:
    context.dashboard.expect_link_visible(re.compile("new project", re.IGNORECASE))


def _open_organizations(context: StepContext) -> None:
    context.dashboard.open_organizations()


def _expect_organizations_heading(context: StepContext) -> None:
    context.dashboard.expect_heading_visible(re.compile("your organizations", re.IGNORECASE))


def build_ui_groups() -> tuple[TestGroup, ...]:
    return (
        *(project_tool_group(tool) for tool in PROJECT_TOOLS),
        TestGroup(
            name="New Project UI",
            steps=(
                step("Open organization dashboard", _open_organization),
                step("New project link is visible", _expect_new_project_link),
            ),
            required_keys=frozenset({BASE_URL, ORG_REF}),
            tags=("ui", "projects", "new-project"),
            docs=(DOCS_URL,),
            needs_session=True,
        ),
        TestGroup(
            name="Organizations UI",
            steps=(
                step("Open organizations list", _open_organizations),
                step("Organizations heading is visible", _expect_organizations_heading),
            ),
            required_keys=frozenset({BASE_URL}),
            tags=("ui", "organizations"),
            docs=(DOCS_URL,),
            needs_session=True,
        ),
    )
