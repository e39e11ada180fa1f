"""Role-based navigation and assertions against the web dashboard."""

from __future__ import annotations

import logging
import re
from typing import Any

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from baas_e2e_tester.expectations import AssertionMismatch

_LOGGER = logging.getLogger(__name__)


class DashboardNavigator:
    """Dashboard page object.

    Elements are located by accessible role and name only; failed waits surface as
    AssertionMismatch carrying the page URL at the time of failure.
    """

    def __init__(self, page: Any, base_url: str, *, timeout_seconds: float = 30.0) -> None:
        self._page = page
        self._base_url = base_url.rstrip("/")
        self._timeout_ms = timeout_seconds * 1000

    @property
    def url(self) -> str:
        return str(self._page.url)

    def open_organizations(self) -> None:
        self._goto("/dashboard/organizations")

    def open_organization(self, org_ref: str) -> None:
        self._goto(f"/dashboard/org/{org_ref}")

    def open_project(self, project_ref: str) -> None:
        self._goto(f"/dashboard/project/{project_ref}")

    def click_link(self, name: re.Pattern[str]) -> None:
        try:
            self._page.get_by_role("link", name=name).first.click(timeout=self._timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise AssertionMismatch(
                actual=self.url,
                expected=f"clickable link /{name.pattern}/",
                location="click_link",
            ) from exc

    def expect_url(self, pattern: re.Pattern[str]) -> None:
        try:
            self._page.wait_for_url(
                lambda url: pattern.search(url) is not None, timeout=self._timeout_ms
            )
        except PlaywrightTimeoutError as exc:
            raise AssertionMismatch(
                actual=self.url,
                expected=f"URL matching /{pattern.pattern}/",
                location="expect_url",
            ) from exc

    def expect_link_visible(self, name: re.Pattern[str]) -> None:
        self._expect_visible("link", name)

    def expect_heading_visible(self, name: re.Pattern[str]) -> None:
        self._expect_visible("heading", name)

    def _expect_visible(self, role: str, name: re.Pattern[str]) -> None:
        try:
            self._page.get_by_role(role, name=name).first.wait_for(
                state="visible", timeout=self._timeout_ms
            )
        except PlaywrightTimeoutError as exc:
            raise AssertionMismatch(
                actual=self.url,
                expected=f"visible {role} /{name.pattern}/",
                location=f"expect_{role}_visible",
            ) from exc

    def _goto(self, path: str) -> None:
        target = f"{self._base_url}{path}"
        _LOGGER.info("navigating to %s", target)
        self._page.goto(target)
