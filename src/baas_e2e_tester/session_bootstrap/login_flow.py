"""Interactive dashboard login that produces the reusable session artifact."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError

from baas_e2e_tester.configuration import BASE_URL, EMAIL, PASSWORD, Configuration
from baas_e2e_tester.dashboard_ui import PageOpener, open_dashboard_page

from .session_artifacts import SessionArtifact

_LOGGER = logging.getLogger(__name__)

SIGN_IN_PATH = "/dashboard/sign-in"
AUTHENTICATED_URL = re.compile(r"/dashboard(?!/sign-in)")
SESSION_KEYS: tuple[str, ...] = (BASE_URL, EMAIL, PASSWORD)


class AuthenticationFailed(Exception):
    """Raised when the login flow does not reach an authenticated dashboard URL."""

    kind = "authentication_failed"


def is_authenticated_url(url: str) -> bool:
    return AUTHENTICATED_URL.search(url) is not None


def authenticate(
    configuration: Configuration,
    *,
    session_path: Path,
    open_page: PageOpener = open_dashboard_page,
    headless: bool = True,
    timeout_seconds: float = 30.0,
) -> SessionArtifact:
    """Log in once through the dashboard sign-in page and save the storage state.

    Raises:
      AuthenticationFailed: If the browser is still on the sign-in path after
        ``timeout_seconds``, or the browser cannot be launched or reports any
        other error.
    """
    sign_in_url = f"{configuration.base_url}{SIGN_IN_PATH}"
    _LOGGER.info("authenticating against %s", sign_in_url)
    try:
        with open_page(storage_state=None, headless=headless) as page:
            try:
                page.goto(sign_in_url)
                page.fill('input[type="email"]', configuration.email)
                page.fill('input[type="password"]', configuration.password)
                page.get_by_role("button", name="Sign In").click()
                page.wait_for_url(is_authenticated_url, timeout=timeout_seconds * 1000)
            except PlaywrightError as exc:
                raise AuthenticationFailed(
                    f"Login did not reach an authenticated dashboard URL within "
                    f"{timeout_seconds:g}s (last URL: {page.url})"
                ) from exc

            session_path.parent.mkdir(parents=True, exist_ok=True)
            page.context.storage_state(path=str(session_path))
    except PlaywrightError as exc:
        raise AuthenticationFailed(f"Browser error during login: {exc}") from exc
    _LOGGER.info("session artifact written to %s", session_path)
    return SessionArtifact(
        path=session_path.resolve(),
        base_url=configuration.base_url,
        created_at=datetime.now(UTC),
    )
