"""Browser lifecycle helpers built on the Playwright sync API."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Any, Protocol

from playwright.sync_api import sync_playwright


class PageOpener(Protocol):  # pylint: disable=too-few-public-methods
    """Callable that yields a ready browser page for the duration of a ``with`` block."""

    def __call__(
        self, *, storage_state: Path | None, headless: bool
    ) -> AbstractContextManager[Any]: ...


@contextmanager
def open_dashboard_page(*, storage_state: Path | None, headless: bool = True) -> Iterator[Any]:
    """Launch Chromium, optionally load a saved session, and yield a fresh page.

    The page and every object derived from it must stay on the calling thread.
    """
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=headless)
        try:
            context = browser.new_context(
                storage_state=str(storage_state) if storage_state is not None else None
            )
            yield context.new_page()
        finally:
            browser.close()
