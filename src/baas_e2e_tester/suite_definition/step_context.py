"""Per-group-instance resources and the context handed to every step."""

from __future__ import annotations

import threading
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any

from baas_e2e_tester.configuration import Configuration
from baas_e2e_tester.dashboard_ui import DashboardNavigator, PageOpener, open_dashboard_page
from baas_e2e_tester.management_api import ManagementApiClient
from baas_e2e_tester.session_bootstrap import SessionArtifact

from .carried_state import CarriedState

ApiClientFactory = Callable[[Configuration], ManagementApiClient]


def default_api_client_factory(configuration: Configuration) -> ManagementApiClient:
    return ManagementApiClient(configuration.base_api_url, configuration.access_token)


class GroupResources:
    """External clients opened on first use and closed when the group finishes."""

    def __init__(
        self,
        configuration: Configuration,
        *,
        session: SessionArtifact | None = None,
        api_client_factory: ApiClientFactory = default_api_client_factory,
        page_opener: PageOpener = open_dashboard_page,
        headless: bool = True,
        ui_timeout_seconds: float = 30.0,
    ) -> None:
        self._configuration = configuration
        self._session = session
        self._api_client_factory = api_client_factory
        self._page_opener = page_opener
        self._headless = headless
        self._ui_timeout_seconds = ui_timeout_seconds
        self._exit_stack = ExitStack()
        self._api: ManagementApiClient | None = None
        self._dashboard: DashboardNavigator | None = None

    @property
    def api(self) -> ManagementApiClient:
        if self._api is None:
            client = self._api_client_factory(self._configuration)
            self._exit_stack.callback(client.close)
            self._api = client
        return self._api

    @property
    def dashboard(self) -> DashboardNavigator:
        if self._dashboard is None:
            storage_state = self._session.path if self._session is not None else None
            page = self._exit_stack.enter_context(
                self._page_opener(storage_state=storage_state, headless=self._headless)
            )
            self._dashboard = DashboardNavigator(
                page, self._configuration.base_url, timeout_seconds=self._ui_timeout_seconds
            )
        return self._dashboard

    def close(self) -> None:
        self._exit_stack.close()


@dataclass
class StepContext:
    """Everything a step may touch: configuration, carried state, and clients.

    ``stop_event`` is set once the running step has been given up on; long waits
    inside a step pass it to ``poll_until`` so the step thread ends early.
    """

    group_name: str
    configuration: Configuration
    state: CarriedState
    resources: Any
    stop_event: threading.Event = field(default_factory=threading.Event)

    @property
    def api(self) -> ManagementApiClient:
        return self.resources.api

    @property
    def dashboard(self) -> DashboardNavigator:
        return self.resources.dashboard

    @property
    def project_ref(self) -> str:
        return self.configuration.project_ref
