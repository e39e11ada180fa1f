"""HTTP client for the platform Management API."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from baas_e2e_tester.expectations import expect_status

from .api_responses import ApiResponse

_LOGGER = logging.getLogger(__name__)

OK = 200
CREATED = 201


class ManagementApiClient:
    """Thin Management API wrapper that enforces each endpoint's documented status."""

    def __init__(
        self,
        base_api_url: str,
        access_token: str,
        *,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ManagementApiClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def run_query(
        self,
        project_ref: str,
        query: str,
        *,
        read_only: bool,
        accepted_statuses: Iterable[int] = (),
    ) -> ApiResponse:
        """Execute SQL; ``accepted_statuses`` widens the contract beyond 201 for the caller."""
        return self._request(
            "POST",
            f"/v1/projects/{project_ref}/database/query",
            expected=(CREATED, *accepted_statuses),
            json={"query": query, "read_only": read_only},
        )

    def apply_migration(
        self,
        project_ref: str,
        query: str,
        *,
        name: str,
        idempotency_key: str,
    ) -> ApiResponse:
        return self._request(
            "POST",
            f"/v1/projects/{project_ref}/database/migrations",
            expected=(OK,),
            json={"query": query, "name": name},
            headers={"Idempotency-Key": idempotency_key},
        )

    def get_auth_config(self, project_ref: str) -> ApiResponse:
        return self._request("GET", f"/v1/projects/{project_ref}/config/auth", expected=(OK,))

    def update_auth_config(self, project_ref: str, changes: Mapping[str, Any]) -> ApiResponse:
        return self._request(
            "PATCH",
            f"/v1/projects/{project_ref}/config/auth",
            expected=(OK,),
            json=dict(changes),
        )

    def update_database_config(
        self, project_ref: str, changes: Mapping[str, Any]
    ) -> ApiResponse:
        return self._request(
            "PATCH",
            f"/v1/projects/{project_ref}/config/database",
            expected=(OK,),
            json=dict(changes),
        )

    def create_backup(self, project_ref: str, name: str) -> ApiResponse:
        return self._request(
            "POST",
            f"/v1/projects/{project_ref}/database/backups",
            expected=(CREATED,),
            json={"name": name},
        )

    def list_backups(self, project_ref: str) -> ApiResponse:
        return self._request(
            "GET", f"/v1/projects/{project_ref}/database/backups", expected=(OK,)
        )

    def restore_backup(self, project_ref: str, restore_point_name: str) -> ApiResponse:
        return self._request(
            "POST",
            f"/v1/projects/{project_ref}/database/restores",
            expected=(OK,),
            json={"restore_point_name": restore_point_name},
        )

    def restore_point_in_time(self, project_ref: str, recovery_time: str) -> ApiResponse:
        return self._request(
            "POST",
            f"/v1/projects/{project_ref}/database/backups/restore-pitr",
            expected=(OK,),
            json={"recovery_time": recovery_time},
        )

    def create_branch(self, project_ref: str, branch_name: str) -> ApiResponse:
        return self._request(
            "POST",
            f"/v1/projects/{project_ref}/branches",
            expected=(CREATED,),
            json={"branch_name": branch_name},
        )

    def get_branch(self, project_ref: str, branch_ref: str) -> ApiResponse:
        return self._request(
            "GET", f"/v1/projects/{project_ref}/branches/{branch_ref}", expected=(OK,)
        )

    def delete_branch(self, project_ref: str, branch_ref: str) -> ApiResponse:
        return self._request(
            "DELETE", f"/v1/projects/{project_ref}/branches/{branch_ref}", expected=(OK,)
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        expected: tuple[int, ...],
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        endpoint = f"{method} {path}"
        _LOGGER.info("-> %s", endpoint)
        response = self._client.request(method, path, json=json, headers=headers)
        _LOGGER.info("<- %s %d", endpoint, response.status_code)
        expect_status(response, expected, endpoint=endpoint)
        return ApiResponse(
            endpoint=endpoint,
            status_code=response.status_code,
            body=_decode_body(response),
        )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
