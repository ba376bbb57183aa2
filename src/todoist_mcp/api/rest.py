"""
Todoist REST transport.

This module provides TodoistRESTClient, a thin async wrapper around the
Todoist REST API. It owns the HTTP session, the bearer token and cursor
pagination, and converts JSON payloads into the package's models.

It deliberately knows nothing about tool parameter names, name resolution
or error normalization; those live in TodoistClient.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, TypeVar

import httpx

from todoist_mcp.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT, PAGE_SIZE
from todoist_mcp.exceptions import TodoistRequestError
from todoist_mcp.models import Label, Project, Section, Task

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="TodoistRESTClient")


class TodoistRESTClient:
    """
    Async client for the Todoist REST API.

    Usage:
        async with TodoistRESTClient(token="...") as api:
            tasks = await api.get_tasks(project_id="...")
            task = await api.add_task(content="Buy milk", due_string="tomorrow")
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self: T) -> T:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # =========================================================================
    # Request plumbing
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._http.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = e.response.text[:200] or e.response.reason_phrase
            raise TodoistRequestError(f"HTTP {status}: {detail}", status_code=status) from e
        except httpx.RequestError as e:
            raise TodoistRequestError(str(e) or type(e).__name__) from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def _get_all(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Fetch every page of a cursor-paginated collection."""
        query = {k: v for k, v in (params or {}).items() if v is not None}
        query.setdefault("limit", PAGE_SIZE)
        items: list[dict[str, Any]] = []

        while True:
            data = await self._request("GET", path, params=query)
            if isinstance(data, list):
                items.extend(data)
                return items

            items.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not cursor:
                return items
            query["cursor"] = cursor

    # =========================================================================
    # Tasks
    # =========================================================================

    async def get_tasks(
        self,
        *,
        project_id: str | None = None,
        section_id: str | None = None,
        label: str | None = None,
        ids: list[str] | None = None,
    ) -> list[Task]:
        params = {
            "project_id": project_id,
            "section_id": section_id,
            "label": label,
            "ids": ",".join(ids) if ids else None,
        }
        return [Task.from_api(t) for t in await self._get_all("/tasks", params)]

    async def filter_tasks(self, query: str, lang: str | None = None) -> list[Task]:
        data = await self._get_all("/tasks/filter", {"query": query, "lang": lang})
        return [Task.from_api(t) for t in data]

    async def get_task(self, task_id: str) -> Task:
        return Task.from_api(await self._request("GET", f"/tasks/{task_id}"))

    async def add_task(self, **args: Any) -> Task:
        return Task.from_api(await self._request("POST", "/tasks", json=args))

    async def update_task(self, task_id: str, **args: Any) -> Task:
        return Task.from_api(await self._request("POST", f"/tasks/{task_id}", json=args))

    async def move_task(self, task_id: str, **destination: Any) -> Task:
        data = await self._request("POST", f"/tasks/{task_id}/move", json=destination)
        if data is None:
            return await self.get_task(task_id)
        return Task.from_api(data)

    async def close_task(self, task_id: str) -> bool:
        await self._request("POST", f"/tasks/{task_id}/close")
        return True

    async def delete_task(self, task_id: str) -> bool:
        await self._request("DELETE", f"/tasks/{task_id}")
        return True

    # =========================================================================
    # Projects & sections
    # =========================================================================

    async def get_projects(self) -> list[Project]:
        return [Project.from_api(p) for p in await self._get_all("/projects")]

    async def add_project(self, **args: Any) -> Project:
        return Project.from_api(await self._request("POST", "/projects", json=args))

    async def update_project(self, project_id: str, **args: Any) -> Project:
        return Project.from_api(await self._request("POST", f"/projects/{project_id}", json=args))

    async def get_sections(self, project_id: str) -> list[Section]:
        data = await self._get_all("/sections", {"project_id": project_id})
        return [Section.from_api(s) for s in data]

    async def add_section(self, **args: Any) -> Section:
        return Section.from_api(await self._request("POST", "/sections", json=args))

    # =========================================================================
    # Labels
    # =========================================================================

    async def get_labels(self) -> list[Label]:
        return [Label.from_api(l) for l in await self._get_all("/labels")]

    async def get_label(self, label_id: str) -> Label:
        return Label.from_api(await self._request("GET", f"/labels/{label_id}"))

    async def add_label(self, **args: Any) -> Label:
        return Label.from_api(await self._request("POST", "/labels", json=args))

    async def update_label(self, label_id: str, **args: Any) -> Label:
        return Label.from_api(await self._request("POST", f"/labels/{label_id}", json=args))

    async def delete_label(self, label_id: str) -> bool:
        await self._request("DELETE", f"/labels/{label_id}")
        return True
