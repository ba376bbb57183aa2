"""
Todoist Client.

TodoistClient is the operation-level API used by the tool handlers. It maps
tool parameters onto REST requests (through the builders in
todoist_mcp.client.requests), resolves names to IDs, and normalizes every
remote failure into a TodoistAPIError whose message reads
"Todoist API error: <original message>".
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Awaitable, Callable, TypeVar

from todoist_mcp.api import TodoistRESTClient
from todoist_mcp.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT
from todoist_mcp.client.requests import LabelRequest, ProjectRequest, TaskRequest
from todoist_mcp.client.resolution import find_by_name, needs_lookup, resolve_id
from todoist_mcp.exceptions import (
    TodoistAPIError,
    TodoistConfigurationError,
    TodoistValidationError,
)
from todoist_mcp.models import Label, Project, Section, Task
from todoist_mcp.settings import Settings, get_settings
from todoist_mcp.tools.inputs import (
    LabelCreateParams,
    LabelUpdateParams,
    ProjectCreateParams,
    ProjectUpdateParams,
    TaskCreateParams,
    TaskQueryInput,
    TaskUpdateParams,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")
C = TypeVar("C", bound="TodoistClient")

TOKEN_HELP_URL = "https://todoist.com/app/settings/integrations/developer"


class TodoistClient:
    """
    Operation-level Todoist client.

    Usage:
        async with TodoistClient(api_token="...") as client:
            task = await client.create_task(TaskCreateParams(content="Buy milk"))
            tasks = await client.get_tasks(TaskQueryInput(filter="today"))
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not api_token:
            raise TodoistConfigurationError(
                f"Todoist API token is required. Get your API token from {TOKEN_HELP_URL}"
            )
        self._api_token = api_token
        self._base_url = base_url
        self._timeout = timeout
        self._api: TodoistRESTClient | None = None

    @classmethod
    def from_settings(cls: type[C], settings: Settings | None = None) -> C:
        settings = settings or get_settings()
        if not settings.todoist_api_token:
            raise TodoistConfigurationError(
                "Environment variable TODOIST_API_TOKEN is required. "
                f"Get your API token from {TOKEN_HELP_URL}"
            )
        return cls(
            api_token=settings.todoist_api_token,
            base_url=settings.todoist_api_url,
            timeout=settings.todoist_timeout,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def connect(self) -> None:
        if self._api is None:
            self._api = TodoistRESTClient(
                token=self._api_token,
                base_url=self._base_url,
                timeout=self._timeout,
            )
        logger.info("Todoist client ready (%s)", self._base_url)

    async def disconnect(self) -> None:
        if self._api is not None:
            await self._api.close()
            self._api = None

    async def __aenter__(self: C) -> C:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    @property
    def api(self) -> TodoistRESTClient:
        if self._api is None:
            raise TodoistConfigurationError("Client not connected. Call 'await client.connect()' first.")
        return self._api

    async def _handle_request(self, request: Callable[[], Awaitable[R]]) -> R:
        """Run one remote call, normalizing any failure."""
        try:
            return await request()
        except Exception as e:
            raise TodoistAPIError.wrap(e) from e

    # =========================================================================
    # Tasks
    # =========================================================================

    async def get_tasks(self, params: TaskQueryInput | None = None) -> list[Task]:
        """
        List tasks.

        A natural-language `filter` routes to the filter endpoint, in which
        case project/section/label/ids are ignored. Priority and limit are
        applied locally, after the fetch, in that order.
        """
        params = params or TaskQueryInput()

        async def request() -> list[Task]:
            if params.filter:
                return await self.api.filter_tasks(params.filter, lang=params.lang)
            return await self.api.get_tasks(
                project_id=params.project_id,
                section_id=params.section_id,
                label=params.label,
                ids=params.ids,
            )

        tasks = await self._handle_request(request)

        if params.priority:
            tasks = [t for t in tasks if t.priority == params.priority]
        if params.limit and len(tasks) > params.limit:
            tasks = tasks[: params.limit]
        return tasks

    async def get_task(self, task_id: str) -> Task:
        return await self._handle_request(lambda: self.api.get_task(task_id))

    async def create_task(self, params: TaskCreateParams) -> Task:
        args = TaskRequest.for_create(params).to_args()
        return await self._handle_request(lambda: self.api.add_task(**args))

    async def update_task(self, task_id: str, params: TaskUpdateParams) -> Task:
        args = TaskRequest.for_update(params).to_args()
        return await self._handle_request(lambda: self.api.update_task(task_id, **args))

    async def move_task(self, task_id: str, destination: dict[str, str]) -> Task:
        if len(destination) != 1:
            raise TodoistValidationError(
                "Exactly one of project_id, section_id, or parent_id must be specified"
            )
        return await self._handle_request(lambda: self.api.move_task(task_id, **destination))

    async def delete_task(self, task_id: str) -> bool:
        return await self._handle_request(lambda: self.api.delete_task(task_id))

    async def complete_task(self, task_id: str) -> bool:
        return await self._handle_request(lambda: self.api.close_task(task_id))

    async def find_task_by_name(self, name: str) -> Task | None:
        return find_by_name(await self.get_tasks(), name)

    async def resolve_task_id(self, task_id: str | None, task_name: str | None) -> str:
        tasks = await self.get_tasks() if needs_lookup(task_id, task_name) else None
        return resolve_id("task", task_id, task_name, tasks)

    # =========================================================================
    # Projects
    # =========================================================================

    async def get_projects(self) -> list[Project]:
        return await self._handle_request(self.api.get_projects)

    async def create_project(self, params: ProjectCreateParams, parent_id: str | None = None) -> Project:
        args = ProjectRequest(
            name=params.name,
            parent_id=parent_id or params.parent_id,
            color=params.color,
            is_favorite=params.favorite,
            view_style=params.view_style.value if params.view_style else None,
        ).to_args()
        return await self._handle_request(lambda: self.api.add_project(**args))

    async def update_project(self, project_id: str, params: ProjectUpdateParams) -> Project:
        args = ProjectRequest(
            name=params.name,
            color=params.color,
            is_favorite=params.favorite,
            view_style=params.view_style.value if params.view_style else None,
        ).to_args()
        return await self._handle_request(lambda: self.api.update_project(project_id, **args))

    async def find_project_by_name(self, name: str) -> Project | None:
        return find_by_name(await self.get_projects(), name)

    async def resolve_project_id(self, project_id: str | None, project_name: str | None) -> str:
        projects = await self.get_projects() if needs_lookup(project_id, project_name) else None
        return resolve_id("project", project_id, project_name, projects)

    # =========================================================================
    # Sections
    # =========================================================================

    async def get_project_sections(self, project_id: str) -> list[Section]:
        return await self._handle_request(lambda: self.api.get_sections(project_id))

    async def create_section(self, project_id: str, name: str, order: int | None = None) -> Section:
        args: dict[str, Any] = {"name": name, "project_id": project_id}
        if order is not None:
            args["order"] = order
        return await self._handle_request(lambda: self.api.add_section(**args))

    # =========================================================================
    # Labels
    # =========================================================================

    async def get_personal_labels(self) -> list[Label]:
        return await self._handle_request(self.api.get_labels)

    async def get_personal_label(self, label_id: str) -> Label:
        return await self._handle_request(lambda: self.api.get_label(label_id))

    async def create_personal_label(self, params: LabelCreateParams) -> Label:
        args = LabelRequest(
            name=params.name,
            color=params.color,
            order=params.order,
            is_favorite=params.is_favorite,
        ).to_args()
        return await self._handle_request(lambda: self.api.add_label(**args))

    async def update_personal_label(self, label_id: str, params: LabelUpdateParams) -> Label:
        args = LabelRequest(
            name=params.name,
            color=params.color,
            order=params.order,
            is_favorite=params.is_favorite,
        ).to_args()
        return await self._handle_request(lambda: self.api.update_label(label_id, **args))

    async def delete_personal_label(self, label_id: str) -> bool:
        return await self._handle_request(lambda: self.api.delete_label(label_id))

    async def find_label_by_name(self, name: str) -> Label | None:
        return find_by_name(await self.get_personal_labels(), name)

    async def resolve_label_id(self, label_id: str | None, label_name: str | None) -> str:
        labels = await self.get_personal_labels() if needs_lookup(label_id, label_name) else None
        return resolve_id("label", label_id, label_name, labels)
