"""
Pytest Configuration and Fixtures for Todoist MCP Tests.

This module provides fixtures, mock factories, and shared utilities for
testing the Todoist client, the tool handlers and the HTTP clients.

Architecture:
    - MockTodoistAPI: Stateful async stand-in for TodoistRESTClient
    - Factories: Generate test data (tasks, projects, sections, labels, lifelogs)
    - Fixtures: Provide configured clients and mock data
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable

import httpx
import pytest

from todoist_mcp.client import TodoistClient
from todoist_mcp.exceptions import TodoistRequestError
from todoist_mcp.models import Deadline, Due, Duration, Label, Project, Section, Task


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "tasks: Task-related tests")
    config.addinivalue_line("markers", "projects: Project and section tests")
    config.addinivalue_line("markers", "labels: Label-related tests")
    config.addinivalue_line("markers", "batch: Batch dispatch tests")
    config.addinivalue_line("markers", "validation: Input validation tests")
    config.addinivalue_line("markers", "handlers: Tool handler tests")
    config.addinivalue_line("markers", "transport: HTTP transport tests")
    config.addinivalue_line("markers", "lifelog: Limitless lifelog tests")
    config.addinivalue_line("markers", "server: MCP server surface tests")
    config.addinivalue_line("markers", "errors: Error handling tests")


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential ID generator for test objects."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        """Start numbering from zero again."""
        cls._counter = 0

    @classmethod
    def next_id(cls, prefix: str = "") -> str:
        """Return a fresh zero-padded ID."""
        cls._counter += 1
        return f"{prefix}{cls._counter:08d}"


# =============================================================================
# Test Data Factories
# =============================================================================


class TaskFactory:
    """Factory for creating Task test objects."""

    @staticmethod
    def create(
        id: str | None = None,
        content: str = "Test Task",
        project_id: str | None = "inbox",
        section_id: str | None = None,
        parent_id: str | None = None,
        labels: list[str] | None = None,
        priority: int = 1,
        due: Due | None = None,
        **kwargs,
    ) -> Task:
        """Create a Task with sensible defaults."""
        return Task(
            id=id or IDGenerator.next_id("task"),
            content=content,
            project_id=project_id,
            section_id=section_id,
            parent_id=parent_id,
            labels=labels or [],
            priority=priority,
            due=due,
            **kwargs,
        )

    @staticmethod
    def create_batch(count: int, **kwargs) -> list[Task]:
        return [TaskFactory.create(content=f"Task {i + 1}", **kwargs) for i in range(count)]


class ProjectFactory:
    """Factory for creating Project test objects."""

    @staticmethod
    def create(
        id: str | None = None,
        name: str = "Test Project",
        parent_id: str | None = None,
        color: str = "grey",
        is_favorite: bool = False,
        view_style: str = "list",
        **kwargs,
    ) -> Project:
        return Project(
            id=id or IDGenerator.next_id("proj"),
            name=name,
            parent_id=parent_id,
            color=color,
            is_favorite=is_favorite,
            view_style=view_style,
            **kwargs,
        )


class SectionFactory:
    @staticmethod
    def create(
        project_id: str,
        name: str = "Test Section",
        id: str | None = None,
        order: int = 1,
    ) -> Section:
        return Section(id=id or IDGenerator.next_id("sect"), name=name, project_id=project_id, order=order)


class LabelFactory:
    @staticmethod
    def create(
        name: str = "test-label",
        id: str | None = None,
        color: str = "grey",
        order: int = 1,
        is_favorite: bool = False,
    ) -> Label:
        return Label(
            id=id or IDGenerator.next_id("label"),
            name=name,
            color=color,
            order=order,
            is_favorite=is_favorite,
        )


class LifelogFactory:
    """Factory for Limitless API payloads (camelCase, as on the wire)."""

    @staticmethod
    def entry(
        id: str = "entry_1",
        title: str = "Test conversation",
        contents: list[dict[str, Any]] | None = None,
        **kwargs,
    ) -> dict[str, Any]:
        return {
            "id": id,
            "title": title,
            "startTime": "2024-01-15T09:00:00Z",
            "endTime": "2024-01-15T10:00:00Z",
            "contents": contents if contents is not None else [{"content": "Test content", "type": "blockquote"}],
            **kwargs,
        }

    @staticmethod
    def listing(entries: list[dict[str, Any]], next_cursor: str | None = None) -> dict[str, Any]:
        meta: dict[str, Any] = {"count": len(entries)}
        if next_cursor:
            meta["nextCursor"] = next_cursor
        return {"data": {"lifelogs": entries}, "meta": {"lifelogs": meta}}


# =============================================================================
# Mock API Classes
# =============================================================================


def _not_found(entity: str, entity_id: str) -> TodoistRequestError:
    return TodoistRequestError(f"HTTP 404: {entity} {entity_id} not found", status_code=404)


class MockTodoistAPI:
    """
    Stateful mock for TodoistRESTClient.

    Entities live in dicts keyed by ID. Every call is recorded so tests can
    assert on what reached the "remote" API, and failures can be configured
    per method (should_fail) or per request (reject).
    """

    def __init__(self):
        """Initialize mock with empty data stores."""
        self.tasks: dict[str, Task] = {}
        self.projects: dict[str, Project] = {}
        self.sections: dict[str, Section] = {}
        self.labels: dict[str, Label] = {}
        self.closed: bool = False

        # (method, args, kwargs) per call, in order
        self.call_history: list[tuple[str, tuple, dict]] = []

        # Configurable behaviors
        self.should_fail: dict[str, Exception | None] = {}
        self.rejections: dict[str, tuple[Callable[[dict[str, Any]], bool], Exception]] = {}

    def _record_call(self, method: str, args: tuple, kwargs: dict) -> None:
        """Append a call to the history."""
        self.call_history.append((method, args, kwargs))

    def _check_failure(self, method: str, kwargs: dict | None = None) -> None:
        """Raise the configured exception for this method, if any."""
        if method in self.should_fail and self.should_fail[method]:
            raise self.should_fail[method]
        if method in self.rejections:
            predicate, error = self.rejections[method]
            if predicate(kwargs or {}):
                raise error

    def reject(self, method: str, predicate: Callable[[dict[str, Any]], bool], error: Exception) -> None:
        """Fail only the calls to `method` whose kwargs satisfy `predicate`."""
        self.rejections[method] = (predicate, error)

    async def close(self) -> None:
        self._record_call("close", (), {})
        self.closed = True

    # -------------------------------------------------------------------------
    # Task Operations
    # -------------------------------------------------------------------------

    async def get_tasks(
        self,
        *,
        project_id: str | None = None,
        section_id: str | None = None,
        label: str | None = None,
        ids: list[str] | None = None,
    ) -> list[Task]:
        kwargs = {"project_id": project_id, "section_id": section_id, "label": label, "ids": ids}
        self._record_call("get_tasks", (), kwargs)
        self._check_failure("get_tasks", kwargs)

        tasks = list(self.tasks.values())
        if project_id:
            tasks = [t for t in tasks if t.project_id == project_id]
        if section_id:
            tasks = [t for t in tasks if t.section_id == section_id]
        if label:
            tasks = [t for t in tasks if label in t.labels]
        if ids:
            tasks = [t for t in tasks if t.id in ids]
        return tasks

    async def filter_tasks(self, query: str, lang: str | None = None) -> list[Task]:
        self._record_call("filter_tasks", (query,), {"lang": lang})
        self._check_failure("filter_tasks", {"query": query})
        if query == "today":
            return [t for t in self.tasks.values() if t.due is not None]
        return list(self.tasks.values())

    async def get_task(self, task_id: str) -> Task:
        self._record_call("get_task", (task_id,), {})
        self._check_failure("get_task", {"task_id": task_id})
        if task_id not in self.tasks:
            raise _not_found("Task", task_id)
        return self.tasks[task_id]

    @staticmethod
    def _task_fields(args: dict[str, Any]) -> dict[str, Any]:
        fields = {
            k: args[k]
            for k in ("content", "description", "project_id", "section_id", "parent_id", "labels", "priority")
            if k in args
        }
        if "due_datetime" in args:
            fields["due"] = Due(date=args["due_datetime"], datetime=args["due_datetime"])
        elif "due_date" in args:
            fields["due"] = Due(date=args["due_date"])
        elif "due_string" in args:
            fields["due"] = Due(date="2025-01-01", string=args["due_string"], lang=args.get("due_lang"))
        if "duration" in args:
            fields["duration"] = Duration(amount=args["duration"], unit=args["duration_unit"])
        if "deadline_date" in args:
            fields["deadline"] = Deadline(date=args["deadline_date"], lang=args.get("deadline_lang"))
        return fields

    async def add_task(self, **args: Any) -> Task:
        self._record_call("add_task", (), args)
        self._check_failure("add_task", args)
        fields = self._task_fields(args)
        fields.setdefault("project_id", "inbox")
        task = Task(id=IDGenerator.next_id("task"), **fields)
        self.tasks[task.id] = task
        return task

    async def update_task(self, task_id: str, **args: Any) -> Task:
        self._record_call("update_task", (task_id,), args)
        self._check_failure("update_task", {"task_id": task_id, **args})
        if task_id not in self.tasks:
            raise _not_found("Task", task_id)
        task = self.tasks[task_id].model_copy(update=self._task_fields(args))
        self.tasks[task_id] = task
        return task

    async def move_task(self, task_id: str, **destination: Any) -> Task:
        self._record_call("move_task", (task_id,), destination)
        self._check_failure("move_task", {"task_id": task_id, **destination})
        if task_id not in self.tasks:
            raise _not_found("Task", task_id)
        update = dict(destination)
        if "section_id" in update and update["section_id"] in self.sections:
            update["project_id"] = self.sections[update["section_id"]].project_id
        task = self.tasks[task_id].model_copy(update=update)
        self.tasks[task_id] = task
        return task

    async def close_task(self, task_id: str) -> bool:
        self._record_call("close_task", (task_id,), {})
        self._check_failure("close_task", {"task_id": task_id})
        if task_id not in self.tasks:
            raise _not_found("Task", task_id)
        self.tasks.pop(task_id)
        return True

    async def delete_task(self, task_id: str) -> bool:
        self._record_call("delete_task", (task_id,), {})
        self._check_failure("delete_task", {"task_id": task_id})
        if task_id not in self.tasks:
            raise _not_found("Task", task_id)
        self.tasks.pop(task_id)
        return True

    # -------------------------------------------------------------------------
    # Project & Section Operations
    # -------------------------------------------------------------------------

    async def get_projects(self) -> list[Project]:
        self._record_call("get_projects", (), {})
        self._check_failure("get_projects")
        return list(self.projects.values())

    async def add_project(self, **args: Any) -> Project:
        self._record_call("add_project", (), args)
        self._check_failure("add_project", args)
        project = Project(id=IDGenerator.next_id("proj"), **args)
        self.projects[project.id] = project
        return project

    async def update_project(self, project_id: str, **args: Any) -> Project:
        self._record_call("update_project", (project_id,), args)
        self._check_failure("update_project", {"project_id": project_id, **args})
        if project_id not in self.projects:
            raise _not_found("Project", project_id)
        project = self.projects[project_id].model_copy(update=args)
        self.projects[project_id] = project
        return project

    async def get_sections(self, project_id: str) -> list[Section]:
        self._record_call("get_sections", (project_id,), {})
        self._check_failure("get_sections", {"project_id": project_id})
        return [s for s in self.sections.values() if s.project_id == project_id]

    async def add_section(self, **args: Any) -> Section:
        self._record_call("add_section", (), args)
        self._check_failure("add_section", args)
        section = Section(id=IDGenerator.next_id("sect"), **args)
        self.sections[section.id] = section
        return section

    # -------------------------------------------------------------------------
    # Label Operations
    # -------------------------------------------------------------------------

    async def get_labels(self) -> list[Label]:
        self._record_call("get_labels", (), {})
        self._check_failure("get_labels")
        return list(self.labels.values())

    async def get_label(self, label_id: str) -> Label:
        self._record_call("get_label", (label_id,), {})
        self._check_failure("get_label", {"label_id": label_id})
        if label_id not in self.labels:
            raise _not_found("Label", label_id)
        return self.labels[label_id]

    async def add_label(self, **args: Any) -> Label:
        self._record_call("add_label", (), args)
        self._check_failure("add_label", args)
        label = Label(id=IDGenerator.next_id("label"), **args)
        self.labels[label.id] = label
        return label

    async def update_label(self, label_id: str, **args: Any) -> Label:
        self._record_call("update_label", (label_id,), args)
        self._check_failure("update_label", {"label_id": label_id, **args})
        if label_id not in self.labels:
            raise _not_found("Label", label_id)
        label = self.labels[label_id].model_copy(update=args)
        self.labels[label_id] = label
        return label

    async def delete_label(self, label_id: str) -> bool:
        self._record_call("delete_label", (label_id,), {})
        self._check_failure("delete_label", {"label_id": label_id})
        if label_id not in self.labels:
            raise _not_found("Label", label_id)
        self.labels.pop(label_id)
        return True

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def add(self, *entities: Task | Project | Section | Label) -> None:
        """Put pre-built entities into the matching store."""
        stores = {Task: self.tasks, Project: self.projects, Section: self.sections, Label: self.labels}
        for entity in entities:
            stores[type(entity)][entity.id] = entity

    def clear_call_history(self) -> None:
        """Forget every recorded call."""
        self.call_history.clear()

    def get_calls(self, method_name: str) -> list[tuple[tuple, dict]]:
        """(args, kwargs) of each call to `method_name`, oldest first."""
        return [(args, kwargs) for name, args, kwargs in self.call_history if name == method_name]

    def last_call(self, method_name: str) -> tuple[tuple, dict]:
        calls = self.get_calls(method_name)
        assert calls, f"Expected {method_name} to have been called"
        return calls[-1]

    def assert_called(self, method_name: str, times: int | None = None) -> None:
        """Fail unless `method_name` ran (exactly `times` times, when given)."""
        calls = self.get_calls(method_name)
        if times is not None:
            assert len(calls) == times, f"Expected {method_name} to be called {times} times, got {len(calls)}"
        else:
            assert len(calls) > 0, f"Expected {method_name} to be called at least once"

    def assert_not_called(self, method_name: str) -> None:
        """Fail if `method_name` ran at all."""
        calls = self.get_calls(method_name)
        assert len(calls) == 0, f"Expected {method_name} not to be called, but was called {len(calls)} times"

    @property
    def mutations(self) -> list[str]:
        """Names of every mutating call made so far."""
        readers = {"get_tasks", "filter_tasks", "get_task", "get_projects", "get_sections", "get_labels", "get_label", "close"}
        return [name for name, _, _ in self.call_history if name not in readers]


class RecordingTransport:
    """
    httpx.MockTransport wrapper that records requests.

    `handler` maps a request to a response; requests are kept in order.
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def mock_api() -> MockTodoistAPI:
    """Create a fresh mock API instance."""
    return MockTodoistAPI()


@pytest.fixture
async def client(mock_api: MockTodoistAPI) -> AsyncIterator[TodoistClient]:
    """
    Create a TodoistClient backed by the mock API.

    The internal REST client is replaced before connect(), so no HTTP
    session is ever opened.
    """
    client = TodoistClient(api_token="test_token")
    client._api = mock_api

    await client.connect()
    yield client
    await client.disconnect()


@pytest.fixture
def task_factory() -> type[TaskFactory]:
    return TaskFactory


@pytest.fixture
def project_factory() -> type[ProjectFactory]:
    return ProjectFactory


@pytest.fixture
def section_factory() -> type[SectionFactory]:
    return SectionFactory


@pytest.fixture
def label_factory() -> type[LabelFactory]:
    return LabelFactory


@pytest.fixture
def lifelog_factory() -> type[LifelogFactory]:
    return LifelogFactory


@pytest.fixture
def recording_transport() -> type[RecordingTransport]:
    return RecordingTransport
