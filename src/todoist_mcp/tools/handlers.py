"""
Tool handlers.

One coroutine per MCP tool. Each handler takes the client and the raw
argument mapping, and always returns an envelope dict:

    1. validate the arguments against the tool's input model
    2. run in batch mode when the batch array is present and non-empty,
       otherwise in single mode (which needs its primary field)
    3. catch every error at this boundary and report it as
       {"success": false, "error": ...}

Batch handlers that address items by name fetch the target collection once
and resolve every item against that snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Sequence

from todoist_mcp.client import TodoistClient, run_batch
from todoist_mcp.client.resolution import needs_lookup, resolve_id
from todoist_mcp.lifelog import LifelogClient
from todoist_mcp.models import Label, Project, Task
from todoist_mcp.tools.formatting import (
    error_message,
    listing,
    success_message,
    to_payload,
    violations_message,
)
from todoist_mcp.tools.inputs import (
    CreateLabelInput,
    CreateProjectInput,
    CreateSectionInput,
    CreateTaskInput,
    GetLifelogInput,
    GetProjectSectionsInput,
    GetProjectsInput,
    LabelCreateParams,
    LabelIdInput,
    LabelUpdateParams,
    ListLifelogsInput,
    MoveTaskInput,
    ProjectCreateParams,
    ProjectRefParams,
    ProjectUpdateParams,
    SearchLifelogsInput,
    SectionCreateParams,
    TaskCreateParams,
    TaskDestinationFields,
    TaskQueryInput,
    TaskRefInput,
    TaskRefParams,
    TaskUpdateParams,
    UpdateLabelInput,
    UpdateProjectInput,
    UpdateTaskInput,
)
from todoist_mcp.tools.validation import validate_input

logger = logging.getLogger(__name__)

Arguments = Optional[Mapping[str, Any]]
Envelope = dict[str, Any]

LIFELOG_DISABLED = (
    "Limitless API key not configured. Set LIMITLESS_API_KEY to enable lifelog tools."
)


def handle_error(e: Exception, operation: str) -> Envelope:
    """Log a handler failure and turn it into a failure envelope."""
    logger.exception("Error in %s: %s", operation, e)
    return error_message(str(e))


# =============================================================================
# Prefetch helpers
# =============================================================================


def _any_lookup(items: Sequence[Any], id_field: str, name_field: str) -> bool:
    return any(needs_lookup(getattr(i, id_field), getattr(i, name_field)) for i in items)


async def _tasks_for(client: TodoistClient, items: Sequence[TaskRefParams]) -> Optional[list[Task]]:
    if _any_lookup(items, "task_id", "task_name"):
        return await client.get_tasks()
    return None


async def _projects_for(
    client: TodoistClient, items: Sequence[Any], id_field: str, name_field: str
) -> Optional[list[Project]]:
    if _any_lookup(items, id_field, name_field):
        return await client.get_projects()
    return None


async def _labels_for(client: TodoistClient, items: Sequence[LabelUpdateParams]) -> Optional[list[Label]]:
    if _any_lookup(items, "label_id", "label_name"):
        return await client.get_personal_labels()
    return None


# =============================================================================
# Task Handlers
# =============================================================================


async def create_task(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(CreateTaskInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.tasks:

            async def create_one(item: TaskCreateParams) -> dict[str, Any]:
                return {"task": to_payload(await client.create_task(item))}

            return await run_batch(params.tasks, create_one, data_key="task_data")

        if not params.content:
            return error_message("Either 'content' or 'tasks' must be provided")
        task = await client.create_task(params)
        return success_message(task=task)

    except Exception as e:
        return handle_error(e, "create_task")


async def get_tasks(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(TaskQueryInput, arguments)
    if not result.ok:
        return violations_message(result)

    try:
        tasks = await client.get_tasks(result.value)
        return listing("tasks", tasks)
    except Exception as e:
        return handle_error(e, "get_tasks")


async def update_task(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(UpdateTaskInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.tasks:
            known = await _tasks_for(client, params.tasks)

            async def update_one(item: TaskUpdateParams) -> dict[str, Any]:
                task_id = resolve_id("task", item.task_id, item.task_name, known)
                return {"task": to_payload(await client.update_task(task_id, item))}

            return await run_batch(params.tasks, update_one, data_key="task_data")

        task_id = await client.resolve_task_id(params.task_id, params.task_name)
        task = await client.update_task(task_id, params)
        return success_message(task=task)

    except Exception as e:
        return handle_error(e, "update_task")


async def move_task(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(MoveTaskInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.tasks:
            known = await _tasks_for(client, params.tasks)

            async def move_one(item: TaskDestinationFields) -> dict[str, Any]:
                task_id = resolve_id("task", item.task_id, item.task_name, known)
                return {"task": to_payload(await client.move_task(task_id, item.destinations()))}

            return await run_batch(params.tasks, move_one, data_key="task_data")

        task_id = await client.resolve_task_id(params.task_id, params.task_name)
        task = await client.move_task(task_id, params.destinations())
        return success_message(task=task)

    except Exception as e:
        return handle_error(e, "move_task")


async def _act_on_tasks(client: TodoistClient, arguments: Arguments, operation: str) -> Envelope:
    result = validate_input(TaskRefInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value
    action = client.delete_task if operation == "delete_task" else client.complete_task

    try:
        if params.tasks:
            known = await _tasks_for(client, params.tasks)

            async def act_one(item: TaskRefParams) -> dict[str, Any]:
                task_id = resolve_id("task", item.task_id, item.task_name, known)
                await action(task_id)
                return {"task_id": task_id}

            return await run_batch(params.tasks, act_one, data_key="task_data")

        task_id = await client.resolve_task_id(params.task_id, params.task_name)
        await action(task_id)
        return success_message(task_id=task_id)

    except Exception as e:
        return handle_error(e, operation)


async def delete_task(client: TodoistClient, arguments: Arguments) -> Envelope:
    return await _act_on_tasks(client, arguments, "delete_task")


async def complete_task(client: TodoistClient, arguments: Arguments) -> Envelope:
    return await _act_on_tasks(client, arguments, "complete_task")


# =============================================================================
# Project Handlers
# =============================================================================


async def get_projects(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(GetProjectsInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        projects = await client.get_projects()
        if params.project_ids:
            wanted = set(params.project_ids)
            projects = [p for p in projects if p.id in wanted]

        payload = to_payload(projects)
        if params.include_sections:
            sections = await asyncio.gather(*(client.get_project_sections(p.id) for p in projects))
            for project, project_sections in zip(payload, sections):
                project["sections"] = to_payload(project_sections)

        return listing("projects", payload)

    except Exception as e:
        return handle_error(e, "get_projects")


async def _create_project(
    client: TodoistClient,
    item: ProjectCreateParams,
    known: Optional[list[Project]],
) -> dict[str, Any]:
    parent_id = item.parent_id
    if not parent_id and item.parent_name:
        parent_id = resolve_id("project", None, item.parent_name, known)

    project = await client.create_project(item, parent_id=parent_id)
    payload: dict[str, Any] = {"project": to_payload(project)}
    if item.sections:
        sections = await asyncio.gather(*(client.create_section(project.id, name) for name in item.sections))
        payload["sections"] = to_payload(list(sections))
    return payload


async def create_project(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(CreateProjectInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.projects:
            known = await _projects_for(client, params.projects, "parent_id", "parent_name")

            async def create_one(item: ProjectCreateParams) -> dict[str, Any]:
                return await _create_project(client, item, known)

            return await run_batch(params.projects, create_one, data_key="project_data")

        if not params.name:
            return error_message("Either 'name' or 'projects' must be provided")
        known = await _projects_for(client, [params], "parent_id", "parent_name")
        return success_message(**await _create_project(client, params, known))

    except Exception as e:
        return handle_error(e, "create_project")


async def update_project(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(UpdateProjectInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.projects:
            known = await _projects_for(client, params.projects, "project_id", "project_name")

            async def update_one(item: ProjectUpdateParams) -> dict[str, Any]:
                project_id = resolve_id("project", item.project_id, item.project_name, known)
                return {"project": to_payload(await client.update_project(project_id, item))}

            return await run_batch(params.projects, update_one, data_key="project_data")

        project_id = await client.resolve_project_id(params.project_id, params.project_name)
        project = await client.update_project(project_id, params)
        return success_message(project=project)

    except Exception as e:
        return handle_error(e, "update_project")


async def get_project_sections(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(GetProjectSectionsInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.projects:
            known = await _projects_for(client, params.projects, "project_id", "project_name")

            async def list_one(item: ProjectRefParams) -> dict[str, Any]:
                project_id = resolve_id("project", item.project_id, item.project_name, known)
                sections = await client.get_project_sections(project_id)
                return {"project_id": project_id, "sections": to_payload(sections)}

            return await run_batch(params.projects, list_one, data_key="project_data")

        project_id = await client.resolve_project_id(params.project_id, params.project_name)
        sections = await client.get_project_sections(project_id)
        return listing("sections", sections, project_id=project_id)

    except Exception as e:
        return handle_error(e, "get_project_sections")


async def create_project_section(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(CreateSectionInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.sections:
            known = await _projects_for(client, params.sections, "project_id", "project_name")

            async def create_one(item: SectionCreateParams) -> dict[str, Any]:
                project_id = resolve_id("project", item.project_id, item.project_name, known)
                section = await client.create_section(project_id, item.name, item.order)
                return {"section": to_payload(section)}

            return await run_batch(params.sections, create_one, data_key="section_data")

        if not params.name or not (params.project_id or params.project_name):
            return error_message("project_id (or project_name) and name must be provided")
        project_id = await client.resolve_project_id(params.project_id, params.project_name)
        section = await client.create_section(project_id, params.name, params.order)
        return success_message(section=section)

    except Exception as e:
        return handle_error(e, "create_project_section")


# =============================================================================
# Label Handlers
# =============================================================================


async def get_personal_labels(client: TodoistClient, arguments: Arguments = None) -> Envelope:
    try:
        labels = await client.get_personal_labels()
        return listing("labels", labels)
    except Exception as e:
        return handle_error(e, "get_personal_labels")


async def get_personal_label(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(LabelIdInput, arguments)
    if not result.ok:
        return violations_message(result)

    try:
        label = await client.get_personal_label(result.value.label_id)
        return success_message(label=label)
    except Exception as e:
        return handle_error(e, "get_personal_label")


async def create_personal_label(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(CreateLabelInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.labels:

            async def create_one(item: LabelCreateParams) -> dict[str, Any]:
                return {"label": to_payload(await client.create_personal_label(item))}

            return await run_batch(params.labels, create_one, data_key="label_data")

        if not params.name:
            return error_message("Either 'name' or 'labels' must be provided")
        label = await client.create_personal_label(params)
        return success_message(label=label)

    except Exception as e:
        return handle_error(e, "create_personal_label")


async def update_personal_label(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(UpdateLabelInput, arguments)
    if not result.ok:
        return violations_message(result)
    params = result.value

    try:
        if params.labels:
            known = await _labels_for(client, params.labels)

            async def update_one(item: LabelUpdateParams) -> dict[str, Any]:
                label_id = resolve_id("label", item.label_id, item.label_name, known)
                return {"label": to_payload(await client.update_personal_label(label_id, item))}

            return await run_batch(params.labels, update_one, data_key="label_data")

        label_id = await client.resolve_label_id(params.label_id, params.label_name)
        label = await client.update_personal_label(label_id, params)
        return success_message(label=label)

    except Exception as e:
        return handle_error(e, "update_personal_label")


async def delete_personal_label(client: TodoistClient, arguments: Arguments) -> Envelope:
    result = validate_input(LabelIdInput, arguments)
    if not result.ok:
        return violations_message(result)
    label_id = result.value.label_id

    try:
        await client.delete_personal_label(label_id)
        return success_message(label_id=label_id)
    except Exception as e:
        return handle_error(e, "delete_personal_label")


# =============================================================================
# Lifelog Handlers
# =============================================================================


async def get_lifelogs(lifelogs: Optional[LifelogClient], arguments: Arguments) -> Envelope:
    if lifelogs is None:
        return error_message(LIFELOG_DISABLED)
    result = validate_input(ListLifelogsInput, arguments)
    if not result.ok:
        return violations_message(result)

    try:
        page = await lifelogs.get_lifelogs(result.value)
        return success_message(**page.to_dict())
    except Exception as e:
        return handle_error(e, "get_lifelogs")


async def get_lifelog(lifelogs: Optional[LifelogClient], arguments: Arguments) -> Envelope:
    if lifelogs is None:
        return error_message(LIFELOG_DISABLED)
    result = validate_input(GetLifelogInput, arguments)
    if not result.ok:
        return violations_message(result)

    try:
        entry = await lifelogs.get_lifelog(result.value.lifelog_id)
        return success_message(lifelog=entry)
    except Exception as e:
        return handle_error(e, "get_lifelog")


async def search_lifelogs(lifelogs: Optional[LifelogClient], arguments: Arguments) -> Envelope:
    if lifelogs is None:
        return error_message(LIFELOG_DISABLED)
    result = validate_input(SearchLifelogsInput, arguments)
    if not result.ok:
        return violations_message(result)

    try:
        page = await lifelogs.search_lifelogs(result.value)
        return listing("lifelogs", page.data.lifelogs, query=result.value.query)
    except Exception as e:
        return handle_error(e, "search_lifelogs")
