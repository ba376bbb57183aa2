#!/usr/bin/env python3
"""
Todoist MCP Server.

This server exposes Todoist task management as MCP tools, with batch
variants for every mutating operation and name-based addressing for tasks,
projects and labels. A Limitless lifelog client is attached when a key is
configured.

Features:
    - Task management (create, list, update, move, delete, complete)
    - Project management (list, create with sections, update)
    - Section management (list, create)
    - Personal label management (CRUD)
    - Lifelog listing and search (optional)

Environment Variables:
    Required:
        TODOIST_API_TOKEN

    Optional:
        TODOIST_API_URL, TODOIST_TIMEOUT
        LIMITLESS_API_KEY, LIMITLESS_API_URL
        LOG_LEVEL
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Annotated, Any, AsyncIterator, Optional

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from todoist_mcp.client import TodoistClient
from todoist_mcp.client.client import TOKEN_HELP_URL
from todoist_mcp.lifelog import LifelogClient
from todoist_mcp.settings import get_settings
from todoist_mcp.tools import handlers
from todoist_mcp.tools.formatting import format_response

# Configure logging (stdout carries the MCP stdio channel)
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(mcp: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """
    Manage the Todoist and lifelog client lifecycle.

    Initializes the clients on startup and closes them on shutdown.
    """
    logger.info("Initializing Todoist MCP Server...")
    client: TodoistClient | None = None
    lifelogs: LifelogClient | None = None

    try:
        client = TodoistClient.from_settings()
        await client.connect()
        lifelogs = LifelogClient.from_settings()
        if lifelogs is None:
            logger.info("LIMITLESS_API_KEY not set, lifelog tools disabled")
        logger.info("Todoist client connected successfully")
        yield {"client": client, "lifelogs": lifelogs}
    except Exception as e:
        logger.error("Failed to initialize Todoist client: %s", e)
        raise
    finally:
        if lifelogs is not None:
            await lifelogs.close()
        if client is not None:
            await client.disconnect()
            logger.info("Todoist client disconnected")


# Initialize FastMCP server
mcp = FastMCP(
    "todoist_mcp",
    lifespan=lifespan,
)


def get_client(ctx: Context) -> TodoistClient:
    """Get the Todoist client from context."""
    return ctx.request_context.lifespan_context["client"]


def get_lifelogs(ctx: Context) -> LifelogClient | None:
    """Get the lifelog client from context (None when not configured)."""
    return ctx.request_context.lifespan_context.get("lifelogs")


def collect(values: dict[str, Any]) -> dict[str, Any]:
    """Gather a tool's supplied keyword arguments, dropping ctx and unset ones."""
    return {k: v for k, v in values.items() if k != "ctx" and v is not None}


Items = Optional[list[dict[str, Any]]]


# =============================================================================
# Task Tools
# =============================================================================


@mcp.tool(
    name="todoist_create_task",
    annotations={
        "title": "Create Task(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def todoist_create_task(
    ctx: Context,
    content: Annotated[Optional[str], Field(description="Task content/title (single task)")] = None,
    description: Annotated[Optional[str], Field(description="Task description")] = None,
    project_id: Annotated[Optional[str], Field(description="Project ID (defaults to inbox)")] = None,
    section_id: Annotated[Optional[str], Field(description="Section ID")] = None,
    parent_id: Annotated[Optional[str], Field(description="Parent task ID to create a subtask")] = None,
    order: Annotated[Optional[int], Field(description="Position among sibling tasks")] = None,
    labels: Annotated[Optional[list[str]], Field(description="Label names")] = None,
    priority: Annotated[Optional[int], Field(description="Priority from 1 (normal) to 4 (urgent)")] = None,
    due_string: Annotated[Optional[str], Field(description="Natural language due date, e.g. 'tomorrow'")] = None,
    due_date: Annotated[Optional[str], Field(description="Due date as YYYY-MM-DD")] = None,
    due_datetime: Annotated[Optional[str], Field(description="Due date-time in RFC 3339")] = None,
    due_lang: Annotated[Optional[str], Field(description="Language of due_string")] = None,
    assignee_id: Annotated[Optional[str], Field(description="Responsible user ID")] = None,
    duration: Annotated[Optional[int], Field(description="Duration amount (requires duration_unit)")] = None,
    duration_unit: Annotated[Optional[str], Field(description="'minute' or 'day'")] = None,
    deadline_date: Annotated[Optional[str], Field(description="Deadline as YYYY-MM-DD")] = None,
    deadline_lang: Annotated[Optional[str], Field(description="Language of the deadline")] = None,
    tasks: Annotated[Items, Field(description="Tasks to create (batch operation); each takes the fields above")] = None,
) -> str:
    """
    Create one or more tasks in Todoist.

    Pass `content` (plus optional fields) for a single task, or `tasks` for a
    batch. When several due fields are given, due_datetime wins over
    due_date, which wins over due_string.

    Returns:
        JSON envelope with the created task, or a batch summary with
        per-item results.

    Examples:
        - Simple: content="Buy groceries"
        - With due date: content="Submit report", due_string="friday 5pm", priority=4
        - Batch: tasks=[{"content": "A"}, {"content": "B", "labels": ["work"]}]
    """
    arguments = collect(locals())
    return format_response(await handlers.create_task(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_get_tasks",
    annotations={
        "title": "Get Tasks",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_get_tasks(
    ctx: Context,
    project_id: Annotated[Optional[str], Field(description="Filter by project ID")] = None,
    section_id: Annotated[Optional[str], Field(description="Filter by section ID")] = None,
    label: Annotated[Optional[str], Field(description="Filter by label name")] = None,
    filter: Annotated[
        Optional[str],
        Field(description="Natural language filter like 'today' or 'overdue'; overrides the other filters"),
    ] = None,
    lang: Annotated[Optional[str], Field(description="Language of the filter query")] = None,
    ids: Annotated[Optional[list[str]], Field(description="Only these task IDs")] = None,
    priority: Annotated[Optional[int], Field(description="Only tasks with this priority (1-4)")] = None,
    limit: Annotated[Optional[int], Field(description="Maximum number of tasks to return")] = None,
) -> str:
    """
    List active tasks.

    With `filter`, Todoist's query language is used and project_id,
    section_id, label and ids are ignored. Priority filtering and the
    limit are applied after all matching tasks are fetched.

    Returns:
        JSON envelope with `tasks` and `count`.
    """
    arguments = collect(locals())
    return format_response(await handlers.get_tasks(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_update_task",
    annotations={
        "title": "Update Task(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_update_task(
    ctx: Context,
    task_id: Annotated[Optional[str], Field(description="Task ID")] = None,
    task_name: Annotated[Optional[str], Field(description="Text contained in the task (when no ID)")] = None,
    content: Annotated[Optional[str], Field(description="New task content")] = None,
    description: Annotated[Optional[str], Field(description="New description")] = None,
    labels: Annotated[Optional[list[str]], Field(description="Label names (replaces existing)")] = None,
    priority: Annotated[Optional[int], Field(description="Priority from 1 (normal) to 4 (urgent)")] = None,
    due_string: Annotated[Optional[str], Field(description="Natural language due date")] = None,
    due_date: Annotated[Optional[str], Field(description="Due date as YYYY-MM-DD")] = None,
    due_datetime: Annotated[Optional[str], Field(description="Due date-time in RFC 3339")] = None,
    due_lang: Annotated[Optional[str], Field(description="Language of due_string")] = None,
    assignee_id: Annotated[Optional[str], Field(description="Responsible user ID")] = None,
    duration: Annotated[Optional[int], Field(description="Duration amount (requires duration_unit)")] = None,
    duration_unit: Annotated[Optional[str], Field(description="'minute' or 'day'")] = None,
    deadline_date: Annotated[Optional[str], Field(description="Deadline as YYYY-MM-DD")] = None,
    deadline_lang: Annotated[Optional[str], Field(description="Language of the deadline")] = None,
    tasks: Annotated[Items, Field(description="Tasks to update (batch operation)")] = None,
) -> str:
    """
    Update one or more tasks, addressed by ID or by name.

    A name matches the first task whose content contains it (ignoring case).
    Use todoist_move_task to change a task's project, section or parent.

    Returns:
        JSON envelope with the updated task, or a batch summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.update_task(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_move_task",
    annotations={
        "title": "Move Task(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_move_task(
    ctx: Context,
    task_id: Annotated[Optional[str], Field(description="Task ID")] = None,
    task_name: Annotated[Optional[str], Field(description="Text contained in the task (when no ID)")] = None,
    project_id: Annotated[Optional[str], Field(description="Destination project ID")] = None,
    section_id: Annotated[Optional[str], Field(description="Destination section ID")] = None,
    parent_id: Annotated[Optional[str], Field(description="Destination parent task ID")] = None,
    tasks: Annotated[Items, Field(description="Tasks to move (batch operation)")] = None,
) -> str:
    """
    Move one or more tasks to a project, a section, or under a parent task.

    Exactly one destination must be given per task.

    Returns:
        JSON envelope with the moved task, or a batch summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.move_task(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_delete_task",
    annotations={
        "title": "Delete Task(s)",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_delete_task(
    ctx: Context,
    task_id: Annotated[Optional[str], Field(description="Task ID")] = None,
    task_name: Annotated[Optional[str], Field(description="Text contained in the task (when no ID)")] = None,
    tasks: Annotated[Items, Field(description="Tasks to delete: [{task_id | task_name}]")] = None,
) -> str:
    """
    Delete one or more tasks permanently.

    Returns:
        JSON envelope with the deleted task_id, or a batch summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.delete_task(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_complete_task",
    annotations={
        "title": "Complete Task(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_complete_task(
    ctx: Context,
    task_id: Annotated[Optional[str], Field(description="Task ID")] = None,
    task_name: Annotated[Optional[str], Field(description="Text contained in the task (when no ID)")] = None,
    tasks: Annotated[Items, Field(description="Tasks to complete: [{task_id | task_name}]")] = None,
) -> str:
    """
    Mark one or more tasks as complete.

    Returns:
        JSON envelope with the completed task_id, or a batch summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.complete_task(get_client(ctx), arguments))


# =============================================================================
# Project Tools
# =============================================================================


@mcp.tool(
    name="todoist_get_projects",
    annotations={
        "title": "Get Projects",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_get_projects(
    ctx: Context,
    project_ids: Annotated[Optional[list[str]], Field(description="Only these project IDs")] = None,
    include_sections: Annotated[Optional[bool], Field(description="Attach each project's sections")] = None,
) -> str:
    """
    List projects, optionally with their sections.

    Returns:
        JSON envelope with `projects` and `count`.
    """
    arguments = collect(locals())
    return format_response(await handlers.get_projects(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_create_project",
    annotations={
        "title": "Create Project(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def todoist_create_project(
    ctx: Context,
    name: Annotated[Optional[str], Field(description="Project name (single project)")] = None,
    parent_id: Annotated[Optional[str], Field(description="Parent project ID")] = None,
    parent_name: Annotated[Optional[str], Field(description="Parent project name (when no parent_id)")] = None,
    color: Annotated[Optional[str], Field(description="Palette color name, e.g. 'berry_red'")] = None,
    favorite: Annotated[Optional[bool], Field(description="Mark as favorite")] = None,
    view_style: Annotated[Optional[str], Field(description="'list' or 'board'")] = None,
    sections: Annotated[Optional[list[str]], Field(description="Section names to create in the project")] = None,
    projects: Annotated[Items, Field(description="Projects to create (batch operation)")] = None,
) -> str:
    """
    Create one or more projects, optionally nested and with sections.

    Unknown colors fall back to 'grey'.

    Returns:
        JSON envelope with the created project (and sections), or a batch
        summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.create_project(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_update_project",
    annotations={
        "title": "Update Project(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_update_project(
    ctx: Context,
    project_id: Annotated[Optional[str], Field(description="Project ID")] = None,
    project_name: Annotated[Optional[str], Field(description="Text contained in the project name (when no ID)")] = None,
    name: Annotated[Optional[str], Field(description="New project name")] = None,
    color: Annotated[Optional[str], Field(description="New palette color name")] = None,
    favorite: Annotated[Optional[bool], Field(description="New favorite status")] = None,
    view_style: Annotated[Optional[str], Field(description="'list' or 'board'")] = None,
    projects: Annotated[Items, Field(description="Projects to update (batch operation)")] = None,
) -> str:
    """
    Update one or more projects, addressed by ID or by name.

    Returns:
        JSON envelope with the updated project, or a batch summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.update_project(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_get_project_sections",
    annotations={
        "title": "Get Project Sections",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_get_project_sections(
    ctx: Context,
    project_id: Annotated[Optional[str], Field(description="Project ID")] = None,
    project_name: Annotated[Optional[str], Field(description="Text contained in the project name (when no ID)")] = None,
    projects: Annotated[Items, Field(description="Projects to list: [{project_id | project_name}]")] = None,
) -> str:
    """
    List the sections of one or more projects.

    Returns:
        JSON envelope with `sections` and `count`, or a batch summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.get_project_sections(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_create_project_section",
    annotations={
        "title": "Create Project Section(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def todoist_create_project_section(
    ctx: Context,
    name: Annotated[Optional[str], Field(description="Section name (single section)")] = None,
    project_id: Annotated[Optional[str], Field(description="Project ID")] = None,
    project_name: Annotated[Optional[str], Field(description="Text contained in the project name (when no ID)")] = None,
    order: Annotated[Optional[int], Field(description="Position among sibling sections")] = None,
    sections: Annotated[Items, Field(description="Sections to create (batch operation)")] = None,
) -> str:
    """
    Create one or more sections inside projects.

    Returns:
        JSON envelope with the created section, or a batch summary.
    """
    arguments = collect(locals())
    return format_response(await handlers.create_project_section(get_client(ctx), arguments))


# =============================================================================
# Label Tools
# =============================================================================


@mcp.tool(
    name="todoist_get_personal_labels",
    annotations={
        "title": "Get Personal Labels",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_get_personal_labels(ctx: Context) -> str:
    """
    List all personal labels.

    Returns:
        JSON envelope with `labels` and `count`.
    """
    return format_response(await handlers.get_personal_labels(get_client(ctx)))


@mcp.tool(
    name="todoist_get_personal_label",
    annotations={
        "title": "Get Personal Label",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_get_personal_label(
    ctx: Context,
    label_id: Annotated[Optional[str], Field(description="Label ID")] = None,
) -> str:
    """Get a single personal label by ID."""
    arguments = collect(locals())
    return format_response(await handlers.get_personal_label(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_create_personal_label",
    annotations={
        "title": "Create Personal Label(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def todoist_create_personal_label(
    ctx: Context,
    name: Annotated[Optional[str], Field(description="Label name (single label)")] = None,
    color: Annotated[Optional[str], Field(description="Palette color name")] = None,
    order: Annotated[Optional[int], Field(description="Label order")] = None,
    is_favorite: Annotated[Optional[bool], Field(description="Mark as favorite")] = None,
    labels: Annotated[Items, Field(description="Labels to create (batch operation)")] = None,
) -> str:
    """
    Create one or more personal labels.

    Unknown colors fall back to 'grey'.
    """
    arguments = collect(locals())
    return format_response(await handlers.create_personal_label(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_update_personal_label",
    annotations={
        "title": "Update Personal Label(s)",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_update_personal_label(
    ctx: Context,
    label_id: Annotated[Optional[str], Field(description="Label ID")] = None,
    label_name: Annotated[Optional[str], Field(description="Exact label name, case-insensitive (when no ID)")] = None,
    name: Annotated[Optional[str], Field(description="New label name")] = None,
    color: Annotated[Optional[str], Field(description="New palette color name")] = None,
    order: Annotated[Optional[int], Field(description="New label order")] = None,
    is_favorite: Annotated[Optional[bool], Field(description="New favorite status")] = None,
    labels: Annotated[Items, Field(description="Labels to update (batch operation)")] = None,
) -> str:
    """Update one or more personal labels, addressed by ID or by exact name."""
    arguments = collect(locals())
    return format_response(await handlers.update_personal_label(get_client(ctx), arguments))


@mcp.tool(
    name="todoist_delete_personal_label",
    annotations={
        "title": "Delete Personal Label",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def todoist_delete_personal_label(
    ctx: Context,
    label_id: Annotated[Optional[str], Field(description="Label ID")] = None,
) -> str:
    """Delete a personal label by ID."""
    arguments = collect(locals())
    return format_response(await handlers.delete_personal_label(get_client(ctx), arguments))


# =============================================================================
# Lifelog Tools
# =============================================================================


@mcp.tool(
    name="limitless_get_lifelogs",
    annotations={
        "title": "Get Lifelogs",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def limitless_get_lifelogs(
    ctx: Context,
    date: Annotated[Optional[str], Field(description="Day to list (YYYY-MM-DD)")] = None,
    timezone: Annotated[Optional[str], Field(description="IANA timezone")] = None,
    start_time: Annotated[Optional[str], Field(description="Window start")] = None,
    end_time: Annotated[Optional[str], Field(description="Window end")] = None,
    cursor: Annotated[Optional[str], Field(description="Pagination cursor")] = None,
    sort_direction: Annotated[Optional[str], Field(description="'asc' or 'desc'")] = None,
    limit: Annotated[Optional[int], Field(description="Entries to return (1-10, default 10)")] = None,
) -> str:
    """
    List Limitless lifelog entries.

    Returns:
        JSON envelope with `data.lifelogs` and pagination `meta`.
    """
    arguments = collect(locals())
    return format_response(await handlers.get_lifelogs(get_lifelogs(ctx), arguments))


@mcp.tool(
    name="limitless_get_lifelog",
    annotations={
        "title": "Get Lifelog",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def limitless_get_lifelog(
    ctx: Context,
    lifelog_id: Annotated[Optional[str], Field(description="Lifelog entry ID")] = None,
) -> str:
    """Get a single lifelog entry with its full transcript."""
    arguments = collect(locals())
    return format_response(await handlers.get_lifelog(get_lifelogs(ctx), arguments))


@mcp.tool(
    name="limitless_search_lifelogs",
    annotations={
        "title": "Search Lifelogs",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def limitless_search_lifelogs(
    ctx: Context,
    query: Annotated[Optional[str], Field(description="Text to look for in titles and transcripts")] = None,
    date_from: Annotated[Optional[str], Field(description="Window start (YYYY-MM-DD)")] = None,
    date_to: Annotated[Optional[str], Field(description="Window end (YYYY-MM-DD)")] = None,
    timezone: Annotated[Optional[str], Field(description="IANA timezone")] = None,
    cursor: Annotated[Optional[str], Field(description="Pagination cursor")] = None,
    limit: Annotated[Optional[int], Field(description="Maximum matches (1-10, default 10)")] = None,
) -> str:
    """
    Search lifelog entries whose title or transcript contains `query`.

    Matching ignores case and is done on one page of the date window.
    """
    arguments = collect(locals())
    return format_response(await handlers.search_lifelogs(get_lifelogs(ctx), arguments))


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Main entry point for the Todoist MCP server."""
    if not get_settings().todoist_api_token:
        print(
            "Environment variable TODOIST_API_TOKEN is required. "
            f"Get your API token from {TOKEN_HELP_URL}",
            file=sys.stderr,
        )
        sys.exit(1)
    mcp.run()


if __name__ == "__main__":
    main()
