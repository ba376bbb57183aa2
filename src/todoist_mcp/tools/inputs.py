"""
Pydantic Input Models for Todoist MCP Tools.

This module defines the input validation models used by the tool handlers.
Item models (`*Params`) describe one entity operation; tool models
(`*Input`) add the optional batch array and relax the single-item primary
field, since a call may carry either.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from todoist_mcp.constants import (
    LIFELOG_DEFAULT_LIMIT,
    LIFELOG_MAX_LIMIT,
    LIFELOG_MIN_LIMIT,
    MAX_PRIORITY,
    MIN_PRIORITY,
    DurationUnit,
    SortDirection,
    ViewStyle,
)


class BaseMCPInput(BaseModel):
    """Base input model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


# =============================================================================
# Task Input Models
# =============================================================================


class TaskScheduleFields(BaseMCPInput):
    """Fields shared by task creation and update."""

    description: Optional[str] = Field(default=None, description="Task description")
    labels: Optional[List[str]] = Field(default=None, description="Label names (replaces existing)")
    priority: Optional[int] = Field(
        default=None,
        description="Priority from 1 (normal) to 4 (urgent)",
        ge=MIN_PRIORITY,
        le=MAX_PRIORITY,
    )
    due_string: Optional[str] = Field(
        default=None,
        description="Natural language due date (e.g., 'tomorrow', 'every monday')",
    )
    due_date: Optional[str] = Field(default=None, description="Due date as YYYY-MM-DD")
    due_datetime: Optional[str] = Field(
        default=None,
        description="Due date-time in RFC 3339 (takes precedence over due_date)",
    )
    due_lang: Optional[str] = Field(default=None, description="Language of due_string (e.g., 'en')")
    assignee_id: Optional[str] = Field(default=None, description="Responsible user ID")
    duration: Optional[int] = Field(default=None, description="Duration amount", gt=0)
    duration_unit: Optional[DurationUnit] = Field(default=None, description="'minute' or 'day'")
    deadline_date: Optional[str] = Field(default=None, description="Deadline as YYYY-MM-DD")
    deadline_lang: Optional[str] = Field(default=None, description="Language of the deadline")

    @model_validator(mode="after")
    def check_duration_pair(self):
        if (self.duration is None) != (self.duration_unit is None):
            raise ValueError("duration and duration_unit must be provided together")
        return self


class TaskCreateParams(TaskScheduleFields):
    """One task to create."""

    content: str = Field(..., description="Task content/title", min_length=1)
    project_id: Optional[str] = Field(default=None, description="Project ID (defaults to inbox)")
    section_id: Optional[str] = Field(default=None, description="Section ID")
    parent_id: Optional[str] = Field(default=None, description="Parent task ID to create a subtask")
    order: Optional[int] = Field(default=None, description="Position among sibling tasks")


class CreateTaskInput(TaskCreateParams):
    """Input for todoist_create_task."""

    content: Optional[str] = Field(default=None, description="Task content/title (single task)", min_length=1)
    tasks: Optional[List[TaskCreateParams]] = Field(
        default=None,
        description="Tasks to create (batch operation)",
    )


class TaskRefParams(BaseMCPInput):
    """Identifies a task by ID, or by a name to search for."""

    task_id: Optional[str] = Field(default=None, description="Task ID")
    task_name: Optional[str] = Field(
        default=None,
        description="Text contained in the task content (used when no ID is given)",
    )


class TaskUpdateParams(TaskRefParams, TaskScheduleFields):
    """One task to update."""

    content: Optional[str] = Field(default=None, description="New task content", min_length=1)


class UpdateTaskInput(TaskUpdateParams):
    """Input for todoist_update_task."""

    tasks: Optional[List[TaskUpdateParams]] = Field(
        default=None,
        description="Tasks to update (batch operation)",
    )


class TaskRefInput(TaskRefParams):
    """Input for todoist_delete_task and todoist_complete_task."""

    tasks: Optional[List[TaskRefParams]] = Field(
        default=None,
        description="Tasks to act on (batch operation)",
    )


class TaskDestinationFields(TaskRefParams):
    project_id: Optional[str] = Field(default=None, description="Destination project ID")
    section_id: Optional[str] = Field(default=None, description="Destination section ID")
    parent_id: Optional[str] = Field(default=None, description="Destination parent task ID")

    def destinations(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (
                ("project_id", self.project_id),
                ("section_id", self.section_id),
                ("parent_id", self.parent_id),
            )
            if value
        }

    def check_single_destination(self):
        if len(self.destinations()) != 1:
            raise ValueError("Exactly one of project_id, section_id, or parent_id must be specified")
        return self


class TaskMoveParams(TaskDestinationFields):
    """One task to relocate."""

    @model_validator(mode="after")
    def require_single_destination(self):
        return self.check_single_destination()


class MoveTaskInput(TaskDestinationFields):
    """Input for todoist_move_task."""

    tasks: Optional[List[TaskMoveParams]] = Field(
        default=None,
        description="Tasks to move (batch operation)",
    )

    @model_validator(mode="after")
    def require_single_destination(self):
        if self.tasks:
            return self
        return self.check_single_destination()


class TaskQueryInput(BaseMCPInput):
    """Input for todoist_get_tasks."""

    project_id: Optional[str] = Field(default=None, description="Filter by project ID")
    section_id: Optional[str] = Field(default=None, description="Filter by section ID")
    label: Optional[str] = Field(default=None, description="Filter by label name")
    filter: Optional[str] = Field(
        default=None,
        description=(
            "Natural language filter like 'today', 'tomorrow', 'overdue'. "
            "When given, project/section/label/ids filters are ignored."
        ),
    )
    lang: Optional[str] = Field(default=None, description="Language of the filter query")
    ids: Optional[List[str]] = Field(default=None, description="Only these task IDs")
    priority: Optional[int] = Field(
        default=None,
        description="Only tasks with this priority (1-4)",
        ge=MIN_PRIORITY,
        le=MAX_PRIORITY,
    )
    limit: Optional[int] = Field(default=None, description="Maximum number of tasks to return", ge=1)


# =============================================================================
# Project Input Models
# =============================================================================


class ProjectCreateParams(BaseMCPInput):
    """One project to create."""

    name: str = Field(..., description="Project name", min_length=1)
    parent_id: Optional[str] = Field(default=None, description="Parent project ID")
    parent_name: Optional[str] = Field(
        default=None,
        description="Parent project name (used when parent_id is not given)",
    )
    color: Optional[str] = Field(default=None, description="Palette color name (e.g., 'berry_red')")
    favorite: Optional[bool] = Field(default=None, description="Mark as favorite")
    view_style: Optional[ViewStyle] = Field(default=None, description="'list' or 'board'")
    sections: Optional[List[str]] = Field(
        default=None,
        description="Section names to create inside the new project",
    )


class CreateProjectInput(ProjectCreateParams):
    """Input for todoist_create_project."""

    name: Optional[str] = Field(default=None, description="Project name (single project)", min_length=1)
    projects: Optional[List[ProjectCreateParams]] = Field(
        default=None,
        description="Projects to create (batch operation)",
    )


class ProjectRefParams(BaseMCPInput):
    project_id: Optional[str] = Field(default=None, description="Project ID")
    project_name: Optional[str] = Field(
        default=None,
        description="Text contained in the project name (used when no ID is given)",
    )


class ProjectUpdateParams(ProjectRefParams):
    """One project to update."""

    name: Optional[str] = Field(default=None, description="New project name", min_length=1)
    color: Optional[str] = Field(default=None, description="New palette color name")
    favorite: Optional[bool] = Field(default=None, description="New favorite status")
    view_style: Optional[ViewStyle] = Field(default=None, description="'list' or 'board'")


class UpdateProjectInput(ProjectUpdateParams):
    """Input for todoist_update_project."""

    projects: Optional[List[ProjectUpdateParams]] = Field(
        default=None,
        description="Projects to update (batch operation)",
    )


class GetProjectsInput(BaseMCPInput):
    """Input for todoist_get_projects."""

    project_ids: Optional[List[str]] = Field(default=None, description="Only these project IDs")
    include_sections: bool = Field(default=False, description="Attach each project's sections")


class GetProjectSectionsInput(ProjectRefParams):
    """Input for todoist_get_project_sections."""

    projects: Optional[List[ProjectRefParams]] = Field(
        default=None,
        description="Projects to list sections for (batch operation)",
    )


class SectionCreateParams(ProjectRefParams):
    """One section to create."""

    name: str = Field(..., description="Section name", min_length=1)
    order: Optional[int] = Field(default=None, description="Position among sibling sections")


class CreateSectionInput(SectionCreateParams):
    """Input for todoist_create_project_section."""

    name: Optional[str] = Field(default=None, description="Section name (single section)", min_length=1)
    sections: Optional[List[SectionCreateParams]] = Field(
        default=None,
        description="Sections to create (batch operation)",
    )


# =============================================================================
# Label Input Models
# =============================================================================


class LabelCreateParams(BaseMCPInput):
    """One personal label to create."""

    name: str = Field(..., description="Label name", min_length=1)
    color: Optional[str] = Field(default=None, description="Palette color name")
    order: Optional[int] = Field(default=None, description="Label order")
    is_favorite: Optional[bool] = Field(default=None, description="Mark as favorite")


class CreateLabelInput(LabelCreateParams):
    """Input for todoist_create_personal_label."""

    name: Optional[str] = Field(default=None, description="Label name (single label)", min_length=1)
    labels: Optional[List[LabelCreateParams]] = Field(
        default=None,
        description="Labels to create (batch operation)",
    )


class LabelIdInput(BaseMCPInput):
    """Input for todoist_get_personal_label and todoist_delete_personal_label."""

    label_id: str = Field(..., description="Label ID", min_length=1)


class LabelUpdateParams(BaseMCPInput):
    """One personal label to update."""

    label_id: Optional[str] = Field(default=None, description="Label ID")
    label_name: Optional[str] = Field(
        default=None,
        description="Exact label name, case-insensitive (used when no ID is given)",
    )
    name: Optional[str] = Field(default=None, description="New label name", min_length=1)
    color: Optional[str] = Field(default=None, description="New palette color name")
    order: Optional[int] = Field(default=None, description="New label order")
    is_favorite: Optional[bool] = Field(default=None, description="New favorite status")


class UpdateLabelInput(LabelUpdateParams):
    """Input for todoist_update_personal_label."""

    labels: Optional[List[LabelUpdateParams]] = Field(
        default=None,
        description="Labels to update (batch operation)",
    )


# =============================================================================
# Lifelog Input Models
# =============================================================================


class ListLifelogsInput(BaseMCPInput):
    """Input for limitless_get_lifelogs."""

    date: Optional[str] = Field(default=None, description="Day to list (YYYY-MM-DD)")
    timezone: Optional[str] = Field(default=None, description="IANA timezone (e.g., 'America/Los_Angeles')")
    start_time: Optional[str] = Field(default=None, description="Window start (YYYY-MM-DD or YYYY-MM-DD HH:mm:SS)")
    end_time: Optional[str] = Field(default=None, description="Window end (YYYY-MM-DD or YYYY-MM-DD HH:mm:SS)")
    cursor: Optional[str] = Field(default=None, description="Pagination cursor from a previous call")
    sort_direction: Optional[SortDirection] = Field(default=None, description="'asc' or 'desc'")
    limit: int = Field(
        default=LIFELOG_DEFAULT_LIMIT,
        description="Entries to return (1-10)",
        ge=LIFELOG_MIN_LIMIT,
        le=LIFELOG_MAX_LIMIT,
    )


class GetLifelogInput(BaseMCPInput):
    """Input for limitless_get_lifelog."""

    lifelog_id: str = Field(..., description="Lifelog entry ID", min_length=1)


class SearchLifelogsInput(BaseMCPInput):
    """Input for limitless_search_lifelogs."""

    query: str = Field(..., description="Text to look for in titles and transcripts", min_length=1)
    date_from: Optional[str] = Field(default=None, description="Window start (YYYY-MM-DD)")
    date_to: Optional[str] = Field(default=None, description="Window end (YYYY-MM-DD)")
    timezone: Optional[str] = Field(default=None, description="IANA timezone")
    cursor: Optional[str] = Field(default=None, description="Pagination cursor")
    limit: int = Field(
        default=LIFELOG_DEFAULT_LIMIT,
        description="Maximum matches to return (1-10)",
        ge=LIFELOG_MIN_LIMIT,
        le=LIFELOG_MAX_LIMIT,
    )
