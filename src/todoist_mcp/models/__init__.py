"""
Todoist Data Models.

Pydantic models for the entities owned by the Todoist API and the
Limitless lifelog API. They are the shapes passed between the REST
transport, the client and the tool handlers.

Models:
    - Task: Task with due/duration/deadline value objects
    - Project: Personal or workspace project
    - Section: Section within a project
    - Label: Personal label
    - LifelogEntry: Limitless lifelog entry
"""

from todoist_mcp.models.task import Task, Due, Duration, Deadline
from todoist_mcp.models.project import Project, Section
from todoist_mcp.models.label import Label
from todoist_mcp.models.lifelog import (
    ContentNode,
    LifelogEntry,
    ListLifelogsResponse,
)

__all__ = [
    "Task",
    "Due",
    "Duration",
    "Deadline",
    "Project",
    "Section",
    "Label",
    "ContentNode",
    "LifelogEntry",
    "ListLifelogsResponse",
]
