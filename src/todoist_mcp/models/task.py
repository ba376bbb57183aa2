"""Task model and its nested value objects."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from todoist_mcp.models.base import TodoistModel


class Due(TodoistModel):
    """When a task is due. `date` holds either a date or a date-time string."""

    date: Optional[str] = None
    string: Optional[str] = None
    lang: Optional[str] = None
    is_recurring: bool = False
    timezone: Optional[str] = None
    datetime: Optional[str] = None


class Duration(TodoistModel):
    amount: int
    unit: str


class Deadline(TodoistModel):
    date: str
    lang: Optional[str] = None


class Task(TodoistModel):
    """A Todoist task."""

    id: str
    content: str
    description: str = ""
    project_id: Optional[str] = None
    section_id: Optional[str] = None
    parent_id: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    priority: int = 1
    due: Optional[Due] = None
    duration: Optional[Duration] = None
    deadline: Optional[Deadline] = None
    checked: bool = False

    def matches_name(self, name: str) -> bool:
        """Case-insensitive substring match on the task content."""
        return name.lower() in self.content.lower()
