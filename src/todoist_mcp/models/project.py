"""Project and section models."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field

from todoist_mcp.models.base import TodoistModel


class Project(TodoistModel):
    """
    A Todoist project.

    Personal and workspace projects share this shape; fields that only
    workspace projects carry (workspace_id, folder_id, ...) pass through as
    extra attributes.
    """

    id: str
    name: str
    parent_id: Optional[str] = None
    color: Optional[str] = None
    is_favorite: bool = False
    view_style: Optional[str] = None

    def matches_name(self, name: str) -> bool:
        return name.lower() in self.name.lower()


class Section(TodoistModel):
    id: str
    name: str
    project_id: str
    order: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("section_order", "order"),
    )
