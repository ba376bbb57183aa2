"""Personal label model."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field

from todoist_mcp.models.base import TodoistModel


class Label(TodoistModel):
    id: str
    name: str
    color: Optional[str] = None
    order: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("item_order", "order"),
    )
    is_favorite: bool = False

    def matches_name(self, name: str) -> bool:
        """Labels match by case-insensitive equality, not containment."""
        return self.name.lower() == name.lower()
