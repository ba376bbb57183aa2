"""Shared base for the remote entity models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class TodoistModel(BaseModel):
    """
    Base for entities owned by the Todoist API.

    Unknown fields are kept so that whatever the API returns is echoed back
    to the caller unchanged.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]):
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
