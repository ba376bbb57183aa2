"""
Limitless lifelog models.

The lifelog API speaks camelCase; models accept either the wire names or
their snake_case attribute names and dump back to the wire names.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LifelogModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ContentNode(LifelogModel):
    """One block of a lifelog transcript (heading, quote, paragraph...)."""

    content: str
    type: str
    speaker_name: Optional[str] = None
    speaker_identifier: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    start_offset_ms: Optional[int] = None
    end_offset_ms: Optional[int] = None
    children: List["ContentNode"] = Field(default_factory=list)

    def contains(self, needle: str) -> bool:
        if needle in self.content.lower():
            return True
        return any(child.contains(needle) for child in self.children)


class LifelogEntry(LifelogModel):
    id: str
    title: str
    start_time: str
    end_time: str
    contents: List[ContentNode]
    markdown: Optional[str] = None
    is_starred: bool = False
    updated_at: Optional[str] = None

    def matches(self, query: str) -> bool:
        """Case-insensitive containment in the title or any content node."""
        needle = query.lower()
        if needle in self.title.lower():
            return True
        return any(node.contains(needle) for node in self.contents)


class LifelogPage(LifelogModel):
    lifelogs: List[LifelogEntry] = Field(default_factory=list)


class LifelogMetaCounts(LifelogModel):
    count: int = 0
    next_cursor: Optional[str] = None


class LifelogMeta(LifelogModel):
    lifelogs: LifelogMetaCounts


class ListLifelogsResponse(LifelogModel):
    data: LifelogPage
    meta: Optional[LifelogMeta] = None


ContentNode.model_rebuild()
