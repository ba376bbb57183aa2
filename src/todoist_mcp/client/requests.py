"""
Request builders for the Todoist REST API.

Tool parameters are turned into fully-specified request objects here. The
invariants the remote API expects are checked when the objects are built:

    - a due value carries at most one of string/date/datetime
    - a duration carries both its amount and its unit, or neither
    - colors come from the fixed palette (anything else becomes the default)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, List, Optional

from todoist_mcp.constants import COLOR_NAMES, DEFAULT_COLOR
from todoist_mcp.exceptions import TodoistValidationError
from todoist_mcp.tools.inputs import TaskCreateParams, TaskScheduleFields, TaskUpdateParams

logger = logging.getLogger(__name__)


def normalize_color(color: str | None) -> str | None:
    """Return `color` if it is in the palette, else the default color."""
    if color is None:
        return None
    if color in COLOR_NAMES:
        return color
    logger.warning('Invalid color "%s", defaulting to "%s"', color, DEFAULT_COLOR)
    return DEFAULT_COLOR


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class DueSpec:
    """One way of saying when a task is due."""

    string: Optional[str] = None
    date: Optional[str] = None
    datetime: Optional[str] = None
    lang: Optional[str] = None

    def __post_init__(self) -> None:
        given = [v for v in (self.string, self.date, self.datetime) if v]
        if len(given) > 1:
            raise TodoistValidationError(
                "A due value takes only one of due_string, due_date or due_datetime"
            )

    @classmethod
    def choose(
        cls,
        string: str | None = None,
        date: str | None = None,
        datetime: str | None = None,
        lang: str | None = None,
    ) -> DueSpec | None:
        """Keep the most precise variant supplied: datetime, then date, then string."""
        if datetime:
            return cls(datetime=datetime, lang=lang)
        if date:
            return cls(date=date, lang=lang)
        if string:
            return cls(string=string, lang=lang)
        return None

    def to_args(self) -> dict[str, Any]:
        return _compact(
            {
                "due_string": self.string,
                "due_date": self.date,
                "due_datetime": self.datetime,
                "due_lang": self.lang,
            }
        )


@dataclass(frozen=True)
class DurationSpec:
    amount: int
    unit: str

    @classmethod
    def from_fields(cls, amount: int | None, unit: Any) -> DurationSpec | None:
        if amount is None and unit is None:
            return None
        if amount is None or unit is None:
            raise TodoistValidationError("duration and duration_unit must be provided together")
        return cls(amount=amount, unit=getattr(unit, "value", unit))

    def to_args(self) -> dict[str, Any]:
        return {"duration": self.amount, "duration_unit": self.unit}


@dataclass(frozen=True)
class TaskRequest:
    """The body of a task create or update call."""

    content: Optional[str] = None
    description: Optional[str] = None
    project_id: Optional[str] = None
    section_id: Optional[str] = None
    parent_id: Optional[str] = None
    order: Optional[int] = None
    labels: Optional[List[str]] = None
    priority: Optional[int] = None
    assignee_id: Optional[str] = None
    deadline_date: Optional[str] = None
    deadline_lang: Optional[str] = None
    due: Optional[DueSpec] = None
    duration: Optional[DurationSpec] = None

    @staticmethod
    def _schedule(params: TaskScheduleFields) -> dict[str, Any]:
        return {
            "description": params.description,
            "labels": params.labels,
            "priority": params.priority,
            "assignee_id": params.assignee_id,
            "deadline_date": params.deadline_date,
            "deadline_lang": params.deadline_lang,
            "due": DueSpec.choose(
                string=params.due_string,
                date=params.due_date,
                datetime=params.due_datetime,
                lang=params.due_lang,
            ),
            "duration": DurationSpec.from_fields(params.duration, params.duration_unit),
        }

    @classmethod
    def for_create(cls, params: TaskCreateParams) -> TaskRequest:
        return cls(
            content=params.content,
            project_id=params.project_id,
            section_id=params.section_id,
            parent_id=params.parent_id,
            order=params.order,
            **cls._schedule(params),
        )

    @classmethod
    def for_update(cls, params: TaskUpdateParams) -> TaskRequest:
        return cls(content=params.content, **cls._schedule(params))

    def to_args(self) -> dict[str, Any]:
        args = _compact(
            {f.name: getattr(self, f.name) for f in fields(self) if f.name not in ("due", "duration")}
        )
        if self.due is not None:
            args.update(self.due.to_args())
        if self.duration is not None:
            args.update(self.duration.to_args())
        return args


@dataclass(frozen=True)
class ProjectRequest:
    name: Optional[str] = None
    parent_id: Optional[str] = None
    color: Optional[str] = None
    is_favorite: Optional[bool] = None
    view_style: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", normalize_color(self.color))

    def to_args(self) -> dict[str, Any]:
        return _compact(asdict(self))


@dataclass(frozen=True)
class LabelRequest:
    name: Optional[str] = None
    color: Optional[str] = None
    order: Optional[int] = None
    is_favorite: Optional[bool] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", normalize_color(self.color))

    def to_args(self) -> dict[str, Any]:
        return _compact(asdict(self))
