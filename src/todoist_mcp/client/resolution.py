"""
Name resolution.

Callers may address tasks, projects and labels by name instead of ID. The
lookup is best effort: the first entity in the fetched collection that
matches wins, and several matches are not an error.

    - tasks and projects match by case-insensitive containment
    - labels match by case-insensitive equality
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, TypeVar

from todoist_mcp.exceptions import TodoistNotFoundError, TodoistValidationError


class Nameable(Protocol):
    id: str

    def matches_name(self, name: str) -> bool: ...


E = TypeVar("E", bound=Nameable)


def find_by_name(entities: Iterable[E], name: str) -> Optional[E]:
    """Return the first entity matching `name`, or None."""
    return next((e for e in entities if e.matches_name(name)), None)


def needs_lookup(entity_id: str | None, name: str | None) -> bool:
    """True when an item is addressed by name only."""
    return not entity_id and bool(name)


def resolve_id(
    entity: str,
    entity_id: str | None,
    name: str | None,
    entities: Iterable[E] | None,
) -> str:
    """
    Pick the identifier an item refers to.

    An explicit ID wins. Otherwise `name` is looked up in `entities`, which
    the caller has already fetched.

    Raises:
        TodoistNotFoundError: the name matched nothing
        TodoistValidationError: neither an ID nor a name was given
    """
    if entity_id:
        return entity_id
    if name:
        match = find_by_name(entities or (), name)
        if match is None:
            raise TodoistNotFoundError(entity.capitalize(), name)
        return match.id
    key = entity.lower()
    raise TodoistValidationError(f"Either {key}_id or {key}_name must be provided")
