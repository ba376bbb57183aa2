"""
Exception hierarchy for the Todoist MCP server.

Every error raised by this package derives from TodoistMCPError so tool
handlers can catch the whole family at their boundary.
"""

from __future__ import annotations

from typing import Any


class TodoistMCPError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class TodoistConfigurationError(TodoistMCPError):
    """Raised when required configuration (e.g. the API token) is missing."""


class TodoistValidationError(TodoistMCPError):
    """Raised when input fails local validation before any remote call."""

    def __init__(self, message: str, violations: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.violations = violations or []


class TodoistNotFoundError(TodoistMCPError):
    """Raised when a name lookup finds no matching entity."""

    def __init__(self, entity: str, name: str) -> None:
        super().__init__(f"{entity} not found: {name}")
        self.entity = entity
        self.name = name


class TodoistAPIError(TodoistMCPError):
    """A failure from the Todoist API, normalized to a single message."""

    PREFIX = "Todoist API error"

    @classmethod
    def wrap(cls, error: BaseException) -> TodoistAPIError:
        return cls(f"{cls.PREFIX}: {error}")


class TodoistRequestError(TodoistMCPError):
    """Raised by the REST transport when an HTTP request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LifelogAPIError(TodoistMCPError):
    """A failure from the Limitless lifelog API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
