"""Todoist REST transport."""

from todoist_mcp.api.rest import TodoistRESTClient

__all__ = ["TodoistRESTClient"]
