"""
Todoist MCP Server - MCP tools for Todoist tasks, projects, sections and labels.

This package exposes the Todoist REST API as Model Context Protocol tools,
with batch operations and name-based addressing, plus a small client for
the Limitless lifelog API.

Architecture:
    MCP Tools Layer (server)
         │
         ▼
    Tool Handlers (validation, single/batch dispatch, envelopes)
         │
         ▼
    Todoist Client (operation mapping, name resolution, error normalization)
         │
         ▼
    REST Transport (httpx, cursor pagination)
"""

__version__ = "0.1.0"
__author__ = "Todoist MCP Contributors"

from todoist_mcp.exceptions import (
    LifelogAPIError,
    TodoistAPIError,
    TodoistConfigurationError,
    TodoistMCPError,
    TodoistNotFoundError,
    TodoistValidationError,
)

__all__ = [
    "__version__",
    "TodoistMCPError",
    "TodoistAPIError",
    "TodoistConfigurationError",
    "TodoistNotFoundError",
    "TodoistValidationError",
    "LifelogAPIError",
]
