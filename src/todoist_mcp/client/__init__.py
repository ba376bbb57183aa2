"""Operation-level Todoist client, name resolution and batch dispatch."""

from todoist_mcp.client.batch import batch_envelope, run_batch
from todoist_mcp.client.client import TodoistClient

__all__ = [
    "TodoistClient",
    "batch_envelope",
    "run_batch",
]
