"""Client for the Limitless lifelog API."""

from todoist_mcp.lifelog.client import LifelogClient

__all__ = ["LifelogClient"]
