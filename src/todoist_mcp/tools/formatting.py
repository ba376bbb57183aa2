"""
Response formatting for MCP tools.

Every tool answers with a JSON envelope rendered as indented text:

    success: {"success": true, <entity or entities>, ["count"]}
    failure: {"success": false, "error": "...", ["violations"]}
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from pydantic import BaseModel

from todoist_mcp.tools.validation import ValidationResult


def to_payload(value: Any) -> Any:
    """Convert models (or lists of them) into JSON-ready structures."""
    if isinstance(value, BaseModel):
        to_dict = getattr(value, "to_dict", None)
        return to_dict() if to_dict else value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    if isinstance(value, dict):
        return {k: to_payload(v) for k, v in value.items()}
    return value


def format_response(envelope: dict[str, Any]) -> str:
    return json.dumps(envelope, indent=2, default=str)


def success_message(**payload: Any) -> dict[str, Any]:
    return {"success": True, **{k: to_payload(v) for k, v in payload.items()}}


def listing(key: str, items: Iterable[Any], **extra: Any) -> dict[str, Any]:
    """Success envelope for a collection, with its count."""
    values = to_payload(list(items))
    return {"success": True, key: values, "count": len(values), **extra}


def error_message(error: str, **extra: Any) -> dict[str, Any]:
    return {"success": False, "error": error, **extra}


def violations_message(result: ValidationResult) -> dict[str, Any]:
    return error_message(result.error, violations=[v.to_dict() for v in result.violations])
