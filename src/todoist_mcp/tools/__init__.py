"""
Todoist MCP Tools Package.

Input models, validation and handlers for the MCP tools exposed by the
server. Tools are organized into logical groups:
    - Task tools (create, list, update, move, delete, complete)
    - Project tools (list, create, update, sections)
    - Label tools (personal label CRUD)
    - Lifelog tools (Limitless list, get, search)

Handlers live in todoist_mcp.tools.handlers and are imported from there.
"""

from todoist_mcp.tools.inputs import (
    CreateLabelInput,
    CreateProjectInput,
    CreateSectionInput,
    CreateTaskInput,
    GetLifelogInput,
    GetProjectSectionsInput,
    GetProjectsInput,
    LabelIdInput,
    ListLifelogsInput,
    MoveTaskInput,
    SearchLifelogsInput,
    TaskQueryInput,
    TaskRefInput,
    UpdateLabelInput,
    UpdateProjectInput,
    UpdateTaskInput,
)
from todoist_mcp.tools.validation import ValidationResult, Violation, validate_input

__all__ = [
    "CreateLabelInput",
    "CreateProjectInput",
    "CreateSectionInput",
    "CreateTaskInput",
    "GetLifelogInput",
    "GetProjectSectionsInput",
    "GetProjectsInput",
    "LabelIdInput",
    "ListLifelogsInput",
    "MoveTaskInput",
    "SearchLifelogsInput",
    "TaskQueryInput",
    "TaskRefInput",
    "UpdateLabelInput",
    "UpdateProjectInput",
    "UpdateTaskInput",
    "ValidationResult",
    "Violation",
    "validate_input",
]
