"""
Todoist constants.

Enumerations and fixed values shared by the models, the client and the
tool input schemas.
"""

from __future__ import annotations

from enum import Enum


DEFAULT_API_URL = "https://api.todoist.com/api/v1"
DEFAULT_LIFELOG_URL = "https://api.limitless.ai"
DEFAULT_TIMEOUT = 30.0

# Page size used when following cursors on collection endpoints
PAGE_SIZE = 200


class TodoistColor(str, Enum):
    """The fixed palette accepted by the Todoist API."""

    BERRY_RED = "berry_red"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    OLIVE_GREEN = "olive_green"
    LIME_GREEN = "lime_green"
    GREEN = "green"
    MINT_GREEN = "mint_green"
    TEAL = "teal"
    SKY_BLUE = "sky_blue"
    LIGHT_BLUE = "light_blue"
    BLUE = "blue"
    GRAPE = "grape"
    VIOLET = "violet"
    LAVENDER = "lavender"
    MAGENTA = "magenta"
    SALMON = "salmon"
    CHARCOAL = "charcoal"
    GREY = "grey"
    TAUPE = "taupe"


COLOR_NAMES: frozenset[str] = frozenset(c.value for c in TodoistColor)
DEFAULT_COLOR = TodoistColor.GREY.value


class TaskPriority(int, Enum):
    """Task priority as the remote API numbers it (4 is the most urgent)."""

    NORMAL = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4


MIN_PRIORITY = TaskPriority.NORMAL.value
MAX_PRIORITY = TaskPriority.URGENT.value


class DurationUnit(str, Enum):
    MINUTE = "minute"
    DAY = "day"


class ViewStyle(str, Enum):
    LIST = "list"
    BOARD = "board"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Lifelog listing page bounds
LIFELOG_MIN_LIMIT = 1
LIFELOG_MAX_LIMIT = 10
LIFELOG_DEFAULT_LIMIT = 10
