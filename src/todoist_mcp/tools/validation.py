"""
Explicit input validation.

validate_input() runs a payload through one of the input models and returns
a ValidationResult instead of raising, so handlers can turn violations into
a failure envelope before any remote call is made.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}" if self.field else self.message


@dataclass
class ValidationResult(Generic[M]):
    """Either a validated value or the list of field-level violations."""

    value: M | None = None
    violations: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def error(self) -> str:
        return "Invalid input: " + "; ".join(str(v) for v in self.violations)


def _violation(error: Mapping[str, Any]) -> Violation:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    return Violation(field=location, message=message)


def validate_input(model: type[M], payload: Mapping[str, Any] | None) -> ValidationResult[M]:
    """Validate `payload` against `model`."""
    try:
        return ValidationResult(value=model.model_validate(dict(payload or {})))
    except ValidationError as e:
        return ValidationResult(violations=[_violation(err) for err in e.errors()])
