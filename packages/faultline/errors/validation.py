"""Field-level validation error model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError


@dataclass(frozen=True)
class FieldError:
    """One field-level validation failure."""

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationErrors(list[FieldError]):
    """Ordered field errors; duplicate fields are kept in insertion order."""

    def __str__(self) -> str:
        if len(self) == 0:
            return "validation failed"
        return "; ".join(str(entry) for entry in self)


def field_errors_from_pydantic(exc: PydanticValidationError) -> ValidationErrors:
    """Flatten a pydantic ``ValidationError`` into dotted-path field errors."""
    result = ValidationErrors()
    for detail in exc.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        result.append(
            FieldError(
                field=location or "__root__",
                message=str(detail.get("msg", "")).strip(),
                value=detail.get("input"),
            )
        )
    return result
