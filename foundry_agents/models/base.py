"""Shared base for request models validated before any request is sent."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from foundry_agents.core.exceptions import ValidationError


def describe_validation_error(model_name: str, error: PydanticValidationError) -> str:
    """Render a pydantic error as one readable line."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or model_name
        problems.append(f"{location}: {item.get('msg', 'invalid value')}")
    return f"Invalid {model_name}: " + "; ".join(problems)


class RequestModel(BaseModel):
    """
    Base for models built from user input.

    Construction failures surface as the project's own ``ValidationError``
    (or ``error_class``) instead of pydantic's.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=False)

    error_class: ClassVar[type[ValidationError]] = ValidationError

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise self.error_class(
                describe_validation_error(type(self).__name__, e),
                details={"errors": len(e.errors())},
            ) from e
