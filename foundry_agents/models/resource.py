"""Agent/assistant resource models."""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from foundry_agents.core.constants import Limits
from foundry_agents.models.base import RequestModel
from foundry_agents.models.tools import AgentTool, strip_tool_generated_fields, tool_from_wire

# Fields the service assigns; they are rejected in create/update payloads.
GENERATED_FIELDS = ("id", "object", "created_at")

# Scalar fields copied between baseline, request and wire payload, in wire order.
CORE_FIELDS = (
    "model",
    "name",
    "description",
    "instructions",
    "metadata",
    "response_format",
    "temperature",
    "top_p",
)


def strip_generated_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of a resource payload without server-generated fields.

    Removes ``id``, ``object``, ``created_at`` and the ``functions`` property
    some function tools carry. Stripping an already stripped payload is a
    no-op.
    """
    stripped = {
        key: copy.deepcopy(value)
        for key, value in payload.items()
        if key not in GENERATED_FIELDS
    }
    tools = stripped.get("tools")
    if isinstance(tools, list):
        stripped["tools"] = [
            strip_tool_generated_fields(tool) if isinstance(tool, dict) else tool
            for tool in tools
        ]
    return stripped


class AgentResource(BaseModel):
    """An agent or assistant as returned by the service."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(default=None, description="Server-assigned ID")
    object: str | None = None
    created_at: int | None = None

    model: str | None = None
    name: str | None = None
    description: str | None = None
    instructions: str | None = None
    metadata: dict[str, str] | None = None
    response_format: Any = None
    temperature: float | None = None
    top_p: float | None = None

    tools: list[AgentTool] = Field(default_factory=list)
    raw_tool_resources: dict[str, Any] = Field(
        default_factory=dict,
        alias="tool_resources",
        exclude=True,
        description="tool_resources exactly as the service returned them",
    )

    @model_validator(mode="before")
    @classmethod
    def _decode_tools(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        strict = bool((info.context or {}).get("strict_tools"))
        data = dict(data)
        tool_resources = data.get("tool_resources") or {}
        data["tool_resources"] = tool_resources
        data["tools"] = [
            tool_from_wire(tool, tool_resources, strict=strict) if isinstance(tool, dict) else tool
            for tool in data.get("tools") or []
        ]
        return data

    @classmethod
    def from_wire(cls, payload: dict[str, Any], strict: bool = False) -> AgentResource:
        """
        Decode a resource payload.

        Payloads read from the service are decoded leniently: a tool that fails
        validation is kept verbatim. ``strict=True`` validates every tool, for
        documents supplied by the user.
        """
        return cls.model_validate(payload, context={"strict_tools": strict})

    def build_tool_resources(self) -> dict[str, Any]:
        """Rebuild the ``tool_resources`` mapping from the tool list."""
        resources: dict[str, Any] = {}
        for tool in self.tools:
            binding = tool.binding()
            if binding is not None and tool.type not in resources:
                resources[tool.type] = binding
        return resources

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the service's JSON shape, generated fields included."""
        body: dict[str, Any] = {}
        for field in GENERATED_FIELDS + CORE_FIELDS:
            value = getattr(self, field)
            if value is not None:
                body[field] = value
        if self.tools:
            body["tools"] = [tool.to_wire() for tool in self.tools]
            resources = self.build_tool_resources()
            if resources:
                body["tool_resources"] = resources
        return body


class ResourceFields(RequestModel):
    """
    Requested scalar fields for a create or update.

    Only fields passed explicitly count as requested; pydantic's
    ``model_fields_set`` distinguishes them from defaults.
    """

    model: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1, max_length=Limits.NAME_MAX)
    description: str | None = Field(default=None, max_length=Limits.DESCRIPTION_MAX)
    instructions: str | None = Field(default=None, max_length=Limits.INSTRUCTIONS_MAX)
    metadata: dict[str, str] | None = None
    response_format: str | dict[str, Any] | None = None
    temperature: float | None = Field(
        default=None, ge=Limits.TEMPERATURE_RANGE[0], le=Limits.TEMPERATURE_RANGE[1]
    )
    top_p: float | None = Field(default=None, ge=Limits.TOP_P_RANGE[0], le=Limits.TOP_P_RANGE[1])

    @field_validator("metadata")
    @classmethod
    def _metadata_within_limits(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        if value is None:
            return value
        if len(value) > Limits.METADATA_MAX_ENTRIES:
            raise ValueError(f"at most {Limits.METADATA_MAX_ENTRIES} metadata entries are allowed")
        for key, item in value.items():
            if len(key) > Limits.METADATA_KEY_MAX:
                raise ValueError(f"metadata key '{key[:16]}...' exceeds {Limits.METADATA_KEY_MAX} characters")
            if len(item) > Limits.METADATA_VALUE_MAX:
                raise ValueError(f"metadata value for '{key}' exceeds {Limits.METADATA_VALUE_MAX} characters")
        return value

    def requested(self) -> dict[str, Any]:
        """Explicitly requested fields with a value, in wire order."""
        return {
            field: getattr(self, field)
            for field in CORE_FIELDS
            if field in self.model_fields_set and getattr(self, field) is not None
        }
