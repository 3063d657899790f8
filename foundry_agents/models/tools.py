"""
Tool variants attached to agents and assistants.

Each variant owns its wire encoding. Tools that carry data in the resource's
``tool_resources`` mapping (code interpreter files, file search vector stores,
Azure AI Search indexes) expose it through ``binding()``, and accept it back in
``from_wire``.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import ConfigDict, Field, PrivateAttr, field_validator, model_validator

from foundry_agents.core.exceptions import InvalidToolPayloadError
from foundry_agents.core.logging import get_logger
from foundry_agents.models.base import RequestModel

logger = get_logger("models.tools")


class ToolKind(str, Enum):
    """Tool kinds modelled by this client."""

    CONNECTED_AGENT = "connected_agent"
    CODE_INTERPRETER = "code_interpreter"
    FILE_SEARCH = "file_search"
    AZURE_AI_SEARCH = "azure_ai_search"
    FUNCTION = "function"
    OPENAPI = "openapi"
    MCP = "mcp"
    BING_GROUNDING = "bing_grounding"

    @property
    def is_singleton(self) -> bool:
        """At most one tool of this kind may be attached."""
        return self in SINGLETON_KINDS


SINGLETON_KINDS = frozenset(
    {
        ToolKind.CODE_INTERPRETER,
        ToolKind.FILE_SEARCH,
        ToolKind.AZURE_AI_SEARCH,
        ToolKind.BING_GROUNDING,
    }
)

IDENTIFIER_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"
SERVER_LABEL_PATTERN = r"^[A-Za-z0-9_]+$"

ToolIdentity = tuple[str, str | None]


class AgentTool(RequestModel):
    """Base class for all tool variants."""

    error_class = InvalidToolPayloadError
    kind: ClassVar[ToolKind | None] = None

    type: str

    # Entry as the service sent it; None once the tool is built or changed locally.
    _wire: dict[str, Any] | None = PrivateAttr(default=None)

    @property
    def key(self) -> str | None:
        """Instance key for multi-instance kinds, None for singletons."""
        return None

    @property
    def identity(self) -> ToolIdentity:
        """Uniqueness key within a resource's tool list."""
        return (self.type, self.key)

    @property
    def is_received(self) -> bool:
        """True while the tool still matches the entry it was decoded from."""
        return self._wire is not None

    def to_wire(self) -> dict[str, Any]:
        """
        The tool's wire entry.

        A decoded tool that was not changed is returned exactly as received,
        including fields this client does not model.
        """
        if self._wire is not None:
            return copy.deepcopy(self._wire)
        return self._encode()

    def changed(self, **update: Any) -> AgentTool:
        """Copy with fields replaced; the copy is encoded from its fields."""
        tool = self.model_copy(update=update)
        tool._wire = None
        return tool

    def _encode(self) -> dict[str, Any]:
        return {"type": self.type}

    def binding(self) -> dict[str, Any] | None:
        """The ``tool_resources`` entry for this tool, if it owns one."""
        return None

    @classmethod
    def from_wire(
        cls, entry: dict[str, Any], binding: dict[str, Any] | None = None
    ) -> AgentTool:
        raise NotImplementedError


class CodeInterpreterTool(AgentTool):
    """Sandboxed code execution over uploaded files."""

    kind = ToolKind.CODE_INTERPRETER
    type: Literal["code_interpreter"] = "code_interpreter"
    file_ids: list[str] = Field(default_factory=list)

    def binding(self) -> dict[str, Any]:
        return {"file_ids": list(self.file_ids)}

    @classmethod
    def from_wire(cls, entry, binding=None):
        return cls(file_ids=list((binding or {}).get("file_ids") or []))


class FileSearchTool(AgentTool):
    """Retrieval over vector stores."""

    kind = ToolKind.FILE_SEARCH
    type: Literal["file_search"] = "file_search"
    vector_store_ids: list[str] = Field(default_factory=list)
    max_num_results: int | None = Field(default=None, ge=1, le=50)

    def _encode(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"type": self.type}
        if self.max_num_results is not None:
            wire["file_search"] = {"max_num_results": self.max_num_results}
        return wire

    def binding(self) -> dict[str, Any]:
        return {"vector_store_ids": list(self.vector_store_ids)}

    @classmethod
    def from_wire(cls, entry, binding=None):
        options = entry.get("file_search") or {}
        return cls(
            vector_store_ids=list((binding or {}).get("vector_store_ids") or []),
            max_num_results=options.get("max_num_results"),
        )


class AzureAISearchIndex(RequestModel):
    """One index searched by the Azure AI Search tool."""

    model_config = ConfigDict(extra="allow")
    error_class = InvalidToolPayloadError

    index_connection_id: str = Field(min_length=1, description="Project connection ID")
    index_name: str = Field(min_length=1, description="Search index name")
    query_type: Literal[
        "simple",
        "semantic",
        "vector",
        "vector_simple_hybrid",
        "vector_semantic_hybrid",
    ] | None = Field(default=None, description="Query type")
    top_k: int | None = Field(default=None, ge=1, description="Results to retrieve")
    filter: str | None = Field(default=None, description="OData filter expression")


class AzureAISearchTool(AgentTool):
    """Grounding on Azure AI Search indexes."""

    kind = ToolKind.AZURE_AI_SEARCH
    type: Literal["azure_ai_search"] = "azure_ai_search"
    indexes: list[AzureAISearchIndex] = Field(default_factory=list)

    def binding(self) -> dict[str, Any]:
        return {"indexes": [index.model_dump(exclude_none=True) for index in self.indexes]}

    @classmethod
    def from_wire(cls, entry, binding=None):
        raw_indexes = (binding or {}).get("indexes") or []
        return cls(indexes=[AzureAISearchIndex(**index) for index in raw_indexes])


class FunctionTool(AgentTool):
    """Custom function the caller executes when the run requires action."""

    kind = ToolKind.FUNCTION
    type: Literal["function"] = "function"
    name: str = Field(pattern=IDENTIFIER_PATTERN)
    description: str = ""
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @field_validator("parameters")
    @classmethod
    def _parameters_are_object_schema(cls, value: dict[str, Any]) -> dict[str, Any]:
        if value.get("type") != "object":
            raise ValueError("function parameters must be a JSON schema of type 'object'")
        return value

    @property
    def key(self) -> str:
        return self.name

    def _encode(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    @classmethod
    def from_wire(cls, entry, binding=None):
        function = entry.get("function") or {}
        data = {key: function[key] for key in ("name", "description", "parameters") if key in function}
        if data.get("description") is None:
            data.pop("description", None)
        return cls(**data)


class OpenApiTool(AgentTool):
    """HTTP API described by an OpenAPI 3 document."""

    kind = ToolKind.OPENAPI
    type: Literal["openapi"] = "openapi"
    name: str = Field(pattern=IDENTIFIER_PATTERN)
    description: str = ""
    spec: dict[str, Any]
    auth: dict[str, Any] = Field(default_factory=lambda: {"type": "anonymous"})

    @field_validator("spec")
    @classmethod
    def _spec_is_openapi_document(cls, value: dict[str, Any]) -> dict[str, Any]:
        if "openapi" not in value and "swagger" not in value:
            raise ValueError("spec must declare an 'openapi' version")
        if not isinstance(value.get("paths"), dict):
            raise ValueError("spec must contain a 'paths' object")
        return value

    @field_validator("auth")
    @classmethod
    def _auth_is_supported(cls, value: dict[str, Any]) -> dict[str, Any]:
        auth_type = value.get("type")
        scheme = value.get("security_scheme") or {}
        if auth_type not in {"anonymous", "connection", "managed_identity"}:
            raise ValueError("auth type must be one of: anonymous, connection, managed_identity")
        if auth_type == "connection" and not scheme.get("connection_id"):
            raise ValueError("connection auth requires security_scheme.connection_id")
        if auth_type == "managed_identity" and not scheme.get("audience"):
            raise ValueError("managed_identity auth requires security_scheme.audience")
        return value

    @property
    def key(self) -> str:
        return self.name

    def _encode(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "openapi": {
                "name": self.name,
                "description": self.description,
                "spec": self.spec,
                "auth": self.auth,
            },
        }

    @classmethod
    def from_wire(cls, entry, binding=None):
        openapi = entry.get("openapi") or {}
        data = {key: openapi[key] for key in ("name", "description", "spec", "auth") if openapi.get(key) is not None}
        return cls(**data)


class McpTool(AgentTool):
    """Remote Model Context Protocol server."""

    model_config = ConfigDict(extra="allow")

    kind = ToolKind.MCP
    type: Literal["mcp"] = "mcp"
    server_label: str = Field(pattern=SERVER_LABEL_PATTERN)
    server_url: str
    require_approval: Literal["never", "once", "always"] = "always"
    allowed_tools: list[str] | None = None
    headers: dict[str, str] | None = None
    project_connection_id: str | None = None

    @field_validator("server_url")
    @classmethod
    def _url_is_http(cls, value: str) -> str:
        if not value.startswith(("https://", "http://")):
            raise ValueError("server_url must be an http(s) URL")
        return value

    @property
    def key(self) -> str:
        return self.server_label

    def _encode(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_wire(cls, entry, binding=None):
        data = {key: value for key, value in entry.items() if key != "type"}
        return cls(**data)


class BingGroundingTool(AgentTool):
    """Web grounding through Bing Search connections."""

    kind = ToolKind.BING_GROUNDING
    type: Literal["bing_grounding"] = "bing_grounding"
    connection_ids: list[str] = Field(min_length=1)

    def _encode(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "bing_grounding": {
                "connections": [{"connection_id": cid} for cid in self.connection_ids]
            },
        }

    @classmethod
    def from_wire(cls, entry, binding=None):
        options = entry.get("bing_grounding") or {}
        connections = options.get("connections") or options.get("search_configurations") or []
        return cls(connection_ids=[c["connection_id"] for c in connections if c.get("connection_id")])


class ConnectedAgentTool(AgentTool):
    """Delegation to another agent."""

    kind = ToolKind.CONNECTED_AGENT
    type: Literal["connected_agent"] = "connected_agent"
    id: str = Field(min_length=1, description="ID of the delegated agent")
    name: str = Field(min_length=1, description="Name the model uses to call it")
    description: str = Field(min_length=1, description="When to delegate")

    @property
    def key(self) -> str:
        return self.id

    def _encode(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "connected_agent": {
                "id": self.id,
                "name": self.name,
                "description": self.description,
            },
        }

    @classmethod
    def from_wire(cls, entry, binding=None):
        details = entry.get("connected_agent") or {}
        return cls(
            id=details.get("id", ""),
            name=details.get("name", ""),
            description=details.get("description", ""),
        )


class OpaqueTool(AgentTool):
    """A tool type this client does not model, kept verbatim."""

    payload: dict[str, Any]
    resources: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _payload_matches_type(self) -> OpaqueTool:
        if self.payload.get("type") != self.type:
            raise ValueError("payload type does not match tool type")
        return self

    @property
    def key(self) -> str | None:
        # Known multi-instance kinds that failed typed decoding keep their key.
        if self.type == ToolKind.MCP.value:
            return self.payload.get("server_label")
        field_name = OPAQUE_KEY_FIELDS.get(self.type)
        section = self.payload.get(self.type)
        if field_name and isinstance(section, dict):
            return section.get(field_name)
        return None

    def _encode(self) -> dict[str, Any]:
        return dict(self.payload)

    def binding(self) -> dict[str, Any] | None:
        return dict(self.resources) if self.resources is not None else None

    @classmethod
    def from_wire(cls, entry, binding=None):
        return cls(type=entry["type"], payload=dict(entry), resources=binding)


TOOL_TYPES: dict[str, type[AgentTool]] = {
    tool_cls.kind.value: tool_cls
    for tool_cls in (
        CodeInterpreterTool,
        FileSearchTool,
        AzureAISearchTool,
        FunctionTool,
        OpenApiTool,
        McpTool,
        BingGroundingTool,
        ConnectedAgentTool,
    )
}


OPAQUE_KEY_FIELDS = {
    ToolKind.CONNECTED_AGENT.value: "id",
    ToolKind.FUNCTION.value: "name",
    ToolKind.OPENAPI.value: "name",
}


def strip_tool_generated_fields(entry: dict[str, Any]) -> dict[str, Any]:
    """Copy of a wire tool entry without the ``functions`` property function tools carry."""
    if entry.get("type") == ToolKind.FUNCTION.value:
        return {key: copy.deepcopy(value) for key, value in entry.items() if key != "functions"}
    return copy.deepcopy(entry)


def tool_from_wire(
    entry: dict[str, Any],
    tool_resources: dict[str, Any] | None = None,
    strict: bool = True,
) -> AgentTool:
    """
    Decode one wire tool entry, attaching its ``tool_resources`` binding.

    The tool remembers the entry, so it is sent back unchanged unless it is
    modified. With ``strict=False`` (payloads read from the service) an entry
    that fails validation is kept as an ``OpaqueTool`` instead of raising.

    Raises:
        InvalidToolPayloadError: If the entry has no type, or is invalid and
            ``strict`` is set
    """
    if not isinstance(entry, dict) or not entry.get("type"):
        raise InvalidToolPayloadError("Tool entry must be an object with a 'type'")
    tool_type = entry["type"]
    binding = (tool_resources or {}).get(tool_type)
    tool_cls = TOOL_TYPES.get(tool_type, OpaqueTool)
    try:
        tool = tool_cls.from_wire(entry, binding)
    except (InvalidToolPayloadError, TypeError, AttributeError) as e:
        if strict:
            raise
        logger.debug(f"Keeping {tool_type} tool as received: {e}")
        tool = OpaqueTool.from_wire(entry, binding)
    tool._wire = strip_tool_generated_fields(entry)
    return tool


def tools_from_wire(
    entries: list[dict[str, Any]] | None,
    tool_resources: dict[str, Any] | None = None,
    strict: bool = True,
) -> list[AgentTool]:
    """Decode a wire tool list in order."""
    return [tool_from_wire(entry, tool_resources, strict) for entry in entries or []]
