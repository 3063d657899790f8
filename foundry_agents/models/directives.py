"""Tool directives and reconciliation requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from foundry_agents.core.exceptions import InvalidToolPayloadError
from foundry_agents.models.resource import (
    CORE_FIELDS,
    AgentResource,
    ResourceFields,
    strip_generated_fields,
)
from foundry_agents.models.tools import (
    AgentTool,
    AzureAISearchIndex,
    AzureAISearchTool,
    BingGroundingTool,
    CodeInterpreterTool,
    ConnectedAgentTool,
    FileSearchTool,
    FunctionTool,
    McpTool,
    OpenApiTool,
    ToolKind,
)


@dataclass(frozen=True)
class Add:
    """Attach one tool, replacing any tool with the same identity."""

    tool: AgentTool

    @property
    def kind(self) -> str:
        return self.tool.type


@dataclass(frozen=True)
class AddMany:
    """Attach several tools of one kind (a bulk configuration)."""

    kind: str
    tools: tuple[AgentTool, ...]

    def __post_init__(self) -> None:
        kind = self.kind.value if isinstance(self.kind, ToolKind) else self.kind
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "tools", tuple(self.tools))
        for tool in self.tools:
            if tool.type != kind:
                raise InvalidToolPayloadError(
                    f"Bulk '{kind}' configuration contains a '{tool.type}' tool"
                )


@dataclass(frozen=True)
class Remove:
    """Detach tools of a kind; only the instance named by ``key`` when given."""

    kind: str
    key: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.kind, ToolKind):
            object.__setattr__(self, "kind", self.kind.value)


@dataclass(frozen=True)
class ClearAll:
    """Detach every tool."""


@dataclass(frozen=True)
class ReplaceFileIds:
    """Replace (rather than extend) the code interpreter's files."""

    file_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_ids", tuple(self.file_ids))


Directive = Union[Add, AddMany, Remove, ClearAll, ReplaceFileIds]


@dataclass
class ReconcileRequest:
    """Everything needed to compute a create or update payload."""

    baseline: AgentResource | None = None
    fields: ResourceFields = field(default_factory=ResourceFields)
    directives: list[Directive] = field(default_factory=list)
    require_core: bool = True

    @classmethod
    def from_document(
        cls,
        document: dict[str, Any],
        baseline: AgentResource | None = None,
        require_core: bool = True,
    ) -> ReconcileRequest:
        """
        Build a request that reproduces a full resource document.

        The document's tools replace whatever the baseline carries.
        """
        stripped = strip_generated_fields(document)
        resource = AgentResource.from_wire(stripped, strict=True)
        fields = ResourceFields(
            **{name: stripped[name] for name in CORE_FIELDS if stripped.get(name) is not None}
        )
        directives: list[Directive] = [ClearAll()]
        directives.extend(Add(tool) for tool in resource.tools)
        return cls(
            baseline=baseline,
            fields=fields,
            directives=directives,
            require_core=require_core,
        )


@dataclass
class ToolOptions:
    """
    Tool changes as expressed on the command surface.

    Singular options (``connected_agent``, ``mcp_server``) and their bulk
    counterparts (``connected_agents``, ``mcp_servers``) become ``Add`` and
    ``AddMany`` directives; supplying both is rejected during reconciliation.
    """

    clear_tools: bool = False
    remove: list[tuple[str, str | None]] = field(default_factory=list)
    remove_all_mcp: bool = False

    enable_code_interpreter: bool = False
    code_interpreter_file_ids: list[str] = field(default_factory=list)
    replace_code_interpreter_files: bool = False

    enable_file_search: bool = False
    vector_store_ids: list[str] = field(default_factory=list)

    azure_ai_search_indexes: list[AzureAISearchIndex] = field(default_factory=list)
    bing_connection_id: str | None = None

    connected_agent: ConnectedAgentTool | None = None
    connected_agents: list[ConnectedAgentTool] | None = None

    mcp_server: McpTool | None = None
    mcp_servers: list[McpTool] | None = None

    functions: list[FunctionTool] = field(default_factory=list)
    openapi_tools: list[OpenApiTool] = field(default_factory=list)

    def to_directives(self) -> list[Directive]:
        """Translate options into directives in a fixed order."""
        directives: list[Directive] = []
        if self.clear_tools:
            directives.append(ClearAll())
        if self.remove_all_mcp:
            directives.append(Remove(ToolKind.MCP))
        directives.extend(Remove(kind, key) for kind, key in self.remove)

        if self.replace_code_interpreter_files:
            directives.append(ReplaceFileIds(tuple(self.code_interpreter_file_ids)))
        elif self.enable_code_interpreter or self.code_interpreter_file_ids:
            directives.append(Add(CodeInterpreterTool(file_ids=self.code_interpreter_file_ids)))

        if self.enable_file_search or self.vector_store_ids:
            directives.append(Add(FileSearchTool(vector_store_ids=self.vector_store_ids)))
        if self.azure_ai_search_indexes:
            directives.append(Add(AzureAISearchTool(indexes=self.azure_ai_search_indexes)))
        if self.bing_connection_id:
            directives.append(Add(BingGroundingTool(connection_ids=[self.bing_connection_id])))

        if self.connected_agent is not None:
            directives.append(Add(self.connected_agent))
        if self.connected_agents is not None:
            directives.append(AddMany(ToolKind.CONNECTED_AGENT, tuple(self.connected_agents)))
        if self.mcp_server is not None:
            directives.append(Add(self.mcp_server))
        if self.mcp_servers is not None:
            directives.append(AddMany(ToolKind.MCP, tuple(self.mcp_servers)))

        directives.extend(Add(tool) for tool in self.functions)
        directives.extend(Add(tool) for tool in self.openapi_tools)
        return directives
