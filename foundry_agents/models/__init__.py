"""Data models for the Foundry Agents client."""

from foundry_agents.models.conversation import Message, Run, Thread
from foundry_agents.models.directives import (
    Add,
    AddMany,
    ClearAll,
    Directive,
    ReconcileRequest,
    Remove,
    ReplaceFileIds,
    ToolOptions,
)
from foundry_agents.models.files import FileObject, VectorStore
from foundry_agents.models.resource import (
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
    OpaqueTool,
    OpenApiTool,
    ToolKind,
    tool_from_wire,
)

__all__ = [
    # Resource models
    "AgentResource",
    "ResourceFields",
    "strip_generated_fields",
    # Tool models
    "AgentTool",
    "AzureAISearchIndex",
    "AzureAISearchTool",
    "BingGroundingTool",
    "CodeInterpreterTool",
    "ConnectedAgentTool",
    "FileSearchTool",
    "FunctionTool",
    "McpTool",
    "OpaqueTool",
    "OpenApiTool",
    "ToolKind",
    "tool_from_wire",
    # Directives
    "Add",
    "AddMany",
    "ClearAll",
    "Directive",
    "ReconcileRequest",
    "Remove",
    "ReplaceFileIds",
    "ToolOptions",
    # Conversation models
    "Message",
    "Run",
    "Thread",
    # File models
    "FileObject",
    "VectorStore",
]
