"""Loaders for JSON input documents: agents, functions, OpenAPI specs, MCP servers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from foundry_agents.core.exceptions import FormatError, InvalidToolPayloadError
from foundry_agents.core.logging import get_logger
from foundry_agents.models.tools import FunctionTool, McpTool, OpenApiTool

logger = get_logger("services.definitions")

JSON_ONLY_MESSAGE = "Input file must be JSON format"
YAML_SUFFIXES = {".yaml", ".yml"}


def load_json_document(path: Path | str) -> Any:
    """
    Read a JSON document from disk.

    Raises:
        FormatError: If the file is YAML or not valid JSON
    """
    path = Path(path)
    if path.suffix.lower() in YAML_SUFFIXES:
        raise FormatError(JSON_ONLY_MESSAGE, details={"path": str(path)})
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FormatError(f"Cannot read input file {path}: {e}") from e
    try:
        return json.loads(text)
    except ValueError as e:
        raise FormatError(JSON_ONLY_MESSAGE, details={"path": str(path)}) from e


def load_resource_document(path: Path | str) -> dict[str, Any]:
    """Read a full agent/assistant document used for create or update."""
    document = load_json_document(path)
    if not isinstance(document, dict):
        raise FormatError("Resource document must be a JSON object", details={"path": str(path)})
    return document


def load_function_tools(path: Path | str) -> list[FunctionTool]:
    """
    Read function definitions.

    Accepts a single definition, a list of definitions, or wire-shaped tool
    entries (``{"type": "function", "function": {...}}``).
    """
    document = load_json_document(path)
    entries = document if isinstance(document, list) else [document]
    tools = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise InvalidToolPayloadError("Function definitions must be JSON objects")
        if entry.get("type") == "function":
            tools.append(FunctionTool.from_wire(entry))
        else:
            tools.append(FunctionTool(**entry))
    return tools


def load_openapi_tool(
    path: Path | str,
    name: str,
    description: str = "",
    auth: dict[str, Any] | None = None,
) -> OpenApiTool:
    """
    Build an OpenAPI tool from a JSON specification file.

    Raises:
        FormatError: If the specification is YAML or not a JSON object
        InvalidToolPayloadError: If it is not an OpenAPI document
    """
    spec = load_json_document(path)
    if not isinstance(spec, dict):
        raise FormatError(JSON_ONLY_MESSAGE, details={"path": str(path)})
    data: dict[str, Any] = {"name": name, "description": description, "spec": spec}
    if auth is not None:
        data["auth"] = auth
    return OpenApiTool(**data)


@dataclass
class McpServerOutcome:
    """Validation result for one MCP server descriptor."""

    index: int
    label: str | None
    tool: McpTool | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.tool is not None


def validate_mcp_servers(descriptors: list[dict[str, Any]]) -> list[McpServerOutcome]:
    """
    Validate each MCP server descriptor independently.

    An invalid entry is reported in its outcome and never stops validation
    of the entries after it.
    """
    outcomes = []
    for index, descriptor in enumerate(descriptors):
        label = descriptor.get("server_label") if isinstance(descriptor, dict) else None
        try:
            if not isinstance(descriptor, dict):
                raise InvalidToolPayloadError("MCP server descriptor must be a JSON object")
            data = {key: value for key, value in descriptor.items() if key != "type"}
            outcomes.append(McpServerOutcome(index=index, label=label, tool=McpTool(**data)))
        except InvalidToolPayloadError as e:
            logger.warning(f"MCP server #{index + 1} ({label or 'unlabelled'}): {e.message}")
            outcomes.append(McpServerOutcome(index=index, label=label, error=e.message))
    return outcomes


def load_mcp_servers(source: Path | str | list[dict[str, Any]]) -> list[McpTool]:
    """
    Load MCP server descriptors from a file or an inline list.

    Raises:
        InvalidToolPayloadError: Listing every invalid descriptor
    """
    descriptors = source if isinstance(source, list) else load_json_document(source)
    if isinstance(descriptors, dict):
        descriptors = [descriptors]
    if not isinstance(descriptors, list):
        raise FormatError("MCP server configuration must be a JSON object or array")

    outcomes = validate_mcp_servers(descriptors)
    failures = [outcome for outcome in outcomes if not outcome.is_valid]
    if failures:
        summary = "; ".join(f"#{f.index + 1}: {f.error}" for f in failures)
        raise InvalidToolPayloadError(
            f"{len(failures)} of {len(outcomes)} MCP server(s) are invalid: {summary}",
            details={"invalid": [f.index for f in failures]},
        )
    return [outcome.tool for outcome in outcomes if outcome.tool is not None]
