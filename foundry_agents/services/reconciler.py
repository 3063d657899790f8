"""
Tool configuration reconciliation.

Computes the create/update payload for an agent or assistant from its current
state (the baseline, absent on create), the requested scalar fields and an
ordered list of tool directives. The computation is pure: the same request
always produces the same body, and re-applying a request to its own result
produces no change.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable

from foundry_agents.core.exceptions import ConflictError, MissingRequiredFieldError
from foundry_agents.core.logging import get_logger
from foundry_agents.models.directives import (
    Add,
    AddMany,
    ClearAll,
    Directive,
    ReconcileRequest,
    Remove,
    ReplaceFileIds,
)
from foundry_agents.models.resource import CORE_FIELDS, AgentResource
from foundry_agents.models.tools import AgentTool, CodeInterpreterTool, ToolKind

logger = get_logger("services.reconciler")

REQUIRED_ON_CREATE = ("model", "name")


@dataclass
class ReconcileResult:
    """Wire payload plus advisory warnings."""

    body: dict[str, Any]
    warnings: list[str] = field(default_factory=list)

    @property
    def tools(self) -> list[dict[str, Any]]:
        return self.body.get("tools", [])


def dedupe(values: Iterable[str]) -> list[str]:
    """Remove duplicates, keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def check_directives(directives: list[Directive]) -> None:
    """
    Reject directive combinations that cannot be applied together.

    A single-tool add and a bulk configuration for the same kind are mutually
    exclusive.

    Raises:
        ConflictError: If both forms target the same kind
    """
    single = {d.kind for d in directives if isinstance(d, Add)}
    bulk = {d.kind for d in directives if isinstance(d, AddMany)}
    conflicting = sorted(single & bulk)
    if conflicting:
        kinds = ", ".join(conflicting)
        raise ConflictError(
            f"Cannot combine a single tool and a bulk configuration for: {kinds}",
            details={"kinds": conflicting},
        )


def reconcile(request: ReconcileRequest) -> ReconcileResult:
    """
    Compute the wire payload for a create or update.

    Args:
        request: Baseline, requested fields and tool directives

    Returns:
        The payload and any advisory warnings

    Raises:
        ConflictError: If directives are mutually exclusive
        MissingRequiredFieldError: If model or name is missing on create
    """
    check_directives(request.directives)

    baseline = request.baseline
    body = _seed_fields(request)
    warnings = _advisory_warnings(body)

    baseline_tools = list(baseline.tools) if baseline is not None else []
    tools = apply_directives(baseline_tools, request.directives)

    if tools:
        body["tools"] = [tool.to_wire() for tool in tools]
        resources = _build_tool_resources(tools, baseline)
        if resources:
            body["tool_resources"] = resources
    elif baseline_tools:
        # The service keeps existing tools when the key is omitted.
        body["tools"] = []
        body["tool_resources"] = {}

    logger.debug(
        f"Reconciled {len(tools)} tool(s): {[tool.type for tool in tools]}"
    )
    return ReconcileResult(body=body, warnings=warnings)


def apply_directives(
    baseline_tools: list[AgentTool], directives: list[Directive]
) -> list[AgentTool]:
    """
    Apply directives in order to a copy of the baseline tool list.

    Untouched tools keep their relative order; added tools are appended.
    """
    tools = list(baseline_tools)
    for directive in directives:
        if isinstance(directive, ClearAll):
            tools = []
        elif isinstance(directive, Remove):
            before = len(tools)
            tools = [tool for tool in tools if not _matches(tool, directive.kind, directive.key)]
            if len(tools) == before:
                logger.debug(f"Nothing to remove for {directive.kind} {directive.key or ''}".rstrip())
        elif isinstance(directive, Add):
            tools = _add(tools, directive.tool)
        elif isinstance(directive, AddMany):
            for tool in directive.tools:
                tools = _add(tools, tool)
        elif isinstance(directive, ReplaceFileIds):
            tools = _replace_file_ids(tools, directive.file_ids)
        else:
            raise TypeError(f"Unknown directive: {directive!r}")
    return tools


def _seed_fields(request: ReconcileRequest) -> dict[str, Any]:
    baseline = request.baseline
    requested = request.fields.requested()
    body: dict[str, Any] = {}
    for name in CORE_FIELDS:
        if name in requested:
            body[name] = copy.deepcopy(requested[name])
        elif baseline is not None and getattr(baseline, name) is not None:
            body[name] = copy.deepcopy(getattr(baseline, name))

    if baseline is None and request.require_core:
        for name in REQUIRED_ON_CREATE:
            if not body.get(name):
                raise MissingRequiredFieldError(name)
    return body


def _advisory_warnings(body: dict[str, Any]) -> list[str]:
    warnings = []
    if body.get("temperature") is not None and body.get("top_p") is not None:
        message = (
            "Both temperature and top_p are set; the service may honor only one. "
            "Adjust one of them, not both."
        )
        logger.warning(message)
        warnings.append(message)
    return warnings


def _matches(tool: AgentTool, kind: str, key: str | None) -> bool:
    if tool.type != kind:
        return False
    return key is None or tool.key is None or tool.key == key


def _add(tools: list[AgentTool], tool: AgentTool) -> list[AgentTool]:
    if isinstance(tool, CodeInterpreterTool):
        return _merge_code_interpreter(tools, tool)
    retained = [existing for existing in tools if existing.identity != tool.identity]
    retained.append(tool)
    return retained


def _merge_code_interpreter(
    tools: list[AgentTool], tool: CodeInterpreterTool
) -> list[AgentTool]:
    # Files are added to an existing code interpreter, which keeps its position.
    merged = list(tools)
    for index, existing in enumerate(merged):
        if isinstance(existing, CodeInterpreterTool):
            file_ids = dedupe([*existing.file_ids, *tool.file_ids])
            if file_ids != existing.file_ids:
                merged[index] = existing.changed(file_ids=file_ids)
            return merged
    merged.append(tool.changed(file_ids=dedupe(tool.file_ids)))
    return merged


def _replace_file_ids(tools: list[AgentTool], file_ids: tuple[str, ...]) -> list[AgentTool]:
    replaced = list(tools)
    new_ids = dedupe(file_ids)
    for index, existing in enumerate(replaced):
        if isinstance(existing, CodeInterpreterTool):
            if new_ids != existing.file_ids:
                replaced[index] = existing.changed(file_ids=new_ids)
            return replaced
    replaced.append(CodeInterpreterTool(file_ids=new_ids))
    return replaced


def _build_tool_resources(
    tools: list[AgentTool], baseline: AgentResource | None
) -> dict[str, Any]:
    retained = {id(tool) for tool in baseline.tools} if baseline is not None else set()
    raw = baseline.raw_tool_resources if baseline is not None else {}

    resources: dict[str, Any] = {}
    for tool in tools:
        if tool.type in resources:
            continue
        if id(tool) in retained and tool.type in raw:
            resources[tool.type] = copy.deepcopy(raw[tool.type])
            continue
        binding = tool.binding()
        if binding is not None:
            resources[tool.type] = binding

    # code_interpreter always has a binding, even without files
    if any(tool.type == ToolKind.CODE_INTERPRETER.value for tool in tools):
        resources.setdefault(ToolKind.CODE_INTERPRETER.value, {"file_ids": []})
    return resources
