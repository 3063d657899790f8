"""Commands for creating and managing agents/assistants."""

import json
from pathlib import Path
from typing import Any, List, Optional

import typer

from foundry_agents.cli import common
from foundry_agents.core.constants import Display
from foundry_agents.core.exceptions import ValidationError
from foundry_agents.models.directives import Directive, ToolOptions
from foundry_agents.models.resource import AgentResource, ResourceFields
from foundry_agents.models.tools import AzureAISearchIndex, ConnectedAgentTool, McpTool
from foundry_agents.services import definitions
from foundry_agents.services.resource_ops import ResourceService

app = typer.Typer(help="Create, inspect, update and delete agents.")
console = common.console

RESOURCE_COLUMNS = [
    ("ID", lambda r: r.id),
    ("Name", lambda r: r.name),
    ("Model", lambda r: r.model),
    ("Tools", lambda r: ", ".join(tool.type for tool in r.tools)),
]


def _parse_connected_agent(value: str) -> ConnectedAgentTool:
    parts = value.split(":", 2)
    if len(parts) != 3:
        raise ValidationError(
            f"Invalid --connected-agent value '{value}'. Expected ID:NAME:DESCRIPTION"
        )
    agent_id, name, description = parts
    return ConnectedAgentTool(id=agent_id, name=name, description=description)


def _parse_search_index(value: str, query_type: Optional[str], top_k: Optional[int]) -> AzureAISearchIndex:
    connection_id, sep, index_name = value.rpartition(":")
    if not sep:
        raise ValidationError(
            f"Invalid --azure-ai-search value '{value}'. Expected CONNECTION_ID:INDEX_NAME"
        )
    data: dict[str, Any] = {"index_connection_id": connection_id, "index_name": index_name}
    if query_type:
        data["query_type"] = query_type
    if top_k:
        data["top_k"] = top_k
    return AzureAISearchIndex(**data)


def _parse_mcp_server(
    value: str, require_approval: Optional[str], allowed_tools: Optional[List[str]]
) -> McpTool:
    label, sep, url = value.partition("=")
    if not sep:
        raise ValidationError(f"Invalid --mcp-server value '{value}'. Expected LABEL=URL")
    data: dict[str, Any] = {"server_label": label, "server_url": url}
    if require_approval:
        data["require_approval"] = require_approval
    if allowed_tools:
        data["allowed_tools"] = allowed_tools
    return McpTool(**data)


def _load_connected_agents(path: Path) -> list[ConnectedAgentTool]:
    entries = definitions.load_json_document(path)
    if isinstance(entries, dict):
        entries = [entries]
    if not isinstance(entries, list):
        raise ValidationError("Connected agents file must contain a JSON object or array")
    agents = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("Each connected agent must be a JSON object")
        data = entry.get("connected_agent", entry)
        agents.append(ConnectedAgentTool(**{k: v for k, v in data.items() if k != "type"}))
    return agents


def _build_fields(
    model: Optional[str],
    name: Optional[str],
    description: Optional[str],
    instructions: Optional[str],
    instructions_file: Optional[Path],
    metadata: Optional[List[str]],
    temperature: Optional[float],
    top_p: Optional[float],
    response_format: Optional[str],
) -> ResourceFields:
    if instructions_file is not None:
        if instructions is not None:
            raise ValidationError("Use either --instructions or --instructions-file, not both")
        instructions = instructions_file.read_text(encoding="utf-8")

    parsed_format: Any = response_format
    if response_format and response_format.lstrip().startswith("{"):
        try:
            parsed_format = json.loads(response_format)
        except ValueError as e:
            raise ValidationError(f"--response-format is not valid JSON: {e}") from e

    values = {
        "model": model,
        "name": name,
        "description": description,
        "instructions": instructions,
        "metadata": common.parse_key_values(metadata),
        "temperature": temperature,
        "top_p": top_p,
        "response_format": parsed_format,
    }
    return ResourceFields(**{key: value for key, value in values.items() if value is not None})


def _build_directives(
    code_interpreter: bool = False,
    code_interpreter_files: Optional[List[str]] = None,
    replace_code_interpreter_files: bool = False,
    file_search: bool = False,
    vector_stores: Optional[List[str]] = None,
    azure_ai_search: Optional[List[str]] = None,
    search_query_type: Optional[str] = None,
    search_top_k: Optional[int] = None,
    bing_connection: Optional[str] = None,
    connected_agent: Optional[str] = None,
    connected_agents_file: Optional[Path] = None,
    mcp_server: Optional[str] = None,
    mcp_approval: Optional[str] = None,
    mcp_allowed_tools: Optional[List[str]] = None,
    mcp_servers_file: Optional[Path] = None,
    functions_file: Optional[Path] = None,
    openapi_file: Optional[Path] = None,
    openapi_name: Optional[str] = None,
    openapi_description: str = "",
    clear_tools: bool = False,
    remove_tools: Optional[List[str]] = None,
    remove_all_mcp: bool = False,
) -> list[Directive]:
    options = ToolOptions(
        clear_tools=clear_tools,
        remove_all_mcp=remove_all_mcp,
        enable_code_interpreter=code_interpreter,
        code_interpreter_file_ids=list(code_interpreter_files or []),
        replace_code_interpreter_files=replace_code_interpreter_files,
        enable_file_search=file_search,
        vector_store_ids=list(vector_stores or []),
        bing_connection_id=bing_connection,
    )

    for value in remove_tools or []:
        kind, _, key = value.partition(":")
        options.remove.append((kind, key or None))

    options.azure_ai_search_indexes = [
        _parse_search_index(value, search_query_type, search_top_k) for value in azure_ai_search or []
    ]

    if connected_agent:
        options.connected_agent = _parse_connected_agent(connected_agent)
    if connected_agents_file is not None:
        options.connected_agents = _load_connected_agents(connected_agents_file)

    if mcp_server:
        options.mcp_server = _parse_mcp_server(mcp_server, mcp_approval, mcp_allowed_tools)
    if mcp_servers_file is not None:
        options.mcp_servers = definitions.load_mcp_servers(mcp_servers_file)

    if functions_file is not None:
        options.functions = definitions.load_function_tools(functions_file)
    if openapi_file is not None:
        if not openapi_name:
            raise ValidationError("--openapi-name is required with --openapi")
        options.openapi_tools = [
            definitions.load_openapi_tool(openapi_file, openapi_name, openapi_description)
        ]

    return options.to_directives()


def _report(service: ResourceService, resource: AgentResource, verb: str, output: str) -> None:
    common.print_warnings(service.last_warnings)
    if output == "table":
        console.print(
            f"{Display.SUCCESS} {verb} {service.kind_label.lower()} "
            f"[cyan]{resource.id}[/cyan] ({resource.name or 'unnamed'})"
        )
    else:
        common.render(resource, output)


@app.command("create")
@common.handle_errors
def create_command(
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model deployment name."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name."),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description."),
    instructions: Optional[str] = typer.Option(None, "--instructions", "-i", help="System instructions."),
    instructions_file: Optional[Path] = typer.Option(
        None, "--instructions-file", exists=True, dir_okay=False, help="Read instructions from a file."
    ),
    metadata: Optional[List[str]] = typer.Option(None, "--metadata", help="Metadata entry key=value. Repeatable."),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="Sampling temperature (0-2)."),
    top_p: Optional[float] = typer.Option(None, "--top-p", help="Nucleus sampling (0-1)."),
    response_format: Optional[str] = typer.Option(
        None, "--response-format", help="'auto' or a JSON response format object."
    ),
    from_file: Optional[Path] = typer.Option(
        None, "--from-file", "-f", exists=True, dir_okay=False, help="Create from a JSON document."
    ),
    copy_from: Optional[str] = typer.Option(
        None, "--copy-from", help="ID of an existing agent to copy; other options apply on top."
    ),
    code_interpreter: bool = typer.Option(False, "--code-interpreter", help="Enable code interpreter."),
    code_interpreter_files: Optional[List[str]] = typer.Option(
        None, "--code-interpreter-file", help="File ID for code interpreter. Repeatable."
    ),
    file_search: bool = typer.Option(False, "--file-search", help="Enable file search."),
    vector_stores: Optional[List[str]] = typer.Option(
        None, "--vector-store", help="Vector store ID for file search. Repeatable."
    ),
    azure_ai_search: Optional[List[str]] = typer.Option(
        None, "--azure-ai-search", help="CONNECTION_ID:INDEX_NAME. Repeatable."
    ),
    search_query_type: Optional[str] = typer.Option(None, "--search-query-type", help="Azure AI Search query type."),
    search_top_k: Optional[int] = typer.Option(None, "--search-top-k", help="Azure AI Search results to retrieve."),
    bing_connection: Optional[str] = typer.Option(None, "--bing-connection", help="Bing grounding connection ID."),
    connected_agent: Optional[str] = typer.Option(
        None, "--connected-agent", help="ID:NAME:DESCRIPTION of an agent to delegate to."
    ),
    connected_agents_file: Optional[Path] = typer.Option(
        None, "--connected-agents", exists=True, dir_okay=False, help="JSON file listing connected agents."
    ),
    mcp_server: Optional[str] = typer.Option(None, "--mcp-server", help="LABEL=URL of an MCP server."),
    mcp_approval: Optional[str] = typer.Option(
        None, "--mcp-approval", help="Approval for --mcp-server: never, once, always."
    ),
    mcp_allowed_tools: Optional[List[str]] = typer.Option(
        None, "--mcp-allowed-tool", help="Tool the MCP server may expose. Repeatable."
    ),
    mcp_servers_file: Optional[Path] = typer.Option(
        None, "--mcp-servers", exists=True, dir_okay=False, help="JSON file listing MCP servers."
    ),
    functions_file: Optional[Path] = typer.Option(
        None, "--functions", exists=True, dir_okay=False, help="JSON file of function definitions."
    ),
    openapi_file: Optional[Path] = typer.Option(
        None, "--openapi", exists=True, dir_okay=False, help="JSON OpenAPI specification."
    ),
    openapi_name: Optional[str] = typer.Option(None, "--openapi-name", help="Name for the OpenAPI tool."),
    openapi_description: str = typer.Option("", "--openapi-description", help="Description of the OpenAPI tool."),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """
    Create an agent.

    Use explicit options, a JSON document (--from-file), or copy an existing
    agent (--copy-from) and adjust it with options.
    """
    fields = _build_fields(
        model, name, description, instructions, instructions_file,
        metadata, temperature, top_p, response_format,
    )
    directives = _build_directives(
        code_interpreter=code_interpreter,
        code_interpreter_files=code_interpreter_files,
        file_search=file_search,
        vector_stores=vector_stores,
        azure_ai_search=azure_ai_search,
        search_query_type=search_query_type,
        search_top_k=search_top_k,
        bing_connection=bing_connection,
        connected_agent=connected_agent,
        connected_agents_file=connected_agents_file,
        mcp_server=mcp_server,
        mcp_approval=mcp_approval,
        mcp_allowed_tools=mcp_allowed_tools,
        mcp_servers_file=mcp_servers_file,
        functions_file=functions_file,
        openapi_file=openapi_file,
        openapi_name=openapi_name,
        openapi_description=openapi_description,
    )
    document = definitions.load_resource_document(from_file) if from_file else None

    with common.build_client() as client:
        service = ResourceService(client)
        source = service.get(copy_from) if copy_from else None
        resource = service.create(fields, directives, document=document, source=source)
        _report(service, resource, "Created", output)


@app.command("get")
@common.handle_errors
def get_command(
    resource_id: str = typer.Argument(..., help="Agent ID."),
    output: str = typer.Option("json", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """Show one agent."""
    with common.build_client() as client:
        resource = ResourceService(client).get(resource_id)
    common.render(resource, output, columns=RESOURCE_COLUMNS)


@app.command("list")
@common.handle_errors
def list_command(
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """List every agent."""
    with common.build_client() as client:
        service = ResourceService(client)
        resources = service.list()
        title = f"{service.kind_label}s"
    if not resources and output == "table":
        console.print(f"{Display.INFO} No {title.lower()} found.")
        return
    common.render(resources, output, columns=RESOURCE_COLUMNS, title=title)


@app.command("update")
@common.handle_errors
def update_command(
    resource_id: Optional[str] = typer.Argument(None, help="Agent ID (optional with --from-file containing an id)."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model deployment name."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name."),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description."),
    instructions: Optional[str] = typer.Option(None, "--instructions", "-i", help="System instructions."),
    instructions_file: Optional[Path] = typer.Option(
        None, "--instructions-file", exists=True, dir_okay=False, help="Read instructions from a file."
    ),
    metadata: Optional[List[str]] = typer.Option(None, "--metadata", help="Metadata entry key=value. Repeatable."),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="Sampling temperature (0-2)."),
    top_p: Optional[float] = typer.Option(None, "--top-p", help="Nucleus sampling (0-1)."),
    response_format: Optional[str] = typer.Option(
        None, "--response-format", help="'auto' or a JSON response format object."
    ),
    from_file: Optional[Path] = typer.Option(
        None, "--from-file", "-f", exists=True, dir_okay=False, help="Replace with a JSON document."
    ),
    clear_tools: bool = typer.Option(False, "--clear-tools", help="Remove every tool first."),
    remove_tools: Optional[List[str]] = typer.Option(
        None, "--remove-tool", help="KIND or KIND:KEY of a tool to remove. Repeatable."
    ),
    remove_all_mcp: bool = typer.Option(False, "--remove-all-mcp", help="Remove every MCP server."),
    code_interpreter: bool = typer.Option(False, "--code-interpreter", help="Enable code interpreter."),
    code_interpreter_files: Optional[List[str]] = typer.Option(
        None, "--code-interpreter-file", help="File ID added to code interpreter. Repeatable."
    ),
    replace_code_interpreter_files: bool = typer.Option(
        False,
        "--replace-code-interpreter-files",
        help="Replace code interpreter files with the given --code-interpreter-file IDs.",
    ),
    file_search: bool = typer.Option(False, "--file-search", help="Enable file search."),
    vector_stores: Optional[List[str]] = typer.Option(
        None, "--vector-store", help="Vector store ID for file search. Repeatable."
    ),
    azure_ai_search: Optional[List[str]] = typer.Option(
        None, "--azure-ai-search", help="CONNECTION_ID:INDEX_NAME. Repeatable."
    ),
    search_query_type: Optional[str] = typer.Option(None, "--search-query-type", help="Azure AI Search query type."),
    search_top_k: Optional[int] = typer.Option(None, "--search-top-k", help="Azure AI Search results to retrieve."),
    bing_connection: Optional[str] = typer.Option(None, "--bing-connection", help="Bing grounding connection ID."),
    connected_agent: Optional[str] = typer.Option(
        None, "--connected-agent", help="ID:NAME:DESCRIPTION of an agent to delegate to."
    ),
    connected_agents_file: Optional[Path] = typer.Option(
        None, "--connected-agents", exists=True, dir_okay=False, help="JSON file listing connected agents."
    ),
    mcp_server: Optional[str] = typer.Option(None, "--mcp-server", help="LABEL=URL of an MCP server."),
    mcp_approval: Optional[str] = typer.Option(
        None, "--mcp-approval", help="Approval for --mcp-server: never, once, always."
    ),
    mcp_allowed_tools: Optional[List[str]] = typer.Option(
        None, "--mcp-allowed-tool", help="Tool the MCP server may expose. Repeatable."
    ),
    mcp_servers_file: Optional[Path] = typer.Option(
        None, "--mcp-servers", exists=True, dir_okay=False, help="JSON file listing MCP servers."
    ),
    functions_file: Optional[Path] = typer.Option(
        None, "--functions", exists=True, dir_okay=False, help="JSON file of function definitions."
    ),
    openapi_file: Optional[Path] = typer.Option(
        None, "--openapi", exists=True, dir_okay=False, help="JSON OpenAPI specification."
    ),
    openapi_name: Optional[str] = typer.Option(None, "--openapi-name", help="Name for the OpenAPI tool."),
    openapi_description: str = typer.Option("", "--openapi-description", help="Description of the OpenAPI tool."),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """
    Update an agent.

    Fields and tools not mentioned are kept as they are.
    """
    fields = _build_fields(
        model, name, description, instructions, instructions_file,
        metadata, temperature, top_p, response_format,
    )
    directives = _build_directives(
        code_interpreter=code_interpreter,
        code_interpreter_files=code_interpreter_files,
        replace_code_interpreter_files=replace_code_interpreter_files,
        file_search=file_search,
        vector_stores=vector_stores,
        azure_ai_search=azure_ai_search,
        search_query_type=search_query_type,
        search_top_k=search_top_k,
        bing_connection=bing_connection,
        connected_agent=connected_agent,
        connected_agents_file=connected_agents_file,
        mcp_server=mcp_server,
        mcp_approval=mcp_approval,
        mcp_allowed_tools=mcp_allowed_tools,
        mcp_servers_file=mcp_servers_file,
        functions_file=functions_file,
        openapi_file=openapi_file,
        openapi_name=openapi_name,
        openapi_description=openapi_description,
        clear_tools=clear_tools,
        remove_tools=remove_tools,
        remove_all_mcp=remove_all_mcp,
    )
    document = definitions.load_resource_document(from_file) if from_file else None
    if document is not None and not resource_id:
        resource_id = document.get("id")

    with common.build_client() as client:
        service = ResourceService(client)
        resource = service.update(resource_id, fields, directives, document=document)
        _report(service, resource, "Updated", output)


@app.command("delete")
@common.handle_errors
def delete_command(
    resource_id: Optional[str] = typer.Argument(None, help="Agent ID."),
    delete_all: bool = typer.Option(False, "--all", help="Delete every agent."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete one agent, or every agent with --all."""
    if bool(resource_id) == delete_all:
        raise ValidationError("Give either an ID or --all")

    with common.build_client() as client:
        service = ResourceService(client)
        if resource_id:
            service.delete(resource_id)
            console.print(f"{Display.SUCCESS} Deleted [cyan]{resource_id}[/cyan]")
            return

        label = f"{service.kind_label.lower()}s"
        if not yes and not typer.confirm(f"Delete ALL {label}?"):
            raise typer.Exit(1)
        outcomes = service.delete_all()

    failed = [outcome for outcome in outcomes if not outcome.deleted]
    for outcome in failed:
        console.print(f"{Display.FAILURE} {outcome.resource_id}: {outcome.error or 'not deleted'}")
    console.print(f"{Display.SUCCESS} Deleted {len(outcomes) - len(failed)} of {len(outcomes)} {label}.")
    if failed:
        raise typer.Exit(1)
