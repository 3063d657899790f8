"""Helpers shared by the command modules."""

from __future__ import annotations

import functools
import json
from typing import Any, Callable, Sequence

import typer
from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from foundry_agents.core.config import get_settings
from foundry_agents.core.constants import Display
from foundry_agents.core.context import FileContextCache
from foundry_agents.core.exceptions import AgentServiceError, ValidationError
from foundry_agents.core.logging import get_logger
from foundry_agents.models.resource import AgentResource
from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.auth import AzureAuthService
from foundry_agents.services.context_store import ContextStore

console = Console()
logger = get_logger("cli")

OUTPUT_FORMATS = ("table", "json", "yaml")


def build_store() -> ContextStore:
    """Context store backed by the on-disk cache and azure-identity."""
    settings = get_settings()
    auth_service = AzureAuthService(
        method=settings.auth_method,
        tenant_id=settings.tenant_id,
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        managed_identity_client_id=settings.client_id,
    )
    return ContextStore(
        cache=FileContextCache(settings.context_file),
        token_provider=auth_service,
    )


def build_client(store: ContextStore | None = None) -> ApiClient:
    """API client for the cached context."""
    store = store or build_store()
    return ApiClient(store, store.token_provider, timeout=get_settings().request_timeout)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn client errors into a red message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except AgentServiceError as e:
            logger.debug(f"{func.__name__} failed", exc_info=True)
            console.print(f"{Display.FAILURE} [red]{escape(str(e))}[/red]", highlight=False)
            raise typer.Exit(1)

    return wrapper


def to_plain(data: Any) -> Any:
    """Convert models (or lists of them) to JSON-compatible data."""
    if isinstance(data, AgentResource):
        return data.to_wire()
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_none=True)
    if isinstance(data, list):
        return [to_plain(item) for item in data]
    return data


def render(
    data: Any,
    output: str = "table",
    columns: Sequence[tuple[str, Callable[[Any], Any]]] | None = None,
    title: str | None = None,
) -> None:
    """
    Print data as a table, JSON or YAML.

    Args:
        data: Model, list of models, or plain data
        output: One of table, json, yaml
        columns: (header, getter) pairs used for table output
        title: Table title
    """
    output = output.lower()
    if output not in OUTPUT_FORMATS:
        raise ValidationError(f"Unknown output format '{output}'. Use one of: {', '.join(OUTPUT_FORMATS)}")

    if output == "json" or (output == "table" and not columns):
        console.print_json(json.dumps(to_plain(data), default=str))
        return
    if output == "yaml":
        import yaml

        console.print(
            yaml.safe_dump(to_plain(data), default_flow_style=False, sort_keys=False),
            markup=False,
            highlight=False,
        )
        return

    rows = data if isinstance(data, list) else [data]
    table = Table(title=title, box=box.ROUNDED, header_style=Display.HEADER_STYLE)
    for header, _ in columns:
        table.add_column(header)
    for row in rows:
        table.add_row(*[_cell(getter(row)) for _, getter in columns])
    console.print(table)


def _cell(value: Any) -> str:
    if value is None or value == "":
        return "-"
    return str(value)


def parse_key_values(values: list[str] | None, option: str = "--metadata") -> dict[str, str] | None:
    """Parse repeated ``key=value`` options into a dict."""
    if not values:
        return None
    result = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValidationError(f"Invalid {option} value '{item}'. Expected key=value")
        result[key] = value
    return result


def print_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        console.print(f"{Display.WARNING} {warning}", highlight=False)
