"""Commands for the active service context."""

from typing import Optional

import typer

from foundry_agents.cli import common
from foundry_agents.core.constants import Display, ResourceKind

app = typer.Typer(help="Set, show and clear the active service context.")
console = common.console


@app.command("set")
@common.handle_errors
def set_command(
    target: str = typer.Argument(
        ...,
        help="Endpoint URL, or a connection string 'host;subscription;resourceGroup;workspace'.",
    ),
    kind: ResourceKind = typer.Option(
        ResourceKind.AGENT,
        "--kind",
        "-k",
        case_sensitive=False,
        help="Kind of resource managed through the endpoint.",
    ),
    api_version: Optional[str] = typer.Option(
        None,
        "--api-version",
        help="API version used for every request instead of the built-in table.",
    ),
    skip_validation: bool = typer.Option(
        False,
        "--skip-validation",
        help="Do not make a test request against the endpoint.",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Do not save the context for later commands.",
    ),
) -> None:
    """
    Set the active context.

    The endpoint is validated with a single list request unless
    --skip-validation is given.
    """
    store = common.build_store()
    context = store.set(
        target,
        resource_kind=kind,
        api_version=api_version,
        skip_validation=skip_validation,
        no_cache=no_cache,
    )
    generation = "unified" if context.use_new_generation else "legacy"
    console.print(
        f"{Display.SUCCESS} Context set to [cyan]{context.endpoint}[/cyan] "
        f"({context.resource_kind.value}, {generation})"
    )


@app.command("show")
@common.handle_errors
def show_command(
    output: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, yaml.",
    ),
) -> None:
    """Show the active context."""
    context = common.build_store().get()
    if output != "table":
        common.render(context.to_cache(), output)
        return
    common.render(
        context,
        output,
        columns=[
            ("Endpoint", lambda c: c.endpoint),
            ("Kind", lambda c: c.resource_kind.value),
            ("Surface", lambda c: "unified" if c.use_new_generation else "legacy"),
            ("API Version", lambda c: c.api_version or "default"),
            ("Cached At", lambda c: c.cached_at.isoformat(timespec="seconds")),
        ],
        title="Active Context",
    )


@app.command("clear")
@common.handle_errors
def clear_command() -> None:
    """Forget the active context and delete the cache file."""
    common.build_store().clear()
    console.print(f"{Display.SUCCESS} Context cleared.")
