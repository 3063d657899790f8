"""Main CLI application entry point."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from foundry_agents import __version__
from foundry_agents.core.config import get_settings
from foundry_agents.core.constants import Display
from foundry_agents.core.logging import setup_logging

app = typer.Typer(
    name="foundry-agents",
    help=Display.APP_DESCRIPTION,
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]{Display.APP_NAME}[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        "-c",
        help="Directory holding the context cache.",
        envvar="FOUNDRY_AGENTS_CONFIG_DIR",
    ),
) -> None:
    """
    Foundry Agents - manage Azure AI agents and assistants.

    Works against both the unified Foundry project endpoint (*.ai.azure.com)
    and the legacy agent and Azure OpenAI assistant endpoints. Set a context
    first with 'foundry-agents context set'.
    """
    setup_logging(verbose=verbose)

    if config_dir:
        settings = get_settings()
        settings.config_dir = config_dir


from foundry_agents.cli.commands import agent, context, file, thread  # noqa: E402

app.add_typer(context.app, name="context", help="Set, show and clear the active service context.")
app.add_typer(agent.app, name="agent", help="Create, inspect, update and delete agents.")
app.add_typer(thread.app, name="thread", help="Create, inspect and delete threads.")
app.add_typer(thread.message_app, name="message", help="Post and list thread messages.")
app.add_typer(thread.run_app, name="run", help="Start, poll and cancel runs.")
app.add_typer(file.app, name="file", help="Upload, list, download and delete files.")
app.add_typer(file.vector_store_app, name="vector-store", help="Create, list and delete vector stores.")


if __name__ == "__main__":
    app()
