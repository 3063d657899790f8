"""Commands for threads, messages and runs."""

from typing import List, Optional

import typer
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from foundry_agents.cli import common
from foundry_agents.core.config import get_settings
from foundry_agents.core.constants import Display
from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.conversation_ops import ConversationService, RunOutcome

app = typer.Typer(help="Create, inspect and delete threads.")
message_app = typer.Typer(help="Post and list thread messages.")
run_app = typer.Typer(help="Start, poll and cancel runs.")
console = common.console

MESSAGE_COLUMNS = [
    ("ID", lambda m: m.id),
    ("Role", lambda m: m.role),
    ("Text", lambda m: m.text),
]
RUN_COLUMNS = [
    ("ID", lambda r: r.id),
    ("Thread", lambda r: r.thread_id),
    ("Status", lambda r: r.status.value),
    ("Error", lambda r: r.error_message),
]


def _service(client: ApiClient) -> ConversationService:
    settings = get_settings()
    return ConversationService(
        client,
        poll_interval=settings.poll_interval,
        max_polls=settings.max_polls,
    )


def _print_outcome(outcome: RunOutcome, output: str) -> None:
    if output != "table":
        common.render(
            {
                "run": common.to_plain(outcome.run),
                "messages": common.to_plain(outcome.messages),
            },
            output,
        )
        return
    if outcome.run.required_action:
        console.print(
            f"{Display.WARNING} Run [cyan]{outcome.run.id}[/cyan] requires action; "
            "submit tool outputs to continue."
        )
        return
    console.print(Panel(outcome.response_text or "(no response)", title=f"Run {outcome.run.id}"))


# Threads


@app.command("create")
@common.handle_errors
def create_command(
    metadata: Optional[List[str]] = typer.Option(None, "--metadata", help="Metadata entry key=value. Repeatable."),
) -> None:
    """Create an empty thread."""
    with common.build_client() as client:
        thread = _service(client).create_thread(metadata=common.parse_key_values(metadata))
    console.print(f"{Display.SUCCESS} Created thread [cyan]{thread.id}[/cyan]")


@app.command("get")
@common.handle_errors
def get_command(
    thread_id: str = typer.Argument(..., help="Thread ID."),
    output: str = typer.Option("json", "--output", "-o", help="Output format: json, yaml."),
) -> None:
    """Show one thread."""
    with common.build_client() as client:
        thread = _service(client).get_thread(thread_id)
    common.render(thread, output)


@app.command("delete")
@common.handle_errors
def delete_command(thread_id: str = typer.Argument(..., help="Thread ID.")) -> None:
    """Delete a thread."""
    with common.build_client() as client:
        _service(client).delete_thread(thread_id)
    console.print(f"{Display.SUCCESS} Deleted thread [cyan]{thread_id}[/cyan]")


@app.command("ask")
@common.handle_errors
def ask_command(
    agent_id: str = typer.Argument(..., help="Agent ID."),
    content: str = typer.Argument(..., help="Question to ask."),
    thread_id: Optional[str] = typer.Option(
        None, "--thread", "-t", help="Continue an existing thread instead of starting a new one."
    ),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """Ask an agent a question and wait for the answer."""
    with common.build_client() as client:
        service = _service(client)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Waiting for the agent...", total=None)
            if thread_id:
                service.add_message(thread_id, content)
                outcome = service.run_sync(thread_id, agent_id)
            else:
                outcome = service.ask(agent_id, content)
    _print_outcome(outcome, output)


# Messages


@message_app.command("add")
@common.handle_errors
def message_add_command(
    thread_id: str = typer.Argument(..., help="Thread ID."),
    content: str = typer.Argument(..., help="Message text."),
    role: str = typer.Option("user", "--role", help="Message role: user or assistant."),
) -> None:
    """Post a message to a thread."""
    with common.build_client() as client:
        message = _service(client).add_message(thread_id, content, role=role)
    console.print(f"{Display.SUCCESS} Added message [cyan]{message.id}[/cyan]")


@message_app.command("list")
@common.handle_errors
def message_list_command(
    thread_id: str = typer.Argument(..., help="Thread ID."),
    run_id: Optional[str] = typer.Option(None, "--run", help="Only messages produced by this run."),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """List the messages on a thread, oldest first."""
    with common.build_client() as client:
        messages = _service(client).list_messages(thread_id, run_id=run_id)
    common.render(messages, output, columns=MESSAGE_COLUMNS, title=f"Messages in {thread_id}")


# Runs


@run_app.command("create")
@common.handle_errors
def run_create_command(
    thread_id: str = typer.Argument(..., help="Thread ID."),
    agent_id: str = typer.Argument(..., help="Agent ID."),
    instructions: Optional[str] = typer.Option(None, "--instructions", help="Override the agent's instructions."),
    wait: bool = typer.Option(False, "--wait", "-w", help="Wait for the run to finish."),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """Start a run on a thread."""
    with common.build_client() as client:
        service = _service(client)
        if wait:
            outcome = service.run_sync(thread_id, agent_id, instructions=instructions)
        else:
            run = service.create_run(thread_id, agent_id, instructions=instructions)
            console.print(f"{Display.SUCCESS} Started run [cyan]{run.id}[/cyan] ({run.status.value})")
            return
    _print_outcome(outcome, output)


@run_app.command("status")
@common.handle_errors
def run_status_command(
    thread_id: str = typer.Argument(..., help="Thread ID."),
    run_id: str = typer.Argument(..., help="Run ID."),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """Show the current status of a run."""
    with common.build_client() as client:
        run = _service(client).get_run(thread_id, run_id)
    common.render(run, output, columns=RUN_COLUMNS)


@run_app.command("wait")
@common.handle_errors
def run_wait_command(
    thread_id: str = typer.Argument(..., help="Thread ID."),
    run_id: str = typer.Argument(..., help="Run ID."),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """Wait for an existing run to finish."""
    with common.build_client() as client:
        service = _service(client)
        run = service.wait_for_run(service.get_run(thread_id, run_id))
    common.render(run, output, columns=RUN_COLUMNS)


@run_app.command("cancel")
@common.handle_errors
def run_cancel_command(
    thread_id: str = typer.Argument(..., help="Thread ID."),
    run_id: str = typer.Argument(..., help="Run ID."),
) -> None:
    """Cancel a run."""
    with common.build_client() as client:
        run = _service(client).cancel_run(thread_id, run_id)
    console.print(f"{Display.SUCCESS} Run [cyan]{run.id}[/cyan] is {run.status.value}")
