"""Commands for uploading and managing files."""

from pathlib import Path
from typing import List, Optional

import typer

from foundry_agents.cli import common
from foundry_agents.core.constants import Display, FilePurpose
from foundry_agents.services.file_ops import FileService

app = typer.Typer(help="Upload, list, download and delete files.")
console = common.console

FILE_COLUMNS = [
    ("ID", lambda f: f.id),
    ("Filename", lambda f: f.filename),
    ("Bytes", lambda f: f.bytes),
    ("Purpose", lambda f: f.purpose),
    ("Status", lambda f: f.status),
]


@app.command("upload")
@common.handle_errors
def upload_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file to upload."),
    purpose: FilePurpose = typer.Option(FilePurpose.ASSISTANTS, "--purpose", "-p", help="File purpose."),
) -> None:
    """Upload a file."""
    with common.build_client() as client:
        uploaded = FileService(client).upload(path, purpose)
    console.print(f"{Display.SUCCESS} Uploaded {path.name} as [cyan]{uploaded.id}[/cyan]")


@app.command("list")
@common.handle_errors
def list_command(
    purpose: Optional[FilePurpose] = typer.Option(None, "--purpose", "-p", help="Only files with this purpose."),
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """List uploaded files."""
    with common.build_client() as client:
        files = FileService(client).list(purpose)
    if not files and output == "table":
        console.print(f"{Display.INFO} No files found.")
        return
    common.render(files, output, columns=FILE_COLUMNS, title="Files")


@app.command("download")
@common.handle_errors
def download_command(
    file_id: str = typer.Argument(..., help="File ID."),
    output_path: Path = typer.Option(..., "--output-file", "-o", dir_okay=False, help="Where to write the content."),
) -> None:
    """Download a file's content."""
    with common.build_client() as client:
        written = FileService(client).download(file_id, output_path)
    console.print(f"{Display.SUCCESS} Saved [cyan]{file_id}[/cyan] to {written}")


@app.command("delete")
@common.handle_errors
def delete_command(file_id: str = typer.Argument(..., help="File ID.")) -> None:
    """Delete a file."""
    with common.build_client() as client:
        FileService(client).delete(file_id)
    console.print(f"{Display.SUCCESS} Deleted file [cyan]{file_id}[/cyan]")


vector_store_app = typer.Typer(help="Create, list and delete vector stores for file search.")

VECTOR_STORE_COLUMNS = [
    ("ID", lambda s: s.id),
    ("Name", lambda s: s.name),
    ("Status", lambda s: s.status),
    ("Files", lambda s: (s.file_counts or {}).get("total")),
]


@vector_store_app.command("create")
@common.handle_errors
def vector_store_create_command(
    name: str = typer.Argument(..., help="Vector store name."),
    file_ids: Optional[List[str]] = typer.Option(None, "--file-id", "-f", help="Uploaded file to index (repeatable)."),
) -> None:
    """Create a vector store from uploaded files."""
    with common.build_client() as client:
        store = FileService(client).create_vector_store(name, file_ids or None)
    console.print(f"{Display.SUCCESS} Created vector store [cyan]{store.id}[/cyan] ({name})")


@vector_store_app.command("list")
@common.handle_errors
def vector_store_list_command(
    output: str = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml."),
) -> None:
    """List vector stores."""
    with common.build_client() as client:
        stores = FileService(client).list_vector_stores()
    if not stores and output == "table":
        console.print(f"{Display.INFO} No vector stores found.")
        return
    common.render(stores, output, columns=VECTOR_STORE_COLUMNS, title="Vector stores")


@vector_store_app.command("delete")
@common.handle_errors
def vector_store_delete_command(vector_store_id: str = typer.Argument(..., help="Vector store ID.")) -> None:
    """Delete a vector store. Its files are kept."""
    with common.build_client() as client:
        FileService(client).delete_vector_store(vector_store_id)
    console.print(f"{Display.SUCCESS} Deleted vector store [cyan]{vector_store_id}[/cyan]")
