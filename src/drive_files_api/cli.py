# cli.py
import asyncio
import logging
import re
from pathlib import Path
from typing import Optional, Sequence, Tuple
from urllib.parse import unquote

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from drive_files_api.client import FilesApiClient, FilesApiClientError
from drive_files_api.config.settings import get_settings
from drive_files_api.uploads.models import JobStatus, LocalFile
from drive_files_api.uploads.progress import UploadProgressView, format_file_size
from drive_files_api.utils.decorators import configure_logging

# Configure logging
logger = logging.getLogger(__name__)

console = Console()


def print_listing(entries) -> None:
    table = Table(show_edge=False)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Id", style="dim")
    for entry in entries:
        table.add_row(
            f"[bold blue]{entry.name}/[/bold blue]" if entry.is_folder else entry.name,
            "folder" if entry.is_folder else entry.mime_type,
            "" if entry.is_folder else format_file_size(entry.size),
            entry.modified_time or "",
            entry.id,
        )
    console.print(table)


def filter_listing(entries: Sequence, match: Optional[str]) -> list:
    """Keep entries whose name contains `match`, ignoring case."""
    if not match:
        return list(entries)
    needle = match.lower()
    return [entry for entry in entries if needle in entry.name.lower()]


def filename_from_disposition(disposition: Optional[str], fallback: str) -> str:
    if disposition:
        extended = re.search(r"filename\*=UTF-8''([^;]+)", disposition)
        if extended:
            return unquote(extended.group(1))
        match = re.search(r'filename="([^"]+)"', disposition)
        if match:
            return match.group(1)
    return fallback


@click.group()
@click.option("--api-url", envvar="API_BASE_URL", default=None, help="Base URL of the Drive Files API")
@click.option("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL setting)")
@click.pass_context
def cli(ctx, api_url: Optional[str], log_level: Optional[str]):
    """CLI commands for the Drive Files API server and client"""
    settings = get_settings()
    configure_logging((log_level or settings.log_level).upper())
    ctx.obj = {"api_url": api_url or settings.api_base_url, "settings": settings}


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  App Name: {settings.app_name}")
    print(f"  API Base URL: {settings.api_base_url}")
    print(f"  Drive Root Folder: {settings.google_drive_folder_id or '-'}")
    print(f"  Service Account: {settings.google_service_account_email or '-'}")
    print(f"  Private Key Configured: {bool(settings.google_private_key)}")
    print(f"  Blob Storage Configured: {settings.blob_configured}")
    print(f"  Blob Container: {settings.azure_container_name}")
    print(f"  Upload Chunk Size: {settings.upload_chunk_size}")


@cli.command()
@click.option("--host", default="0.0.0.0", help="API host address")
@click.option("--port", default=8000, type=int, help="API port")
def serve(host: str, port: int):
    """Start the API server"""
    import uvicorn
    from drive_files_api.main import create_app

    app = create_app(get_settings())
    uvicorn.run(app, host=host, port=port)


@cli.command(name="ls")
@click.option("--folder-id", default=None, help="Folder to list (defaults to the root folder)")
@click.option("--match", default=None, help="Only show entries whose name contains this text")
@click.pass_obj
def list_command(obj, folder_id: Optional[str], match: Optional[str]):
    """List a folder, folders first"""

    async def run():
        async with FilesApiClient(obj["api_url"]) as client:
            return await client.list_files(folder_id)

    try:
        entries = asyncio.run(run())
    except FilesApiClientError as e:
        raise click.ClickException(e.error)
    if not entries:
        console.print("[dim]This folder is empty[/dim]")
        return
    matching = filter_listing(entries, match)
    if not matching:
        console.print(f"[dim]No entries match {escape(repr(match))}[/dim]")
        return
    print_listing(matching)


@cli.command()
@click.argument("name")
@click.option("--parent-id", default=None, help="Parent folder id")
@click.pass_obj
def mkdir(obj, name: str, parent_id: Optional[str]):
    """Create a folder"""
    if not name.strip():
        raise click.BadParameter("Folder name is required", param_hint="NAME")

    async def run():
        async with FilesApiClient(obj["api_url"]) as client:
            return await client.create_folder(name, parent_id)

    try:
        folder = asyncio.run(run())
    except FilesApiClientError as e:
        raise click.ClickException(e.error)
    console.print(f"[green]Created folder[/green] {folder.name} ({folder.id})")


@cli.command()
@click.argument("file_id")
@click.confirmation_option(prompt="Delete this file?")
@click.pass_obj
def rm(obj, file_id: str):
    """Delete a file or folder by id"""

    async def run():
        async with FilesApiClient(obj["api_url"]) as client:
            await client.delete_file(file_id)

    try:
        asyncio.run(run())
    except FilesApiClientError as e:
        raise click.ClickException(e.error)
    console.print(f"[green]Deleted[/green] {file_id}")


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--parent-id", default=None, help="Destination folder id")
@click.pass_obj
def upload(obj, paths: Tuple[Path, ...], parent_id: Optional[str]):
    """Upload files, three at a time, with live progress"""
    settings = obj["settings"]
    files = [LocalFile.from_path(path) for path in paths]

    async def run():
        async with FilesApiClient(obj["api_url"], upload_chunk_size=settings.upload_chunk_size) as client:
            orchestrator = client.orchestrator()
            with UploadProgressView(orchestrator.table, console=console):
                table = await orchestrator.submit(files, parent_id)
            return table, client.last_listing

    table, listing = asyncio.run(run())
    if listing:
        print_listing(listing)

    failed = [job for job in table.snapshot() if job.status == JobStatus.FAILED]
    if failed:
        raise click.ClickException(f"{len(failed)} of {len(table)} uploads failed")


@cli.command()
@click.argument("file_names", nargs=-1, required=True)
@click.option("--folder-name", default=None, help="Archive name for multi-file downloads")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Where to write the download")
@click.pass_obj
def download(obj, file_names: Tuple[str, ...], folder_name: Optional[str], output: Optional[Path]):
    """Download one blob as-is, or several as a zip"""
    single_file = len(file_names) == 1

    async def run():
        async with FilesApiClient(obj["api_url"]) as client:
            return await client.download(file_names, folder_name=folder_name, single_file=single_file)

    try:
        content, disposition = asyncio.run(run())
    except FilesApiClientError as e:
        raise click.ClickException(e.error)

    fallback = file_names[0].split("/")[-1] if single_file else f"{folder_name or 'files'}.zip"
    target = output or Path(filename_from_disposition(disposition, fallback))
    target.write_bytes(content)
    console.print(f"[green]Saved[/green] {target} ({format_file_size(len(content)) or '0 Bytes'})")


if __name__ == "__main__":
    cli()
