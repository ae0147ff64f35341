"""CLI entrypoint for gh-upload-image."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from gh_upload_image._version import __version__
from gh_upload_image.assets import ALLOWED_EXTENSIONS, file_exists, get_file_size
from gh_upload_image.errors import GhUploadError
from gh_upload_image.markdown import render_markdown
from gh_upload_image.observability import get_logger
from gh_upload_image.uploader import upload
from gh_upload_image.utils.format import format_file_size

EPILOG = f"""\
Supported file types: {", ".join(ALLOWED_EXTENSIONS)}

Authentication uses the GitHub CLI; log in first with: gh auth login

Uploaded files are served from https://github.com/user-attachments/assets/<id>
and can be used in issues, pull requests, comments and Markdown files.
"""

app = typer.Typer(
    name="gh-upload-image",
    help="Upload images and other attachments to GitHub.",
    epilog=EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    rich_markup_mode=None,
)
console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)

USAGE = "Usage: gh-upload-image <file> -r <owner/repo>"
HELP_HINT = 'Run "gh-upload-image --help" for more information'


def _version_callback(value: bool) -> None:
    if value:
        console.print(__version__)
        raise typer.Exit()


def _usage_error(message: str) -> typer.Exit:
    err_console.print(f"Error: {message}", markup=False)
    err_console.print(USAGE, markup=False)
    err_console.print(HELP_HINT, markup=False)
    return typer.Exit(code=1)


@app.command()
def main(
    file: Annotated[
        Path | None,
        typer.Argument(help="Path to the file to upload", show_default=False),
    ] = None,
    repository: Annotated[
        str | None,
        typer.Option(
            "--repo", "-r", "--repository",
            metavar="OWNER/REPO",
            help='Repository in "owner/repo" format (required)',
            show_default=False,
        ),
    ] = None,
    markdown: Annotated[bool, typer.Option("--markdown", "-m", help="Output markdown format")] = False,
    alt: Annotated[
        str | None,
        typer.Option("--alt", "-a", metavar="TEXT", help="Alt text for markdown output"),
    ] = None,
    dry_mode: Annotated[
        bool,
        typer.Option("--dry", "-d", "--dry-mode", help="Dry run mode - show what would be done"),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version number",
        ),
    ] = False,
):
    """Upload a file to GitHub and print its permanent URL.

    Examples:

      gh-upload-image screenshot.png -r owner/repo

      gh-upload-image diagram.png -r owner/repo --markdown -a "Diagram"

      gh-upload-image image.gif -r owner/repo --dry
    """
    if file is None:
        raise _usage_error("File path is required")
    if not repository:
        raise _usage_error("Repository is required")

    file_path = str(file)
    try:
        if file_exists(file_path):
            size = format_file_size(get_file_size(file_path))
            prefix = "[DRY] " if dry_mode else ""
            if verbose:
                console.print(f"File: {file_path}", markup=False)
                console.print(f"Size: {size}", markup=False)
                console.print(f"Repository: {repository}", markup=False)
                console.print()
            console.print(f"{prefix}Uploading {size} to {repository}...", markup=False)

        logger = None
        if verbose:
            logger = get_logger(
                "gh_upload_image.cli",
                handler=RichHandler(console=err_console, show_path=False),
            )

        result = asyncio.run(
            upload(
                file_path,
                repository,
                verbose=verbose,
                dry_mode=dry_mode,
                logger=logger,
            )
        )
    except (GhUploadError, OSError) as exc:
        err_console.print()
        err_console.print(f"Error: {getattr(exc, 'message', exc)}", markup=False)
        if verbose:
            err_console.print()
            err_console.print("Stack trace:")
            err_console.print_exception()
        raise typer.Exit(code=1) from exc

    if result.dry_run:
        console.print("DRY MODE: Would upload file")
        console.print(f"  File: {result.file_name}", markup=False)
        console.print(f"  Size: {format_file_size(result.file_size)}", markup=False)
        console.print(f"  Repository: {result.repository}", markup=False)
        return

    console.print("[green]Upload successful![/green]")
    if markdown:
        console.print()
        console.print("Markdown:")
        console.print(render_markdown(result, alt), markup=False)
    else:
        console.print(f"URL: {result.url}", markup=False)

    if verbose:
        console.print()
        console.print("Details:")
        console.print(f"  Asset ID: {result.asset_id}", markup=False)
        console.print(f"  File name: {result.file_name}", markup=False)
        console.print(f"  File size: {format_file_size(result.file_size)}", markup=False)
        console.print(f"  MIME type: {result.mime_type}", markup=False)
        console.print(f"  Repository: {result.repository}", markup=False)


if __name__ == "__main__":
    app()
