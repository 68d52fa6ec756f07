"""
Top-level srrclient CLI: version, search, download and upload commands.
"""

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import click
import typer
from rich.console import Console
from rich.markup import escape

from srrclient import BUILD_COMMIT, BUILD_DATE, __version__
from srrclient.api.client import SrrdbClient
from srrclient.core.config import get_settings
from srrclient.core.errors import AuthenticationError, SrrClientError
from srrclient.core.settings import LICENSE_LINE, PROJECT_NAME, PROJECT_URL
from srrclient.services.download_service import DownloadOptions, DownloadOutcome, download_dirnames
from srrclient.services.upload_service import (
    StoredFileUpload,
    UploadOptions,
    upload_srrs,
    upload_stored_files,
)

logger = logging.getLogger(__name__)

main_app = typer.Typer(help="Search, download and upload SRR files on srrdb.com.", no_args_is_help=True)
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def _print_version() -> None:
    typer.echo(PROJECT_NAME)
    typer.echo(PROJECT_URL)
    typer.echo(f"Version: {__version__}")
    typer.echo(f"Commit: {BUILD_COMMIT}")
    typer.echo(f"Build date: {BUILD_DATE}")
    typer.echo()
    typer.echo(LICENSE_LINE)


def _version_callback(value: bool):
    if value:
        _print_version()
        raise typer.Exit()


def printable(text) -> str:
    """Replace undecodable bytes carried as surrogates so the text can be printed."""
    return str(text).encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(printable(message))}")
    raise typer.Exit(code=1)


@main_app.callback()
def main_callback(
    version: bool = typer.Option(False, "--version", "-v", callback=_version_callback, is_eager=True,
                                 help="Show the version and a few informations."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s - %(message)s"
    )


@main_app.command("version")
def version_cmd():
    """Show the version and a few informations."""
    _print_version()


@main_app.command("search")
def search_cmd(query: List[str] = typer.Argument(..., help="Search terms and srrdb.com keywords")):
    """
    Search srrdb.com for releases.
    For a list of available keywords see https://www.srrdb.com/help#keywords
    """
    client = SrrdbClient(get_settings())
    try:
        response = client.search(" ".join(query))
    except SrrClientError as e:
        _fail(f"Failed to search for query: {e}")

    if response.empty:
        typer.echo("Nothing found!")
        raise typer.Exit(code=1)

    for result in sorted(response.results, key=lambda r: r.date):
        line = f"[{result.date}] {result.dirname}"
        if result.nfo:
            line += " [NFO]"
        if result.srs:
            line += " [SRS]"
        typer.echo(line)


@main_app.command("download")
def download_cmd(
    dirnames: Optional[List[str]] = typer.Argument(None, help="Release dirnames"),
    extension: str = typer.Option("", "--extension", "-e",
                                  help="Save only stored files with this extension from the SRR file."),
    stdout: bool = typer.Option(False, "--stdout", "-o",
                                help="Print file data to stdout instead of saving the file."),
    prune_paths: bool = typer.Option(False, "--prune-paths", "--prunePaths",
                                     help="Save stored files by base name only."),
    legacy_marker: Optional[bool] = typer.Option(None, "--legacy-marker/--strict-marker",
                                                 help="Match stored file blocks on two marker bytes like older clients."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Directory to save files in."),
):
    """Download one or multiple SRR files from srrdb.com."""
    if not dirnames:
        _fail("You must provide at least one dirname.")

    settings = get_settings()
    options = DownloadOptions(
        extension=extension,
        to_stdout=stdout,
        prune_paths=prune_paths,
        lenient_marker=settings.legacy_marker_check if legacy_marker is None else legacy_marker,
        base_dir=output_dir,
    )
    status = err_console if stdout else console

    def report(outcome: DownloadOutcome) -> None:
        if outcome.error is not None:
            err_console.print(
                f"[yellow]{escape(printable(outcome.dirname))}:[/yellow] {escape(printable(outcome.error))}"
            )
            return
        for path in outcome.saved:
            status.print(f"Saved file to {escape(printable(path))}.")

    outcomes = download_dirnames(
        SrrdbClient(settings), dirnames, options,
        stream=click.get_binary_stream("stdout") if stdout else None,
        report=report,
    )
    failed = sum(1 for outcome in outcomes if not outcome.ok)
    if failed:
        logger.info("%d of %d dirname(s) failed", failed, len(outcomes))


@main_app.command("upload")
def upload_cmd(
    files: Optional[List[str]] = typer.Argument(None, help="Files to upload"),
    username: Optional[str] = typer.Option(None, "--username", "-n", help="Post files using this account."),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Password of the account."),
    release: Optional[str] = typer.Option(None, "--release", "-r",
                                          help="Post stored files to this release. Needs a valid login."),
    folder: str = typer.Option("", "--folder", "-f", help="Folder of the stored file, used with --release."),
):
    """Upload one or multiple files to srrdb.com."""
    if not files:
        _fail("You must provide at least one file to upload.")

    settings = get_settings()
    username, password = settings.credentials(username, password)
    options = UploadOptions(username=username, password=password, release=release, folder=folder)
    client = SrrdbClient(settings)

    if not release:
        try:
            lines = upload_srrs(client, files, options)
        except OSError as e:
            _fail(f"Failed to read file: {e}")
        except AuthenticationError as e:
            _fail(str(e))
        except SrrClientError as e:
            _fail(f"Failed to upload SRR files: {e}")
        for line in lines:
            typer.echo(printable(line))
        return

    def report(result: StoredFileUpload) -> None:
        typer.echo(printable(result.display()))

    try:
        upload_stored_files(client, files, options, report=report)
    except AuthenticationError as e:
        _fail(str(e))


def main():
    main_app(prog_name="srrclient")


if __name__ == "__main__":
    main()
