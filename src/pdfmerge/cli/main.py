"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from pdfmerge import __version__
from pdfmerge.cli.commands.config import config_app
from pdfmerge.cli.commands.merge import merge

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="pdfmerge",
    help="Merge images and PDFs into a single, optionally annotated PDF.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

app.command(name="merge", help="Merge images and PDFs into one PDF.")(merge)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]PDFMerge[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """PDFMerge - combine images and PDFs into one document.

    Images are resampled onto paper-sized pages and can carry capture
    details, GPS coordinates, a SHA-256 fingerprint and page numbers.
    PDF inputs are copied through unchanged.
    """
    pass


if __name__ == "__main__":
    app()
