"""Config command for configuration management."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pdfmerge.config import get_settings
from pdfmerge.config.constants import DEFAULT_CONFIG_FILE
from pdfmerge.config.settings import config_locations

config_app = typer.Typer(help="Configuration management.")
console = Console()


DEFAULT_CONFIG_TEMPLATE = """# PDFMerge Configuration

log_level: "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
log_dir: ".logs"

page:
  paper_size: "A4"  # A0, A1, A2, A3, A4
  landscape: false

annotations:  # Image pages only
  print_details: false  # Filename, capture time, GPS
  print_page_numbers: false  # "Image N" in the bottom-right corner
  print_hash: false  # SHA-256 of the original file

watermark:
  enabled: false
  text: "PDFMerge"
  color: "#000000"
  opacity: 0.5  # 0-1

batch:
  batch_size: 5  # Files per chunk
  chunk_pause: 0.5  # Seconds to yield between chunks
  timeout: 60  # Seconds before the whole run is abandoned

image:
  dpi: 300  # Resampling resolution
  jpeg_quality: 90  # 1-100

# fonts:  # TrueType/OpenType files; unset faces use built-in Helvetica
#   regular: "fonts/Roboto-Regular.ttf"
#   bold: "fonts/Roboto-Bold.ttf"
#   black: "fonts/Roboto-Black.ttf"

output:
  default_dir: "output"
  on_conflict: "rename"  # skip, overwrite, rename
  link_ttl: 60  # Seconds a delivered artifact stays valid
"""


@config_app.command("init")
def init(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Path to create config file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing config file.",
        ),
    ] = False,
) -> None:
    """Initialize a configuration file."""
    config_path = path or Path.cwd() / DEFAULT_CONFIG_FILE

    if config_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists at {config_path}")
        console.print("Use --force to overwrite.")
        raise typer.Exit(1)

    config_path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    console.print(f"[green]Created config file at:[/green] {config_path}")


@config_app.command("show")
def show() -> None:
    """Show the effective configuration."""
    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Directory", settings.log_dir)

    table.add_row("Paper Size", settings.page.paper_size)
    table.add_row("Landscape", str(settings.page.landscape))

    table.add_row("Print Details", str(settings.annotations.print_details))
    table.add_row("Print Page Numbers", str(settings.annotations.print_page_numbers))
    table.add_row("Print Hash", str(settings.annotations.print_hash))

    table.add_row("Watermark", str(settings.watermark.enabled))
    table.add_row("Watermark Text", settings.watermark.text)
    table.add_row("Watermark Color", settings.watermark.color)
    table.add_row("Watermark Opacity", str(settings.watermark.opacity))

    table.add_row("Batch Size", str(settings.batch.batch_size))
    table.add_row("Chunk Pause", f"{settings.batch.chunk_pause}s")
    table.add_row("Timeout", f"{settings.batch.timeout}s")

    table.add_row("Image DPI", str(settings.image.dpi))
    table.add_row("JPEG Quality", str(settings.image.jpeg_quality))

    for role in ("regular", "bold", "black"):
        table.add_row(f"Font ({role})", getattr(settings.fonts, role) or "built-in")

    table.add_row("Output Directory", settings.output.default_dir)
    table.add_row("On Conflict", settings.output.on_conflict)
    table.add_row("Link TTL", f"{settings.output.link_ttl}s")

    console.print(table)
    console.print()


@config_app.command("locations")
def locations() -> None:
    """Show configuration file search locations."""
    console.print("\n[bold blue]Configuration File Locations[/bold blue]\n")
    console.print("PDFMerge reads these configuration files, highest priority first:\n")

    for i, loc in enumerate(config_locations(), 1):
        exists = "[green]exists[/green]" if loc.exists() else "[dim]not found[/dim]"
        console.print(f"  {i}. {loc} ({exists})")

    console.print()
    console.print("[dim]Environment variables with PDFMERGE_ prefix are also supported.[/dim]")
    console.print()
