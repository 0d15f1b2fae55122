"""Merge command: assemble images and PDFs into one document."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from pdfmerge.config import OptionToggles, PDFMergeSettings, get_settings
from pdfmerge.config.constants import PAPER_DIMENSIONS_MM
from pdfmerge.config.settings import WatermarkConfig
from pdfmerge.core.file_set import OrderedFileSet, PendingFile
from pdfmerge.core.pipeline import BatchPipeline
from pdfmerge.core.state import RunResult
from pdfmerge.exceptions import AdmissionError, ConfigurationError
from pdfmerge.services.notifier import ConsoleNotifier, RichProgressReporter
from pdfmerge.services.output_manager import OutputManager
from pdfmerge.utils.logging import get_console, get_logger, setup_task_logging

console = get_console()
log = get_logger(__name__)


def parse_move(value: str) -> tuple[int, int]:
    """Parse a 1-based ``FROM:TO`` move into 0-based indices."""
    try:
        source, target = value.split(":", 1)
        from_index, to_index = int(source) - 1, int(target) - 1
    except ValueError as e:
        raise ConfigurationError(f"Invalid move '{value}', expected FROM:TO") from e
    return from_index, to_index


def build_file_set(paths: list[Path], moves: list[tuple[int, int]]) -> OrderedFileSet:
    """Admit ``paths`` in order, report rejections, then apply list moves."""
    file_set = OrderedFileSet()
    for path in paths:
        try:
            file_set.add(PendingFile.from_path(path))
        except AdmissionError as e:
            console.print(f"[yellow]Skipped[/yellow] {e}")
    for from_index, to_index in moves:
        file_set.reorder(from_index, to_index)
    return file_set


def build_toggles(
    settings: PDFMergeSettings,
    landscape: bool | None,
    paper: str | None,
    details: bool | None,
    page_numbers: bool | None,
    print_hash: bool | None,
    watermark: str | None,
    watermark_color: str | None,
    watermark_opacity: float | None,
) -> OptionToggles:
    """Start from configured defaults and apply command-line overrides."""
    toggles = OptionToggles.from_settings(settings)
    if landscape is not None:
        toggles.landscape = landscape
    if paper is not None:
        if paper.upper() not in PAPER_DIMENSIONS_MM:
            raise ConfigurationError(
                f"Invalid paper size '{paper}'. Options: {', '.join(PAPER_DIMENSIONS_MM)}"
            )
        toggles.paper_size = paper.upper()
    if details is not None:
        toggles.print_details = details
    if page_numbers is not None:
        toggles.print_page_numbers = page_numbers
    if print_hash is not None:
        toggles.print_hash = print_hash
    if watermark is not None:
        toggles.add_watermark = True
        toggles.watermark_text = watermark

    if watermark_color is not None or watermark_opacity is not None:
        try:
            checked = WatermarkConfig(
                color=watermark_color or toggles.watermark_color,
                opacity=toggles.watermark_opacity if watermark_opacity is None else watermark_opacity,
            )
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
        toggles.watermark_color = checked.color
        toggles.watermark_opacity = checked.opacity
    return toggles


def merge(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Images (jpg, jpeg, png, gif, webp) and PDFs, in output order.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory for the merged PDF.",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    landscape: Annotated[
        bool | None,
        typer.Option("--landscape/--portrait", help="Page orientation for image pages."),
    ] = None,
    paper: Annotated[
        str | None,
        typer.Option("--paper", help="Paper size for image pages (A0-A4)."),
    ] = None,
    details: Annotated[
        bool | None,
        typer.Option("--details/--no-details", help="Print filename, capture time and GPS."),
    ] = None,
    page_numbers: Annotated[
        bool | None,
        typer.Option("--page-numbers/--no-page-numbers", help="Stamp 'Image N' on image pages."),
    ] = None,
    print_hash: Annotated[
        bool | None,
        typer.Option("--hash/--no-hash", help="Print the SHA-256 of each image file."),
    ] = None,
    watermark: Annotated[
        str | None,
        typer.Option("--watermark", "-w", help="Add a diagonal watermark with this text."),
    ] = None,
    watermark_color: Annotated[
        str | None,
        typer.Option("--watermark-color", help="Watermark colour as #RRGGBB."),
    ] = None,
    watermark_opacity: Annotated[
        float | None,
        typer.Option("--watermark-opacity", help="Watermark opacity between 0 and 1."),
    ] = None,
    move: Annotated[
        list[str] | None,
        typer.Option("--move", "-m", help="Move entry FROM to position TO (1-based), repeatable."),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Abort the run after this many seconds."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Merge images and PDFs into a single PDF.

    Examples:
        pdfmerge merge scan1.jpg scan2.png report.pdf
        pdfmerge merge *.jpg --details --hash --page-numbers
        pdfmerge merge a.jpg b.jpg c.pdf --move 3:1 -w CONFIDENTIAL
    """
    settings = get_settings()

    task_id, log_path = setup_task_logging(
        log_dir=settings.log_dir,
        prefix="merge",
        verbose=verbose,
    )
    if verbose:
        log.info("Logs will be saved to", log_file=str(log_path))
    log.info("Task Configuration", task_id=task_id, config=settings.model_dump())

    try:
        moves = [parse_move(value) for value in move or []]
        toggles = build_toggles(
            settings,
            landscape=landscape,
            paper=paper,
            details=details,
            page_numbers=page_numbers,
            print_hash=print_hash,
            watermark=watermark,
            watermark_color=watermark_color,
            watermark_opacity=watermark_opacity,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if timeout is not None:
        settings = settings.model_copy(deep=True)
        settings.batch.timeout = timeout

    file_set = build_file_set(files, moves)
    options = toggles.snapshot()
    if options.annotates_images and not file_set.has_images():
        console.print("[yellow]Image annotation options have no effect without image files.[/yellow]")

    for position, entry in enumerate(file_set.entries(), start=1):
        console.print(f"  {position}. {entry}")

    output_dir = output or settings.get_output_dir()
    sink = OutputManager(
        output_dir=output_dir,
        on_conflict=settings.output.on_conflict,
        link_ttl=settings.output.link_ttl,
    )

    try:
        result = _run_with_progress(settings, file_set, options, toggles, sink)
    except KeyboardInterrupt:
        log.warning("Task Interrupted by KeyboardInterrupt")
        console.print("\n[yellow]Interrupted. Exiting...[/yellow]")
        raise typer.Exit(130) from None

    if not result.success:
        raise typer.Exit(1)

    if result.skipped_files:
        console.print(f"[yellow]Skipped:[/yellow] {', '.join(result.skipped_files)}")
    if result.artifact is not None:
        console.print(f"[green]Saved:[/green] {result.artifact.label}")
        if result.artifact.path is not None:
            console.print(f"  {result.artifact.path}")


def _run_with_progress(settings, file_set, options, toggles, sink) -> RunResult:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Merging", total=file_set.size())
        pipeline = BatchPipeline(
            settings,
            notifier=ConsoleNotifier(console),
            sink=sink,
            progress=RichProgressReporter(progress, task_id),
            toggles=toggles,
        )
        return asyncio.run(pipeline.start(file_set, options))
