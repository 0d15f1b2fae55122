"""Batch conversion pipeline.

Drives one conversion run end to end:
1. Snapshot the ordered file set and load fonts
2. Process files in fixed-size chunks, strictly in list order
3. Report progress and yield between chunks
4. Watermark every page when requested
5. Serialize and hand the bytes to the artifact sink

The whole run is bounded by a deadline. A timeout or a fatal error
discards the document; no partial output is ever delivered.
"""

import asyncio
import functools
from collections.abc import Callable, Sequence

import anyio
import fitz

from pdfmerge.compose.composer import PageComposer
from pdfmerge.compose.fonts import FontSet, load_fonts
from pdfmerge.config.constants import (
    MSG_COMPLETE,
    MSG_EMPTY_SELECTION,
    MSG_FAILED,
    MSG_TIMEOUT,
)
from pdfmerge.config.settings import ConversionOptions, OptionToggles, PDFMergeSettings
from pdfmerge.core.file_set import OrderedFileSet, PendingFile
from pdfmerge.core.page_spec import PageSpec
from pdfmerge.core.state import ConversionRun, RunResult, RunStatus
from pdfmerge.exceptions import (
    EmptyDocumentError,
    FileProcessingError,
    RunInProgressError,
    SerializationError,
)
from pdfmerge.image.metadata import MetadataExtractor
from pdfmerge.image.normalizer import ImageNormalizer
from pdfmerge.services.notifier import NullProgress, RecordingNotifier
from pdfmerge.services.output_manager import OutputManager
from pdfmerge.services.protocols import ArtifactSink, Notifier, ProgressReporter
from pdfmerge.utils.formatting import output_filename
from pdfmerge.utils.logging import generate_run_id, get_logger, request_context

log = get_logger(__name__)


def chunk_files(files: Sequence[PendingFile], size: int) -> list[tuple[PendingFile, ...]]:
    """Split ``files`` into consecutive groups of at most ``size``."""
    if size < 1:
        raise ValueError("Chunk size must be at least 1")
    return [tuple(files[i : i + size]) for i in range(0, len(files), size)]


class BatchPipeline:
    """Conversion pipeline orchestrator.

    Only one run may be active at a time. Collaborators (notifier,
    artifact sink, progress reporter, option toggles) are injected so the
    pipeline holds no presentation state of its own.
    """

    def __init__(
        self,
        settings: PDFMergeSettings,
        notifier: Notifier | None = None,
        sink: ArtifactSink | None = None,
        progress: ProgressReporter | None = None,
        toggles: OptionToggles | None = None,
        # Dependency injection (optional, for testing)
        normalizer: ImageNormalizer | None = None,
        extractor: MetadataExtractor | None = None,
        font_loader: Callable[[], FontSet] | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Application settings (batch size, pause, timeout, fonts)
            notifier: Receives the run's user-facing messages
            sink: Receives the finished bytes
            progress: Progress indicator updated after each chunk
            toggles: Option panel whose watermark switch is cleared at teardown
            normalizer: Optional ImageNormalizer instance
            extractor: Optional MetadataExtractor instance
            font_loader: Optional callable returning the run's fonts
        """
        self.settings = settings
        self.batch_size = settings.batch.batch_size
        self.chunk_pause = settings.batch.chunk_pause
        self.timeout = settings.batch.timeout

        self.notifier = notifier or RecordingNotifier()
        self.sink = sink or OutputManager(
            output_dir=settings.get_output_dir(),
            on_conflict=settings.output.on_conflict,
            link_ttl=settings.output.link_ttl,
        )
        self.progress = progress or NullProgress()
        self.toggles = toggles

        self._normalizer = normalizer or ImageNormalizer(
            dpi=settings.image.dpi,
            jpeg_quality=settings.image.jpeg_quality,
        )
        self._extractor = extractor or MetadataExtractor()
        self._font_loader = font_loader or functools.partial(
            load_fonts,
            regular=settings.fonts.regular,
            bold=settings.fonts.bold,
            black=settings.fonts.black,
        )

        self.status = RunStatus.IDLE
        self._run: ConversionRun | None = None

    @property
    def is_running(self) -> bool:
        return self._run is not None

    @property
    def current_run(self) -> ConversionRun | None:
        return self._run

    async def start(self, file_set: OrderedFileSet, options: ConversionOptions) -> RunResult:
        """Run a conversion over the current contents of ``file_set``.

        Returns:
            RunResult with the terminal status; IDLE when the set is empty

        Raises:
            RunInProgressError: If another run is active on this pipeline
        """
        if self._run is not None:
            raise RunInProgressError()

        if file_set.size() == 0:
            log.warning("Conversion requested with no files")
            self.notifier.notify(MSG_EMPTY_SELECTION, "warning")
            return RunResult(status=RunStatus.IDLE, message=MSG_EMPTY_SELECTION)

        files = file_set.snapshot()
        run = ConversionRun(run_id=generate_run_id(), total_files=len(files))
        self._run = run
        self.status = RunStatus.RUNNING

        with request_context(run_id=run.run_id):
            log.info(
                "Conversion started",
                files=len(files),
                chunk_size=self.batch_size,
                timeout=self.timeout,
                watermark=options.watermark is not None,
            )
            try:
                data, page_count = await asyncio.wait_for(
                    self._convert(files, options, run),
                    timeout=self.timeout,
                )
            except TimeoutError:
                result = self._timed_out(run)
            except Exception as e:
                result = self._failed(run, e)
            else:
                # Not bounded by the deadline; sink errors end the run as FAILED
                result = self._deliver(run, data, page_count)
            finally:
                self.status = run.status
                self._teardown()

        return result

    def _deliver(self, run: ConversionRun, data: bytes, page_count: int) -> RunResult:
        try:
            artifact = self.sink.deliver(data, output_filename())
        except Exception as e:
            return self._failed(run, e)

        run.status = RunStatus.COMPLETED
        log.info(
            "Conversion completed",
            pages=page_count,
            skipped=len(run.skipped_files),
            output=artifact.filename,
        )
        self.notifier.notify(MSG_COMPLETE, "success")
        return RunResult(
            status=RunStatus.COMPLETED,
            message=MSG_COMPLETE,
            artifact=artifact,
            page_count=page_count,
            processed_files=run.processed_files,
            skipped_files=list(run.skipped_files),
        )

    def _timed_out(self, run: ConversionRun) -> RunResult:
        run.cancel()
        run.status = RunStatus.TIMED_OUT
        log.error(
            "Conversion timed out",
            timeout=self.timeout,
            processed=run.processed_files,
            total=run.total_files,
        )
        self.notifier.notify(MSG_TIMEOUT, "danger")
        return RunResult(
            status=RunStatus.TIMED_OUT,
            message=MSG_TIMEOUT,
            processed_files=run.processed_files,
            skipped_files=list(run.skipped_files),
        )

    def _failed(self, run: ConversionRun, error: Exception) -> RunResult:
        run.status = RunStatus.FAILED
        log.exception("Conversion failed", error=str(error))
        message = MSG_FAILED.format(error=error)
        self.notifier.notify(message, "danger")
        return RunResult(
            status=RunStatus.FAILED,
            message=message,
            processed_files=run.processed_files,
            skipped_files=list(run.skipped_files),
            error=str(error),
        )

    def _teardown(self) -> None:
        """Reset per-run state on every exit path."""
        self._run = None
        self.progress.reset()
        if self.toggles is not None:
            self.toggles.clear_watermark()
        self.status = RunStatus.IDLE

    async def _convert(
        self,
        files: Sequence[PendingFile],
        options: ConversionOptions,
        run: ConversionRun,
    ) -> tuple[bytes, int]:
        fonts = self._font_loader()
        composer = PageComposer(fonts)
        page_spec = PageSpec.from_paper(options.paper_size, options.landscape)

        doc = fitz.open()
        try:
            for chunk in chunk_files(files, self.batch_size):
                for file in chunk:
                    await self._process_file(doc, composer, file, page_spec, options, run)

                progress = run.advance(len(chunk))
                self.progress.update(progress)
                log.info(
                    "Chunk processed",
                    processed=progress.processed,
                    total=progress.total,
                    percent=round(progress.percent, 1),
                )
                # Let the host refresh between chunks of heavy image work
                await asyncio.sleep(self.chunk_pause)

            if doc.page_count == 0:
                raise EmptyDocumentError(len(run.skipped_files))

            if options.watermark is not None:
                marked = composer.apply_watermark(doc, options.watermark)
                log.debug("Watermark applied", pages=marked)

            page_count = doc.page_count
            data = self._serialize(doc)
        finally:
            doc.close()

        return data, page_count

    async def _process_file(
        self,
        doc: fitz.Document,
        composer: PageComposer,
        file: PendingFile,
        page_spec: PageSpec,
        options: ConversionOptions,
        run: ConversionRun,
    ) -> None:
        """Add the pages for one file; per-file failures skip the file."""
        with request_context(file_path=file.name):
            if not file.is_supported:
                log.error("Unsupported file type", extension=file.extension)
                run.skipped_files.append(file.name)
                return

            try:
                if file.is_pdf:
                    composer.append_pdf(doc, file)
                else:
                    await self._process_image(doc, composer, file, page_spec, options, run)
            except FileProcessingError as e:
                log.warning("File skipped", error=str(e))
                run.skipped_files.append(file.name)

    async def _process_image(
        self,
        doc: fitz.Document,
        composer: PageComposer,
        file: PendingFile,
        page_spec: PageSpec,
        options: ConversionOptions,
        run: ConversionRun,
    ) -> None:
        image = await anyio.to_thread.run_sync(self._normalizer.resample, file, page_spec)

        details = None
        if options.print_details or options.print_hash:
            details = await anyio.to_thread.run_sync(
                functools.partial(
                    self._extractor.extract,
                    file,
                    include_exif=options.print_details,
                    include_hash=options.print_hash,
                )
            )

        page_number = run.next_page_number() if options.print_page_numbers else None
        composer.compose_image_page(doc, file, image, page_spec, options, details, page_number)

    @staticmethod
    def _serialize(doc: fitz.Document) -> bytes:
        try:
            return doc.tobytes(garbage=3, deflate=True)
        except Exception as e:
            raise SerializationError(f"Failed to serialize PDF: {e}") from e
