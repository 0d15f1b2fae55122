"""Tests for BatchPipeline orchestration with stubbed collaborators."""

from unittest.mock import MagicMock

import pytest

from pdfmerge.config.constants import MSG_EMPTY_SELECTION, MSG_FAILED, MSG_TIMEOUT
from pdfmerge.config.settings import ConversionOptions, OptionToggles, PDFMergeSettings
from pdfmerge.core.file_set import OrderedFileSet, PendingFile
from pdfmerge.core.pipeline import BatchPipeline, chunk_files
from pdfmerge.core.state import ConversionRun, RunStatus
from pdfmerge.exceptions import EmptyDocumentError, FontLoadError, RunInProgressError
from pdfmerge.image.normalizer import ImageNormalizer
from pdfmerge.services.notifier import RecordingNotifier


class TestChunkFiles:
    def test_splits_in_order(self):
        files = [PendingFile.from_bytes(f"{i}.jpg", b"x") for i in range(12)]

        chunks = chunk_files(files, 5)

        assert [len(c) for c in chunks] == [5, 5, 2]
        assert [f.name for c in chunks for f in c] == [f.name for f in files]

    def test_empty(self):
        assert chunk_files([], 5) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunk_files([PendingFile.from_bytes("a.jpg", b"x")], 0)


@pytest.fixture
def settings(temp_dir):
    return PDFMergeSettings(
        batch={"chunk_pause": 0},
        output={"default_dir": str(temp_dir / "output")},
    )


class TestBatchPipeline:
    """Tests for run lifecycle decisions."""

    def test_initial_state(self, settings):
        pipeline = BatchPipeline(settings)

        assert pipeline.status is RunStatus.IDLE
        assert not pipeline.is_running
        assert pipeline.current_run is None
        assert pipeline.batch_size == 5
        assert pipeline.timeout == 60.0

    @pytest.mark.asyncio
    async def test_empty_set_warns_and_stays_idle(self, settings):
        notifier = RecordingNotifier()
        sink = MagicMock()
        font_loader = MagicMock()
        pipeline = BatchPipeline(settings, notifier=notifier, sink=sink, font_loader=font_loader)

        result = await pipeline.start(OrderedFileSet(), ConversionOptions())

        assert result.status is RunStatus.IDLE
        assert result.message == MSG_EMPTY_SELECTION
        assert notifier.messages == [("warning", MSG_EMPTY_SELECTION)]
        sink.deliver.assert_not_called()
        font_loader.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_start_is_rejected(self, settings):
        pipeline = BatchPipeline(settings)
        pipeline._run = ConversionRun(run_id="busy0001", total_files=1)
        file_set = OrderedFileSet()
        file_set.try_add(PendingFile.from_bytes("a.jpg", b"x"))

        with pytest.raises(RunInProgressError):
            await pipeline.start(file_set, ConversionOptions())

        assert pipeline.current_run.run_id == "busy0001"

    @pytest.mark.asyncio
    async def test_font_failure_fails_the_run(self, settings):
        notifier = RecordingNotifier()
        sink = MagicMock()
        progress = MagicMock()
        toggles = OptionToggles(add_watermark=True)
        error = FontLoadError("Roboto-Black.ttf")
        pipeline = BatchPipeline(
            settings,
            notifier=notifier,
            sink=sink,
            progress=progress,
            toggles=toggles,
            font_loader=MagicMock(side_effect=error),
        )
        file_set = OrderedFileSet()
        file_set.try_add(PendingFile.from_bytes("a.jpg", b"x"))

        result = await pipeline.start(file_set, toggles.snapshot())

        assert result.status is RunStatus.FAILED
        assert result.artifact is None
        assert result.message == MSG_FAILED.format(error=error)
        assert notifier.last == ("danger", MSG_FAILED.format(error=error))
        sink.deliver.assert_not_called()
        progress.reset.assert_called_once()
        assert toggles.add_watermark is False
        assert pipeline.status is RunStatus.IDLE
        assert not pipeline.is_running

    @pytest.mark.asyncio
    async def test_sink_os_timeout_is_a_failure(self, settings, image_bytes):
        notifier = RecordingNotifier()
        sink = MagicMock()
        sink.deliver.side_effect = TimeoutError("write timed out")
        pipeline = BatchPipeline(
            settings, notifier=notifier, sink=sink, normalizer=ImageNormalizer(dpi=20)
        )
        file_set = OrderedFileSet()
        file_set.try_add(PendingFile.from_bytes("a.jpg", image_bytes()))

        result = await pipeline.start(file_set, ConversionOptions())

        assert result.status is RunStatus.FAILED
        assert result.message != MSG_TIMEOUT
        assert result.error == "write timed out"
        assert notifier.messages == [("danger", MSG_FAILED.format(error="write timed out"))]
        assert not pipeline.is_running

    @pytest.mark.asyncio
    async def test_all_files_skipped_gives_empty_document_error(self, settings):
        notifier = RecordingNotifier()
        sink = MagicMock()
        pipeline = BatchPipeline(settings, notifier=notifier, sink=sink)
        file_set = OrderedFileSet()
        file_set.try_add(PendingFile.from_bytes("a.jpg", b"not an image"))
        file_set.try_add(PendingFile.from_bytes("b.pdf", b"not a pdf"))

        result = await pipeline.start(file_set, ConversionOptions())

        expected = str(EmptyDocumentError(2))
        assert result.status is RunStatus.FAILED
        assert result.error == expected
        assert result.message == MSG_FAILED.format(error=expected)
        assert result.skipped_files == ["a.jpg", "b.pdf"]
        sink.deliver.assert_not_called()

    @pytest.mark.asyncio
    async def test_extractor_only_used_when_requested(self, settings, image_bytes):
        extractor = MagicMock()
        pipeline = BatchPipeline(
            settings, sink=MagicMock(), extractor=extractor, normalizer=ImageNormalizer(dpi=20)
        )
        file_set = OrderedFileSet()
        file_set.try_add(PendingFile.from_bytes("a.jpg", image_bytes()))

        result = await pipeline.start(file_set, ConversionOptions(print_page_numbers=True))

        assert result.status is RunStatus.COMPLETED
        extractor.extract.assert_not_called()

    @pytest.mark.asyncio
    async def test_hash_only_skips_exif(self, settings, image_bytes):
        extractor = MagicMock()
        extractor.extract.return_value.gps = None
        extractor.extract.return_value.capture_time = None
        extractor.extract.return_value.content_hash_hex = "00" * 32
        pipeline = BatchPipeline(
            settings, sink=MagicMock(), extractor=extractor, normalizer=ImageNormalizer(dpi=20)
        )
        file_set = OrderedFileSet()
        file_set.try_add(PendingFile.from_bytes("a.jpg", image_bytes()))

        await pipeline.start(file_set, ConversionOptions(print_hash=True))

        _, kwargs = extractor.extract.call_args
        assert kwargs == {"include_exif": False, "include_hash": True}
