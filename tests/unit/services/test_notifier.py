"""Tests for notifier and progress collaborators."""

import io

from rich.console import Console
from rich.progress import Progress

from pdfmerge.core.state import ProgressUpdate
from pdfmerge.services.notifier import (
    ConsoleNotifier,
    NullProgress,
    RecordingNotifier,
    RichProgressReporter,
)


class TestRecordingNotifier:
    def test_records_in_order(self):
        notifier = RecordingNotifier()
        assert notifier.last is None

        notifier.notify("first", "warning")
        notifier.notify("second", "success")

        assert notifier.messages == [("warning", "first"), ("success", "second")]
        assert notifier.last == ("success", "second")


def test_console_notifier_prints_message():
    buffer = io.StringIO()
    notifier = ConsoleNotifier(Console(file=buffer, force_terminal=False, width=120))

    notifier.notify("PDF conversion complete!", "success")

    assert "PDF conversion complete!" in buffer.getvalue()


def test_null_progress_accepts_updates():
    progress = NullProgress()
    progress.update(ProgressUpdate(processed=1, total=2))
    progress.reset()


class TestRichProgressReporter:
    def test_update_and_reset(self):
        progress = Progress(console=Console(file=io.StringIO()))
        task_id = progress.add_task("Merging", total=12)
        reporter = RichProgressReporter(progress, task_id)

        reporter.update(ProgressUpdate(processed=5, total=12))
        assert progress.tasks[0].completed == 5

        reporter.reset()
        assert progress.tasks[0].completed == 0
