"""Notification and progress collaborators for console hosts."""

from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import Progress, TaskID

from pdfmerge.services.protocols import NotificationLevel
from pdfmerge.utils.logging import get_logger

if TYPE_CHECKING:
    from pdfmerge.core.state import ProgressUpdate

log = get_logger(__name__)

_LEVEL_STYLES: dict[str, str] = {
    "success": "bold green",
    "danger": "bold red",
    "warning": "bold yellow",
    "info": "bold blue",
}


class ConsoleNotifier:
    """Prints flash messages to a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def notify(self, message: str, level: NotificationLevel) -> None:
        style = _LEVEL_STYLES.get(level, "")
        self.console.print(f"[{style}]{message}[/{style}]" if style else message)


class RecordingNotifier:
    """Keeps every message; useful for embedding hosts that poll."""

    def __init__(self) -> None:
        self.messages: list[tuple[NotificationLevel, str]] = []

    def notify(self, message: str, level: NotificationLevel) -> None:
        self.messages.append((level, message))

    @property
    def last(self) -> tuple[NotificationLevel, str] | None:
        return self.messages[-1] if self.messages else None


class NullProgress:
    """Progress reporter that only logs."""

    def update(self, progress: "ProgressUpdate") -> None:
        log.debug("Progress", processed=progress.processed, total=progress.total)

    def reset(self) -> None:
        pass


class RichProgressReporter:
    """Feeds pipeline progress into a Rich progress bar task."""

    def __init__(self, progress: Progress, task_id: TaskID) -> None:
        self.progress = progress
        self.task_id = task_id

    def update(self, progress: "ProgressUpdate") -> None:
        self.progress.update(self.task_id, completed=progress.processed, total=progress.total)

    def reset(self) -> None:
        self.progress.update(self.task_id, completed=0)
