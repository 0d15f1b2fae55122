"""Protocol definitions for the pipeline's external collaborators.

The pipeline depends only on these interfaces, so the command line,
tests, or another host can plug in their own notification, progress
display and delivery.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Protocol

from pdfmerge.config.constants import DEFAULT_LINK_TTL
from pdfmerge.utils.formatting import format_file_size

if TYPE_CHECKING:
    from pdfmerge.core.state import ProgressUpdate

NotificationLevel = Literal["success", "danger", "warning", "info"]


@dataclass
class DeliveredArtifact:
    """A finished document handed to the user."""

    filename: str
    size: int
    path: Path | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    ttl_seconds: int = DEFAULT_LINK_TTL

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_seconds)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at

    @property
    def label(self) -> str:
        """Link text, e.g. ``PDFMerge_20240115T143000Z.pdf (2 MB)``."""
        return f"{self.filename} ({format_file_size(self.size)})"


class Notifier(Protocol):
    """Transient user-facing messages."""

    def notify(self, message: str, level: NotificationLevel) -> None:
        ...


class ArtifactSink(Protocol):
    """Download/link presentation for the finished bytes."""

    def deliver(self, data: bytes, filename: str) -> DeliveredArtifact:
        ...


class ProgressReporter(Protocol):
    """Progress indicator driven by the pipeline."""

    def update(self, progress: "ProgressUpdate") -> None:
        ...

    def reset(self) -> None:
        ...
