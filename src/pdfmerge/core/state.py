"""State of a single conversion run."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdfmerge.services.protocols import DeliveredArtifact


class RunStatus(str, Enum):
    """Pipeline states: Idle -> Running -> {Completed | Failed | TimedOut} -> Idle."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.TIMED_OUT)


@dataclass(frozen=True)
class ProgressUpdate:
    """Progress after a chunk has been processed."""

    processed: int
    total: int

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 0.0
        return self.processed / self.total

    @property
    def percent(self) -> float:
        return self.fraction * 100


@dataclass
class ConversionRun:
    """Process-wide state for one pipeline invocation.

    Created when a run starts and discarded at teardown; never shared
    between runs.
    """

    run_id: str
    total_files: int
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    status: RunStatus = RunStatus.RUNNING
    page_counter: int = 0
    processed_files: int = 0
    skipped_files: list[str] = field(default_factory=list)
    cancelled: bool = False

    def next_page_number(self) -> int:
        """Advance the image page counter and return the 1-based number."""
        self.page_counter += 1
        return self.page_counter

    def advance(self, count: int) -> ProgressUpdate:
        self.processed_files += count
        return ProgressUpdate(processed=self.processed_files, total=self.total_files)

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class RunResult:
    """Outcome reported to the caller of ``BatchPipeline.start``."""

    status: RunStatus
    message: str | None = None
    artifact: "DeliveredArtifact | None" = None
    page_count: int = 0
    processed_files: int = 0
    skipped_files: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status is RunStatus.COMPLETED
