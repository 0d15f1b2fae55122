"""Collaborator services used by the conversion pipeline."""

from pdfmerge.services.notifier import ConsoleNotifier, NullProgress, RecordingNotifier
from pdfmerge.services.output_manager import OutputManager
from pdfmerge.services.protocols import (
    ArtifactSink,
    DeliveredArtifact,
    Notifier,
    ProgressReporter,
)

__all__ = [
    "ArtifactSink",
    "ConsoleNotifier",
    "DeliveredArtifact",
    "Notifier",
    "NullProgress",
    "OutputManager",
    "ProgressReporter",
    "RecordingNotifier",
]
