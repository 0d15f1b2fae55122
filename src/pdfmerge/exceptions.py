"""Custom exceptions for PDFMerge."""

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdfmerge.core.file_set import AdmissionResult


class PDFMergeError(Exception):
    """Base exception class for PDFMerge."""

    pass


class AdmissionError(PDFMergeError):
    """A file was refused by the ordered file set."""

    def __init__(self, name: str, result: "AdmissionResult") -> None:
        self.name = name
        self.result = result
        super().__init__(f"{name} rejected: {result.value}")


class FileProcessingError(PDFMergeError):
    """A single input file could not be processed and will be skipped."""

    def __init__(self, name: str, message: str, cause: Exception | None = None) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Processing failed for {name}: {message}")


class ConversionRunError(PDFMergeError):
    """Fatal error that aborts the whole conversion run."""

    pass


class FontLoadError(ConversionRunError):
    """A font face could not be loaded or embedded."""

    def __init__(self, face: str, cause: Exception | None = None) -> None:
        self.face = face
        self.cause = cause
        message = f"Failed to load font '{face}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class EmbedError(ConversionRunError):
    """An image could not be embedded into the output document."""

    pass


class SerializationError(ConversionRunError):
    """The finished document could not be written to bytes."""

    pass


class EmptyDocumentError(ConversionRunError):
    """Every selected file was skipped, so there is nothing to save."""

    def __init__(self, skipped: int) -> None:
        self.skipped = skipped
        super().__init__(f"none of the selected files could be converted ({skipped} skipped)")


class RunInProgressError(PDFMergeError):
    """A conversion run was started while another one is active."""

    def __init__(self, message: str = "A conversion run is already in progress") -> None:
        super().__init__(message)


class ConfigurationError(PDFMergeError):
    """Configuration error."""

    pass


class DeliveryError(ConversionRunError):
    """The finished document could not be handed over to the user."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(message)
