"""Core processing module for PDFMerge."""

from pdfmerge.core.file_set import AdmissionResult, OrderedFileSet, PendingFile
from pdfmerge.core.page_spec import PageSpec
from pdfmerge.core.pipeline import BatchPipeline, chunk_files
from pdfmerge.core.state import ConversionRun, ProgressUpdate, RunResult, RunStatus

__all__ = [
    "AdmissionResult",
    "BatchPipeline",
    "ConversionRun",
    "OrderedFileSet",
    "PageSpec",
    "PendingFile",
    "ProgressUpdate",
    "RunResult",
    "RunStatus",
    "chunk_files",
]
