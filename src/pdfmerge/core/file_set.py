"""Ordered, deduplicated set of files waiting to be merged."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pdfmerge.config.constants import (
    IMAGE_EXTENSIONS,
    MAX_FILE_SIZE,
    PDF_EXTENSION,
    SUPPORTED_EXTENSIONS,
)
from pdfmerge.exceptions import AdmissionError
from pdfmerge.utils.formatting import format_file_size
from pdfmerge.utils.logging import get_logger

log = get_logger(__name__)


def extension_of(name: str) -> str:
    """Lower-cased substring after the final ".", or the whole name if none."""
    return name.rsplit(".", 1)[-1].lower()


def is_supported_name(name: str) -> bool:
    """Check a filename against the supported extension list."""
    return extension_of(name) in SUPPORTED_EXTENSIONS


class AdmissionResult(str, Enum):
    """Outcome of offering a file to the set."""

    ACCEPTED = "accepted"
    REJECTED_DUPLICATE = "duplicate"
    REJECTED_UNSUPPORTED_TYPE = "unsupported type"
    REJECTED_TOO_LARGE = "too large"

    @property
    def accepted(self) -> bool:
        return self is AdmissionResult.ACCEPTED


@dataclass(frozen=True)
class PendingFile:
    """An input file identified by name, declared size and content.

    Content is either held in memory or read lazily from ``path``.
    """

    name: str
    size_bytes: int
    path: Path | None = None
    data: bytes | None = None

    @classmethod
    def from_path(cls, path: Path | str) -> "PendingFile":
        file_path = Path(path)
        return cls(name=file_path.name, size_bytes=file_path.stat().st_size, path=file_path)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, size_bytes: int | None = None) -> "PendingFile":
        return cls(
            name=name,
            size_bytes=len(data) if size_bytes is None else size_bytes,
            data=data,
        )

    @property
    def extension(self) -> str:
        return extension_of(self.name)

    @property
    def is_pdf(self) -> bool:
        return self.extension == PDF_EXTENSION

    @property
    def is_image(self) -> bool:
        return self.extension in IMAGE_EXTENSIONS

    @property
    def is_supported(self) -> bool:
        return self.extension in SUPPORTED_EXTENSIONS

    @property
    def display_size(self) -> str:
        return format_file_size(self.size_bytes)

    def read_bytes(self) -> bytes:
        """Return the raw file content."""
        if self.data is not None:
            return self.data
        if self.path is None:
            raise ValueError(f"{self.name} has neither data nor a path")
        return self.path.read_bytes()


class OrderedFileSet:
    """User-ordered list of pending files with unique names.

    Invariants:
    - names are unique (exact, case-sensitive match)
    - every entry has a supported extension
    - files over the size cap are refused unless they are PDFs

    A run consumes ``snapshot()`` so that later mutations are not observed
    mid-conversion.
    """

    def __init__(self, max_file_size: int = MAX_FILE_SIZE) -> None:
        self.max_file_size = max_file_size
        self._files: list[PendingFile] = []

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self):
        return iter(tuple(self._files))

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._files)

    def size(self) -> int:
        return len(self._files)

    def check(self, file: PendingFile) -> AdmissionResult:
        """Evaluate admission without mutating the set."""
        if not file.is_supported:
            return AdmissionResult.REJECTED_UNSUPPORTED_TYPE
        if file.name in self:
            return AdmissionResult.REJECTED_DUPLICATE
        if file.size_bytes > self.max_file_size and not file.is_pdf:
            return AdmissionResult.REJECTED_TOO_LARGE
        return AdmissionResult.ACCEPTED

    def try_add(self, file: PendingFile) -> AdmissionResult:
        """Append ``file`` if it passes admission."""
        result = self.check(file)
        if result.accepted:
            self._files.append(file)
            self.dedupe_and_revalidate()
            log.debug("File admitted", name=file.name, position=len(self._files) - 1)
        else:
            log.info("File rejected", name=file.name, reason=result.value)
        return result

    def add(self, file: PendingFile) -> None:
        """Append ``file`` or raise.

        Raises:
            AdmissionError: If the file fails admission
        """
        result = self.try_add(file)
        if not result.accepted:
            raise AdmissionError(file.name, result)

    def add_many(self, files: list[PendingFile]) -> dict[str, AdmissionResult]:
        """Offer several files in order; returns the outcome per name."""
        return {file.name: self.try_add(file) for file in files}

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the entry at ``from_index`` so it lands at ``to_index``.

        This is a list move, not a swap. Out-of-range or equal indices are
        a no-op.
        """
        count = len(self._files)
        if from_index == to_index:
            return
        if not (0 <= from_index < count and 0 <= to_index < count):
            log.debug("Reorder ignored", from_index=from_index, to_index=to_index, size=count)
            return
        item = self._files.pop(from_index)
        self._files.insert(to_index, item)
        self.dedupe_and_revalidate()

    def dedupe_and_revalidate(self) -> None:
        """Drop unsupported entries and later duplicates (first name wins)."""
        seen: set[str] = set()
        kept: list[PendingFile] = []
        for file in self._files:
            if not file.is_supported or file.name in seen:
                log.debug("Dropping stale entry", name=file.name)
                continue
            seen.add(file.name)
            kept.append(file)
        self._files = kept

    def reset(self) -> None:
        self._files.clear()

    def snapshot(self) -> tuple[PendingFile, ...]:
        """Immutable ordered copy for a conversion run."""
        return tuple(self._files)

    def has_images(self) -> bool:
        """Whether any entry is a raster image (annotation options apply)."""
        return any(f.is_image for f in self._files)

    def entries(self) -> list[str]:
        """Display lines: ``name (size)`` in order."""
        return [f"{f.name} ({f.display_size})" for f in self._files]
