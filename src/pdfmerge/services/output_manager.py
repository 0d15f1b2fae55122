"""Output management service for delivering the merged document."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from pdfmerge.config.constants import DEFAULT_LINK_TTL
from pdfmerge.exceptions import DeliveryError
from pdfmerge.services.protocols import DeliveredArtifact
from pdfmerge.utils.logging import get_logger

log = get_logger(__name__)


class OutputManager:
    """Writes finished documents to an output directory.

    Acts as the download/link collaborator for the command line: the
    returned artifact carries the file location, a display label and an
    expiry time for any link built on top of it.
    """

    def __init__(
        self,
        output_dir: Path,
        on_conflict: Literal["skip", "overwrite", "rename"] = "rename",
        link_ttl: int = DEFAULT_LINK_TTL,
    ) -> None:
        """Initialize the output manager.

        Args:
            output_dir: Directory receiving merged documents
            on_conflict: Strategy for handling existing files
                - "skip": Raise error if file exists
                - "overwrite": Overwrite existing file
                - "rename": Add numeric suffix to filename
            link_ttl: Seconds before a delivered link expires
        """
        self.output_dir = Path(output_dir)
        self.on_conflict = on_conflict
        self.link_ttl = link_ttl

    def deliver(self, data: bytes, filename: str) -> DeliveredArtifact:
        """Write ``data`` under ``filename`` and describe the result.

        Raises:
            DeliveryError: If the file exists under the "skip" strategy or
                cannot be written
        """
        output_path = self.output_dir / filename
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            output_path = self.resolve_conflict(output_path)
            output_path.write_bytes(data)
        except OSError as e:
            raise DeliveryError(output_path, f"Cannot write {output_path}: {e}") from e

        artifact = DeliveredArtifact(
            filename=output_path.name,
            size=len(data),
            path=output_path,
            created_at=datetime.now(UTC),
            ttl_seconds=self.link_ttl,
        )
        log.info("Output written", path=str(output_path), size=artifact.size)
        return artifact

    def resolve_conflict(self, output_path: Path) -> Path:
        """Resolve output file conflicts based on settings.

        Raises:
            DeliveryError: If strategy is "skip" and file exists
        """
        if not output_path.exists():
            return output_path

        if self.on_conflict == "overwrite":
            return output_path
        elif self.on_conflict == "skip":
            raise DeliveryError(output_path, f"Output file already exists: {output_path}")
        elif self.on_conflict == "rename":
            counter = 1
            stem = output_path.stem
            suffix = output_path.suffix
            parent = output_path.parent

            while True:
                new_path = parent / f"{stem}_{counter}{suffix}"
                if not new_path.exists():
                    return new_path
                counter += 1
        else:
            return output_path
