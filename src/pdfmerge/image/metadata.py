"""Capture metadata and content digests for image inputs.

Metadata is best-effort: any decode problem leaves the affected field
empty and never stops the file from being merged.
"""

import hashlib
import io
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from PIL import ExifTags, Image

from pdfmerge.config.constants import NO_EXIF_EXTENSIONS
from pdfmerge.utils.logging import get_logger

if TYPE_CHECKING:
    from pdfmerge.core.file_set import PendingFile

log = get_logger(__name__)

TagReader = Callable[[bytes], dict[str, Any]]
Digest = Callable[[bytes], str]


def read_exif_tags(data: bytes) -> dict[str, Any]:
    """Parse EXIF tags from image bytes into a name -> value mapping.

    Base, Exif and GPS IFDs are merged under their standard tag names.
    Returns an empty dict when the image or its tags cannot be read.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            exif = img.getexif()
            tags: dict[str, Any] = {ExifTags.TAGS.get(k, k): v for k, v in exif.items()}
            exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
            tags.update({ExifTags.TAGS.get(k, k): v for k, v in exif_ifd.items()})
            gps_ifd = exif.get_ifd(ExifTags.IFD.GPSInfo)
            tags.update({ExifTags.GPSTAGS.get(k, k): v for k, v in gps_ifd.items()})
            return tags
    except Exception as e:
        log.debug("EXIF read failed", error=str(e))
        return {}


def sha256_hex(data: bytes) -> str:
    """Lowercase hex SHA-256 digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


def dms_to_decimal(dms: Sequence[Any]) -> float:
    """Convert a (degrees, minutes, seconds) triple to decimal degrees.

    >>> round(dms_to_decimal((48, 51, 24)), 6)
    48.856667
    """
    degrees, minutes, seconds = (float(part) for part in dms)
    return degrees + minutes / 60 + seconds / 3600


@dataclass(frozen=True)
class ImageDetails:
    """Metadata derived once per image and consumed by the page composer."""

    gps: tuple[float, float] | None = None
    capture_time: str | None = None
    content_hash_hex: str | None = None

    @property
    def gps_text(self) -> str | None:
        """``lat, lon`` with six decimals each, or None."""
        if self.gps is None:
            return None
        lat, lon = self.gps
        return f"{lat:.6f}, {lon:.6f}"


class MetadataExtractor:
    """Derives capture time, GPS position and content hash for an image.

    The tag reader and digest are injectable so hosts can swap the
    EXIF parser or hash primitive.
    """

    def __init__(self, tag_reader: TagReader = read_exif_tags, digest: Digest = sha256_hex) -> None:
        self.tag_reader = tag_reader
        self.digest = digest

    def extract(
        self,
        file: "PendingFile",
        include_exif: bool = True,
        include_hash: bool = False,
    ) -> ImageDetails:
        """Collect the requested metadata for ``file``.

        GIF and WEBP inputs never carry capture metadata; their hash is
        still computed when requested.
        """
        try:
            data = file.read_bytes()
        except OSError as e:
            log.warning("Cannot read file for metadata", name=file.name, error=str(e))
            return ImageDetails()

        gps = None
        capture_time = None
        if include_exif and file.extension not in NO_EXIF_EXTENSIONS:
            tags = self._read_tags(data, file.name)
            gps = self._gps_from_tags(tags, file.name)
            capture_time = self._capture_time_from_tags(tags)

        content_hash = self._hash(data, file.name) if include_hash else None

        return ImageDetails(gps=gps, capture_time=capture_time, content_hash_hex=content_hash)

    def _read_tags(self, data: bytes, name: str) -> dict[str, Any]:
        try:
            return self.tag_reader(data) or {}
        except Exception as e:
            log.warning("Tag reader failed", name=name, error=str(e))
            return {}

    def _hash(self, data: bytes, name: str) -> str | None:
        try:
            return self.digest(data)
        except Exception as e:
            log.warning("Hash computation failed", name=name, error=str(e))
            return None

    @staticmethod
    def _gps_from_tags(tags: dict[str, Any], name: str) -> tuple[float, float] | None:
        latitude = tags.get("GPSLatitude")
        longitude = tags.get("GPSLongitude")
        if not latitude or not longitude:
            return None
        try:
            lat = round(dms_to_decimal(latitude), 6)
            lon = round(dms_to_decimal(longitude), 6)
        except (TypeError, ValueError, ZeroDivisionError) as e:
            log.debug("Malformed GPS tags", name=name, error=str(e))
            return None
        return lat, lon

    @staticmethod
    def _capture_time_from_tags(tags: dict[str, Any]) -> str | None:
        value = tags.get("DateTimeOriginal")
        if not value:
            return None
        if isinstance(value, bytes):
            value = value.decode("ascii", errors="ignore")
        return str(value).strip("\x00 ") or None
