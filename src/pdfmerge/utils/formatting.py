"""Presentation helpers for sizes, capture times and output names."""

import math
from datetime import UTC, datetime

from pdfmerge.config.constants import OUTPUT_PREFIX

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")
_EXIF_DATETIME = "%Y:%m:%d %H:%M:%S"


def format_file_size(size: int) -> str:
    """Format a byte count with a 1024-based unit, rounded to an integer.

    >>> format_file_size(0)
    '0 Byte'
    >>> format_file_size(1536)
    '2 KB'
    """
    if size <= 0:
        return "0 Byte"
    index = min(int(math.floor(math.log(size) / math.log(1024))), len(_SIZE_UNITS) - 1)
    value = math.floor(size / 1024**index + 0.5)
    return f"{value} {_SIZE_UNITS[index]}"


def format_capture_time(value: str | None) -> str:
    """Render an EXIF ``YYYY:MM:DD HH:MM:SS`` string for display.

    Returns "" for an empty value and "Invalid Date" when it cannot be parsed.

    >>> format_capture_time("2024:01:15 14:30:00")
    'Jan 15, 2024, 02:30:00 PM'
    """
    if not value:
        return ""
    try:
        parsed = datetime.strptime(value.strip(), _EXIF_DATETIME)
    except ValueError:
        return "Invalid Date"
    return f"{parsed:%b} {parsed.day}, {parsed.year}, {parsed:%I:%M:%S %p}"


def compact_utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp without separators or fractional seconds."""
    current = now or datetime.now(UTC)
    if current.tzinfo is not None:
        current = current.astimezone(UTC)
    return current.strftime("%Y%m%dT%H%M%SZ")


def output_filename(now: datetime | None = None) -> str:
    """Name of the merged document, e.g. ``PDFMerge_20240115T143000Z.pdf``."""
    return f"{OUTPUT_PREFIX}_{compact_utc_timestamp(now)}.pdf"
