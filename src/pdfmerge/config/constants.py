"""Constants for PDFMerge."""

from pathlib import Path

from pdfmerge import __version__

# Application constants
APP_NAME = "pdfmerge"
APP_VERSION = __version__

# Default paths
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "pdfmerge.yaml"

# Per-user config, relative to the home directory
USER_CONFIG_FILE = Path(".config") / APP_NAME / "config.yaml"

# Supported file extensions (matched case-insensitively after the final ".")
IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")
PDF_EXTENSION = "pdf"
SUPPORTED_EXTENSIONS = (PDF_EXTENSION, *IMAGE_EXTENSIONS)

# Formats that carry no extractable capture metadata
NO_EXIF_EXTENSIONS = frozenset({"gif", "webp"})

# Admission limits
MAX_FILE_SIZE = 50 * 1024 * 1024  # 50 MiB, PDFs are exempt

# Paper profiles in millimetres (width, height)
PAPER_DIMENSIONS_MM: dict[str, tuple[float, float]] = {
    "A0": (841, 1189),
    "A1": (594, 841),
    "A2": (420, 594),
    "A3": (297, 420),
    "A4": (210, 297),
}
DEFAULT_PAPER_SIZE = "A4"
POINTS_PER_MM = 72 / 25.4

# Image normalisation
DEFAULT_IMAGE_DPI = 300
DEFAULT_JPEG_QUALITY = 90

# Page layout (points)
MARGIN_X = 30
MARGIN_Y = 40
DETAILS_RESERVED_HEIGHT = 100
DETAILS_FONT_SIZE = 10
DETAILS_LINE_HEIGHT = 14
DETAILS_TOP_OFFSET = 20
PAGE_NUMBER_FONT_SIZE = 10
PAGE_NUMBER_MARGIN = 30
TEXT_COLOR = "#000000"

# Watermark
DEFAULT_WATERMARK_TEXT = "PDFMerge"
DEFAULT_WATERMARK_COLOR = "#000000"
DEFAULT_WATERMARK_OPACITY = 0.5
WATERMARK_MIN_FONT_SIZE = 10
WATERMARK_MAX_FONT_SIZE = 100

# Batch processing
DEFAULT_BATCH_SIZE = 5
DEFAULT_CHUNK_PAUSE = 0.5  # seconds between chunks
DEFAULT_RUN_TIMEOUT = 60.0  # seconds
DEFAULT_LINK_TTL = 60  # seconds before a delivered link expires

# Output naming
OUTPUT_PREFIX = "PDFMerge"

# User-facing messages
MSG_EMPTY_SELECTION = "Select at least one image to convert."
MSG_COMPLETE = "PDF Merge complete."
MSG_FAILED = "An error occurred during PDF conversion: {error}"
MSG_TIMEOUT = "Conversion process took too long and was terminated."
