"""Pytest configuration and fixtures."""

import io
import tempfile
from collections.abc import Callable
from pathlib import Path

import fitz
import pytest
from PIL import ExifTags, Image

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# 48°51'24" N, 2°21'03" E
GPS_LATITUDE = (48.0, 51.0, 24.0)
GPS_LONGITUDE = (2.0, 21.0, 3.0)
CAPTURE_TIME = "2024:01:15 14:30:00"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Drop cached settings so each test sees its own environment."""
    from pdfmerge.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    """Point HOME at an empty directory so a user config never leaks in."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    return home


def make_image_bytes(
    fmt: str = "JPEG",
    size: tuple[int, int] = (120, 80),
    color: tuple[int, ...] = (200, 30, 30),
    mode: str = "RGB",
    exif: bool = False,
) -> bytes:
    """Render a solid-colour image, optionally with GPS and capture time tags."""
    img = Image.new(mode, size, color)
    output = io.BytesIO()
    if exif:
        tags = Image.Exif()
        tags[ExifTags.IFD.Exif] = {ExifTags.Base.DateTimeOriginal: CAPTURE_TIME}
        tags[ExifTags.IFD.GPSInfo] = {
            ExifTags.GPS.GPSLatitudeRef: "N",
            ExifTags.GPS.GPSLatitude: GPS_LATITUDE,
            ExifTags.GPS.GPSLongitudeRef: "E",
            ExifTags.GPS.GPSLongitude: GPS_LONGITUDE,
        }
        img.save(output, format=fmt, exif=tags)
    else:
        img.save(output, format=fmt)
    return output.getvalue()


def make_pdf_bytes(pages: int = 1, size: tuple[float, float] = (300, 400)) -> bytes:
    """Build a small PDF with one line of text per page."""
    doc = fitz.open()
    try:
        for number in range(pages):
            page = doc.new_page(width=size[0], height=size[1])
            page.insert_text((50, 72), f"Source page {number + 1}", fontsize=12)
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture
def image_factory(temp_dir: Path) -> Callable[..., Path]:
    """Write images to ``temp_dir``; format follows the file extension."""
    formats = {"jpg": "JPEG", "jpeg": "JPEG", "png": "PNG", "gif": "GIF", "webp": "WEBP"}

    def _create(name: str = "photo.jpg", **kwargs) -> Path:
        fmt = formats[name.rsplit(".", 1)[-1].lower()]
        path = temp_dir / name
        path.write_bytes(make_image_bytes(fmt=fmt, **kwargs))
        return path

    return _create


@pytest.fixture
def pdf_factory(temp_dir: Path) -> Callable[..., Path]:
    """Write PDFs with the given number of pages to ``temp_dir``."""

    def _create(name: str = "document.pdf", pages: int = 1, **kwargs) -> Path:
        path = temp_dir / name
        path.write_bytes(make_pdf_bytes(pages=pages, **kwargs))
        return path

    return _create


@pytest.fixture
def sample_jpeg(image_factory) -> Path:
    """JPEG carrying GPS coordinates and a capture time."""
    return image_factory("photo.jpg", exif=True)


@pytest.fixture
def sample_png(image_factory) -> Path:
    """PNG with a semi-transparent alpha channel."""
    return image_factory("overlay.png", mode="RGBA", color=(0, 0, 255, 128))


@pytest.fixture
def sample_pdf(pdf_factory) -> Path:
    """Three-page PDF."""
    return pdf_factory("report.pdf", pages=3)


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """In-memory image builder (see ``make_image_bytes``)."""
    return make_image_bytes


@pytest.fixture
def pdf_bytes() -> Callable[..., bytes]:
    """In-memory PDF builder (see ``make_pdf_bytes``)."""
    return make_pdf_bytes
