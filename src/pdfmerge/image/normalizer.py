"""Fit-to-page resampling of raster inputs.

Every image is re-encoded as JPEG. Alpha channels (PNG, GIF, WEBP) are
flattened onto a white background; the loss of transparency is accepted.
"""

import io
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image, ImageOps, UnidentifiedImageError

from pdfmerge.config.constants import DEFAULT_IMAGE_DPI, DEFAULT_JPEG_QUALITY
from pdfmerge.exceptions import FileProcessingError
from pdfmerge.utils.logging import get_logger

if TYPE_CHECKING:
    from pdfmerge.core.file_set import PendingFile
    from pdfmerge.core.page_spec import PageSpec

log = get_logger(__name__)


def fit_to_budget(width: float, height: float, max_width: float, max_height: float) -> tuple[float, float]:
    """Scale (width, height) so it exactly fills one axis of the budget.

    The scale factor may exceed 1: small sources are enlarged to use the
    full print resolution.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size: {width}x{height}")
    scale = min(max_width / width, max_height / height)
    return width * scale, height * scale


@dataclass
class NormalizedImage:
    """JPEG bytes ready for embedding."""

    data: bytes
    width: int
    height: int
    source_width: int
    source_height: int

    @property
    def format(self) -> str:
        return "jpeg"


def _flatten(img: Image.Image) -> Image.Image:
    """Composite transparent images onto white and return an RGB image."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


class ImageNormalizer:
    """Resamples images to the page's printable pixel budget."""

    def __init__(self, dpi: int = DEFAULT_IMAGE_DPI, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> None:
        self.dpi = dpi
        self.jpeg_quality = jpeg_quality

    def resample(self, file: "PendingFile", page_spec: "PageSpec") -> NormalizedImage:
        """Decode ``file`` and re-encode it sized for ``page_spec``.

        Raises:
            FileProcessingError: If the file cannot be read or decoded
        """
        try:
            data = file.read_bytes()
        except OSError as e:
            raise FileProcessingError(file.name, "unreadable file", cause=e) from e
        return self.resample_bytes(data, page_spec, name=file.name)

    def resample_bytes(self, data: bytes, page_spec: "PageSpec", name: str = "<memory>") -> NormalizedImage:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.seek(0)  # first frame of animations
                img.load()
                # Camera rotation lives in the EXIF Orientation tag, which the re-encode drops
                upright = ImageOps.exif_transpose(img)
                source_width, source_height = upright.size

                max_width, max_height = page_spec.pixel_budget(self.dpi)
                target_w, target_h = fit_to_budget(source_width, source_height, max_width, max_height)
                size = (max(1, round(target_w)), max(1, round(target_h)))

                rgb = _flatten(upright)
                if rgb.size != size:
                    rgb = rgb.resize(size, Image.Resampling.LANCZOS)

                output = io.BytesIO()
                rgb.save(output, format="JPEG", quality=self.jpeg_quality)
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise FileProcessingError(name, f"cannot decode image: {e}", cause=e) from e

        log.debug(
            "Image resampled",
            name=name,
            source=f"{source_width}x{source_height}",
            target=f"{size[0]}x{size[1]}",
        )
        return NormalizedImage(
            data=output.getvalue(),
            width=size[0],
            height=size[1],
            source_width=source_width,
            source_height=source_height,
        )
