"""Page composition for image and PDF inputs."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

import fitz

from pdfmerge.compose.fonts import FontSet
from pdfmerge.compose.text import draw_text, draw_wrapped_text, hex_to_rgb
from pdfmerge.compose.watermark import add_watermark_to_page
from pdfmerge.config.constants import (
    DETAILS_FONT_SIZE,
    DETAILS_LINE_HEIGHT,
    DETAILS_RESERVED_HEIGHT,
    DETAILS_TOP_OFFSET,
    MARGIN_X,
    MARGIN_Y,
    PAGE_NUMBER_FONT_SIZE,
    PAGE_NUMBER_MARGIN,
    TEXT_COLOR,
)
from pdfmerge.exceptions import EmbedError, FileProcessingError
from pdfmerge.utils.formatting import format_capture_time
from pdfmerge.utils.logging import get_logger

if TYPE_CHECKING:
    from pdfmerge.config.settings import ConversionOptions, WatermarkOptions
    from pdfmerge.core.file_set import PendingFile
    from pdfmerge.core.page_spec import PageSpec
    from pdfmerge.image.metadata import ImageDetails
    from pdfmerge.image.normalizer import NormalizedImage

log = get_logger(__name__)


@dataclass(frozen=True)
class ImagePlacement:
    """Image rectangle in PDF coordinates (bottom-left origin)."""

    x: float
    y: float
    width: float
    height: float

    def to_rect(self, page_height: float) -> fitz.Rect:
        top = page_height - self.y - self.height
        return fitz.Rect(self.x, top, self.x + self.width, top + self.height)


def image_placement(
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
    reserve_details: bool = False,
) -> ImagePlacement:
    """Centre an image inside the page margin box.

    The box loses its top 100pt when the detail block is printed, so the
    image sits below the text.
    """
    box_width = page_width - 2 * MARGIN_X
    box_height = page_height - 2 * MARGIN_Y - (DETAILS_RESERVED_HEIGHT if reserve_details else 0)
    scale = min(box_width / image_width, box_height / image_height)
    width, height = image_width * scale, image_height * scale
    return ImagePlacement(
        x=(box_width - width) / 2 + MARGIN_X,
        y=(box_height - height) / 2 + MARGIN_Y,
        width=width,
        height=height,
    )


class PageComposer:
    """Lays out output pages on a PyMuPDF document."""

    def __init__(self, fonts: FontSet) -> None:
        self.fonts = fonts

    def compose_image_page(
        self,
        doc: fitz.Document,
        file: "PendingFile",
        image: "NormalizedImage",
        page_spec: "PageSpec",
        options: "ConversionOptions",
        details: "ImageDetails | None" = None,
        page_number: int | None = None,
    ) -> fitz.Page:
        """Add one page holding ``image`` plus its enabled annotations.

        Raises:
            EmbedError: If the JPEG cannot be placed on the page
        """
        width, height = page_spec.width_pt, page_spec.height_pt
        page = doc.new_page(width=width, height=height)

        if options.print_details or options.print_hash:
            self._draw_details(page, file, details, options)
        if page_number is not None:
            self._draw_page_number(page, page_number)

        placement = image_placement(image.width, image.height, width, height, options.print_details)
        try:
            page.insert_image(placement.to_rect(height), stream=image.data)
        except Exception as e:
            raise EmbedError(f"Failed to embed image {file.name}: {e}") from e

        log.debug("Image page composed", name=file.name, page=page.number, placement=placement)
        return page

    def _draw_details(
        self,
        page: fitz.Page,
        file: "PendingFile",
        details: "ImageDetails | None",
        options: "ConversionOptions",
    ) -> None:
        """Metadata block, top to bottom: name, capture time, GPS, hash."""
        width, height = page.rect.width, page.rect.height
        max_width = width - 2 * MARGIN_X
        x = MARGIN_X
        y = height - DETAILS_TOP_OFFSET

        lines: list[tuple[str, bool]] = []
        if options.print_details:
            lines.append((file.name, True))
            if details is not None and details.capture_time is not None:
                lines.append((format_capture_time(details.capture_time), False))
            if details is not None and details.gps_text:
                lines.append((f"GPS (Lat, Long) {details.gps_text}", False))
        if options.print_hash and details is not None and details.content_hash_hex:
            lines.append((f"SHA-256: {details.content_hash_hex}", False))

        for text, bold in lines:
            y -= DETAILS_LINE_HEIGHT
            face = self.fonts.bold if bold else self.fonts.regular
            y = draw_wrapped_text(
                page, text, x, y, max_width, DETAILS_LINE_HEIGHT, face, DETAILS_FONT_SIZE, TEXT_COLOR
            )

    def _draw_page_number(self, page: fitz.Page, page_number: int) -> None:
        text = f"Image {page_number}"
        face = self.fonts.regular
        text_width = face.text_length(text, PAGE_NUMBER_FONT_SIZE)
        x = page.rect.width - text_width - PAGE_NUMBER_MARGIN
        draw_text(page, text, x, PAGE_NUMBER_MARGIN, face, PAGE_NUMBER_FONT_SIZE, hex_to_rgb(TEXT_COLOR))

    def append_pdf(self, doc: fitz.Document, file: "PendingFile") -> int:
        """Copy every page of a PDF input verbatim, in source order.

        Encrypted inputs are opened with an empty password when possible.

        Returns:
            Number of pages appended

        Raises:
            FileProcessingError: If the input cannot be read or opened
        """
        try:
            data = file.read_bytes()
            source = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise FileProcessingError(file.name, f"cannot open PDF: {e}", cause=e) from e

        with source:
            if source.needs_pass and not source.authenticate(""):
                raise FileProcessingError(file.name, "PDF is password protected")
            if source.page_count == 0:
                raise FileProcessingError(file.name, "PDF has no pages")
            before = doc.page_count
            try:
                doc.insert_pdf(source)
            except Exception as e:
                raise FileProcessingError(file.name, f"cannot copy pages: {e}", cause=e) from e
            added = doc.page_count - before

        log.debug("PDF pages appended", name=file.name, pages=added)
        return added

    def apply_watermark(self, doc: fitz.Document, watermark: "WatermarkOptions") -> int:
        """Stamp every page of ``doc``; returns the number of pages marked."""
        count = 0
        for page in doc:
            add_watermark_to_page(page, watermark, self.fonts.black)
            count += 1
        return count
