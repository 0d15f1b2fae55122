"""Diagonal text watermark applied to every output page."""

import math
from collections.abc import Callable
from dataclasses import dataclass

import fitz

from pdfmerge.compose.fonts import FontFace
from pdfmerge.compose.text import draw_text, hex_to_rgb
from pdfmerge.config.constants import WATERMARK_MAX_FONT_SIZE, WATERMARK_MIN_FONT_SIZE
from pdfmerge.config.settings import WatermarkOptions


def calculate_watermark_font_size(
    page_width: float,
    text: str,
    measure: Callable[[str, float], float],
) -> int:
    """Smallest size above the minimum whose text width reaches the page width.

    The search starts at 11 and stops at 100. The chosen size makes the
    text at least as wide as the page, giving an oversized diagonal banner.
    """
    font_size = WATERMARK_MIN_FONT_SIZE
    while True:
        font_size += 1
        if measure(text, font_size) >= page_width or font_size >= WATERMARK_MAX_FONT_SIZE:
            return font_size


@dataclass(frozen=True)
class WatermarkPlacement:
    """Start point (PDF coordinates), size and rotation of a watermark."""

    x: float
    y: float
    font_size: int
    text_width: float
    angle_degrees: float


def watermark_placement(
    page_width: float,
    page_height: float,
    text: str,
    measure: Callable[[str, float], float],
) -> WatermarkPlacement:
    """Position the text along the page diagonal, centred on the page."""
    font_size = calculate_watermark_font_size(page_width, text, measure)
    angle = math.atan(page_height / page_width)
    text_width = measure(text, font_size)
    x = (page_width - text_width * math.cos(angle)) / 2
    y = (page_height + text_width * math.sin(angle)) / 2
    return WatermarkPlacement(
        x=x,
        y=y,
        font_size=font_size,
        text_width=text_width,
        angle_degrees=math.degrees(angle),
    )


def add_watermark_to_page(page: fitz.Page, watermark: WatermarkOptions, face: FontFace) -> WatermarkPlacement:
    """Stamp ``watermark`` corner to corner across ``page``."""
    width, height = page.rect.width, page.rect.height
    placement = watermark_placement(width, height, watermark.text, face.text_length)
    draw_text(
        page,
        watermark.text,
        placement.x,
        placement.y,
        face,
        placement.font_size,
        color=hex_to_rgb(watermark.color),
        opacity=watermark.opacity,
        rotate_degrees=-placement.angle_degrees,
    )
    return placement
