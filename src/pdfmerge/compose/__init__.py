"""Page composition: layout, annotations and watermarks."""

from pdfmerge.compose.composer import PageComposer, image_placement
from pdfmerge.compose.fonts import FontFace, FontSet, load_fonts
from pdfmerge.compose.text import draw_wrapped_text, hex_to_rgb, wrap_text
from pdfmerge.compose.watermark import (
    add_watermark_to_page,
    calculate_watermark_font_size,
    watermark_placement,
)

__all__ = [
    "FontFace",
    "FontSet",
    "PageComposer",
    "add_watermark_to_page",
    "calculate_watermark_font_size",
    "draw_wrapped_text",
    "hex_to_rgb",
    "image_placement",
    "load_fonts",
    "watermark_placement",
    "wrap_text",
]
