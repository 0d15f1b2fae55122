"""Text drawing helpers.

Coordinates passed to these helpers use the PDF convention: origin at the
bottom-left corner, y growing upwards. They are converted to PyMuPDF's
top-left origin when drawing.
"""

from collections.abc import Callable

import fitz

from pdfmerge.compose.fonts import FontFace

RGB = tuple[float, float, float]


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert ``#RRGGBB`` into normalised (0-1) channels.

    >>> hex_to_rgb("#ff8000")
    (1.0, 0.5019607843137255, 0.0)
    """
    value = int(hex_color.lstrip("#"), 16)
    r = (value >> 16) & 255
    g = (value >> 8) & 255
    b = value & 255
    return r / 255, g / 255, b / 255


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy single-pass word wrap.

    A word joins the current line unless the widened line would exceed
    ``max_width`` and the line already holds a word; the last line is
    always emitted, even when empty.
    """
    lines: list[str] = []
    line = ""
    words_in_line = 0
    for word in text.split(" "):
        candidate = f"{line} {word}" if words_in_line else word
        if words_in_line and measure(candidate) > max_width:
            lines.append(line)
            line = word
            words_in_line = 1
        else:
            line = candidate
            words_in_line += 1
    lines.append(line)
    return lines


def draw_text(
    page: fitz.Page,
    text: str,
    x: float,
    y: float,
    face: FontFace,
    font_size: float,
    color: RGB = (0.0, 0.0, 0.0),
    opacity: float = 1.0,
    rotate_degrees: float = 0.0,
) -> None:
    """Draw a single line with its baseline starting at PDF point (x, y).

    ``rotate_degrees`` turns the text counter-clockwise around its start
    point; negative values run it downwards.
    """
    face.install(page)
    point = fitz.Point(x, page.rect.height - y)
    morph = (point, fitz.Matrix(rotate_degrees)) if rotate_degrees else None
    page.insert_text(
        point,
        text,
        fontsize=font_size,
        fontname=face.resource_name,
        color=color,
        fill_opacity=opacity,
        morph=morph,
    )


def draw_wrapped_text(
    page: fitz.Page,
    text: str,
    x: float,
    y: float,
    max_width: float,
    line_height: float,
    face: FontFace,
    font_size: float,
    hex_color: str,
) -> float:
    """Draw ``text`` wrapped to ``max_width`` starting at baseline ``y``.

    Returns:
        The baseline of the last line drawn
    """
    color = hex_to_rgb(hex_color)
    lines = wrap_text(text, max_width, lambda s: face.text_length(s, font_size))
    for index, line in enumerate(lines):
        if index:
            y -= line_height
        draw_text(page, line, x, y, face, font_size, color)
    return y
