"""Font faces used for page annotations and watermarks."""

from dataclasses import dataclass
from pathlib import Path

import fitz

from pdfmerge.exceptions import FontLoadError
from pdfmerge.utils.logging import get_logger

log = get_logger(__name__)

# Base-14 fallbacks: Helvetica and Helvetica-Bold
_BUILTIN_FACES = {
    "regular": "helv",
    "bold": "hebo",
    "black": "hebo",
}


@dataclass
class FontFace:
    """A measurable font that can be drawn on PyMuPDF pages.

    ``resource_name`` is the name the font is registered under on each
    page. Built-in faces need no registration.
    """

    resource_name: str
    font: fitz.Font
    buffer: bytes | None = None

    def text_length(self, text: str, font_size: float) -> float:
        return self.font.text_length(text, fontsize=font_size)

    def install(self, page: fitz.Page) -> None:
        """Make the face available on ``page``."""
        if self.buffer is not None:
            page.insert_font(fontname=self.resource_name, fontbuffer=self.buffer)


@dataclass
class FontSet:
    regular: FontFace
    bold: FontFace
    black: FontFace


def load_face(role: str, path: str | Path | None = None) -> FontFace:
    """Load one face from a font file, or the built-in fallback for ``role``.

    Raises:
        FontLoadError: If the file is missing or not a usable font
    """
    if path is None:
        builtin = _BUILTIN_FACES[role]
        try:
            return FontFace(resource_name=builtin, font=fitz.Font(builtin))
        except Exception as e:
            raise FontLoadError(builtin, cause=e) from e

    font_path = Path(path)
    try:
        buffer = font_path.read_bytes()
        font = fitz.Font(fontbuffer=buffer)
    except Exception as e:
        raise FontLoadError(str(font_path), cause=e) from e

    log.debug("Font loaded", role=role, path=str(font_path), name=font.name)
    return FontFace(resource_name=f"pm{role.capitalize()}", font=font, buffer=buffer)


def load_fonts(
    regular: str | Path | None = None,
    bold: str | Path | None = None,
    black: str | Path | None = None,
) -> FontSet:
    """Load the regular, bold and black faces for a run."""
    return FontSet(
        regular=load_face("regular", regular),
        bold=load_face("bold", bold),
        black=load_face("black", black),
    )
