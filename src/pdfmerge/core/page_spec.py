"""Output page geometry derived from the paper profile table."""

from dataclasses import dataclass
from typing import Literal

from pdfmerge.config.constants import DEFAULT_PAPER_SIZE, PAPER_DIMENSIONS_MM, POINTS_PER_MM

Orientation = Literal["portrait", "landscape"]


def mm_to_points(mm: float) -> float:
    return mm * POINTS_PER_MM


def points_to_mm(points: float) -> float:
    return points / POINTS_PER_MM


@dataclass(frozen=True)
class PageSpec:
    """Page size in points; width/height are already swapped for landscape."""

    width_pt: float
    height_pt: float
    orientation: Orientation = "portrait"

    @classmethod
    def from_paper(cls, paper_size: str = DEFAULT_PAPER_SIZE, landscape: bool = False) -> "PageSpec":
        try:
            width_mm, height_mm = PAPER_DIMENSIONS_MM[paper_size.upper()]
        except KeyError as e:
            raise ValueError(f"Unknown paper size: {paper_size}") from e
        width_pt, height_pt = mm_to_points(width_mm), mm_to_points(height_mm)
        if landscape:
            return cls(width_pt=height_pt, height_pt=width_pt, orientation="landscape")
        return cls(width_pt=width_pt, height_pt=height_pt, orientation="portrait")

    @property
    def width_mm(self) -> float:
        return points_to_mm(self.width_pt)

    @property
    def height_mm(self) -> float:
        return points_to_mm(self.height_pt)

    def pixel_budget(self, dpi: int) -> tuple[float, float]:
        """Maximum raster size for this page at ``dpi``."""
        per_mm = dpi / 25.4
        return self.width_mm * per_mm, self.height_mm * per_mm
