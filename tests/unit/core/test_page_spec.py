"""Tests for page geometry."""

import pytest

from pdfmerge.core.page_spec import PageSpec, mm_to_points, points_to_mm


def test_mm_to_points():
    assert mm_to_points(25.4) == pytest.approx(72.0)
    assert points_to_mm(72.0) == pytest.approx(25.4)


class TestPageSpec:
    """Tests for PageSpec.from_paper."""

    def test_a4_portrait(self):
        spec = PageSpec.from_paper("A4")
        assert spec.width_pt == pytest.approx(595.28, abs=0.01)
        assert spec.height_pt == pytest.approx(841.89, abs=0.01)
        assert spec.orientation == "portrait"

    def test_a4_landscape_swaps_axes(self):
        spec = PageSpec.from_paper("A4", landscape=True)
        assert spec.width_pt == pytest.approx(841.89, abs=0.01)
        assert spec.height_pt == pytest.approx(595.28, abs=0.01)
        assert spec.orientation == "landscape"

    @pytest.mark.parametrize(
        "paper,width_mm,height_mm",
        [("A0", 841, 1189), ("A1", 594, 841), ("A2", 420, 594), ("A3", 297, 420)],
    )
    def test_profiles(self, paper, width_mm, height_mm):
        spec = PageSpec.from_paper(paper)
        assert spec.width_mm == pytest.approx(width_mm)
        assert spec.height_mm == pytest.approx(height_mm)

    def test_lowercase_name(self):
        assert PageSpec.from_paper("a3") == PageSpec.from_paper("A3")

    def test_unknown_paper(self):
        with pytest.raises(ValueError, match="Unknown paper size"):
            PageSpec.from_paper("Letter")

    def test_pixel_budget(self):
        max_w, max_h = PageSpec.from_paper("A4").pixel_budget(300)
        assert max_w == pytest.approx(2480.3, abs=0.1)
        assert max_h == pytest.approx(3507.9, abs=0.1)
