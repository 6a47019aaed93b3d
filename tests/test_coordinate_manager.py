"""Tests for pixel <-> domain conversion through the chart's scales."""

import pytest

from lightspec.editor.coordinate_manager import CoordinateManager


class TestCoordinateManager:

    def test_pixel_to_domain(self, fake_chart):
        cm = CoordinateManager(fake_chart)
        seconds, intensity = cm.pixel_to_domain(700.0, 150.0)
        assert seconds == pytest.approx(36000.0)
        assert intensity == pytest.approx(50.0)

    def test_domain_to_pixel(self, fake_chart):
        cm = CoordinateManager(fake_chart)
        assert cm.domain_to_pixel(36000.0, 50.0) == pytest.approx((700.0, 150.0))

    @pytest.mark.parametrize(
        "px, py", [(100.0, 50.0), (123.4, 87.6), (1539.0, 250.0), (820.25, 51.5)]
    )
    def test_round_trip(self, fake_chart, px, py):
        cm = CoordinateManager(fake_chart)
        back = cm.domain_to_pixel(*cm.pixel_to_domain(px, py))
        assert back == pytest.approx((px, py), abs=1e-9)

    def test_outside_plot_area_extrapolates(self, fake_chart):
        """Pixels left of / below the plot area yield values outside the window."""
        cm = CoordinateManager(fake_chart)
        seconds, intensity = cm.pixel_to_domain(40.0, 10.0)
        assert seconds == pytest.approx(-3600.0)
        assert intensity == pytest.approx(-20.0)
