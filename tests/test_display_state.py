"""Tests for clock/intensity formatting, the tick formatter and AxisConfig."""

from datetime import date

import numpy as np
import pytest

from lightspec.editor.display_state import (
    DAY_END_SECONDS,
    AxisConfig,
    ClockTickFormatter,
    format_clock,
    format_intensity,
    format_tooltip,
    parse_clock,
    snap_seconds,
)


class TestClock:

    def test_parse(self):
        assert parse_clock("00:00:00") == 0
        assert parse_clock("10:00:00") == 36000
        assert parse_clock("23:59:59") == 86399

    @pytest.mark.parametrize("text", ["24:00:00", "1:00:00", "10:00", "10:60:00", "", "ab:cd:ef"])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_clock(text)

    def test_format_zero_padded(self):
        assert format_clock(3661) == "01:01:01"

    def test_format_truncates_fraction(self):
        assert format_clock(36000.99) == "10:00:00"

    def test_format_wraps_past_midnight(self):
        """Time of day carries no date, so extrapolated values wrap."""
        assert format_clock(86400 + 60) == "00:01:00"
        assert format_clock(-1) == "23:59:59"

    def test_snap_to_step(self):
        assert snap_seconds(36029.6, 1) == 36030.0
        assert snap_seconds(36029.6, 60) == 36000.0
        assert snap_seconds(36031.0, 60) == 36060.0

    def test_snap_disabled_for_non_positive_step(self):
        assert snap_seconds(12.34, 0) == pytest.approx(12.34)


class TestIntensityFormatting:

    def test_two_decimals(self):
        assert format_intensity(50) == "50.00"
        assert format_intensity(12.345678) == "12.35"

    def test_tooltip(self):
        assert format_tooltip("10:00:00", 49.999) == "10:00:00\n50.00"


class TestClockTickFormatter:

    def test_first_blank_even_and_last_labelled(self):
        labels = ClockTickFormatter().format_ticks([0, 3600, 7200, 10800])
        assert labels == ["", "", "02:00:00", "03:00:00"]

    def test_odd_inner_ticks_blank(self):
        labels = ClockTickFormatter().format_ticks([0, 3600, 7200, 10800, 14400])
        assert labels == ["", "", "02:00:00", "", "04:00:00"]

    def test_cursor_readout_without_position(self):
        assert ClockTickFormatter()(45296.7) == "12:34:56"

    def test_ticks_outside_view_not_counted(self):
        class View:
            def get_view_interval(self):
                return 0.0, 10800.0

        formatter = ClockTickFormatter()
        formatter.set_axis(View())
        labels = formatter.format_ticks([-3600, 0, 3600, 7200, 10800, 14400])
        assert labels == ["", "", "", "02:00:00", "03:00:00", ""]


class TestAxisConfig:

    def test_defaults_cover_one_day(self):
        cfg = AxisConfig(day=date(2024, 6, 1))
        assert cfg.xlim == (0.0, DAY_END_SECONDS)
        assert format_clock(cfg.x_max) == "23:59:59"
        assert (cfg.y_suggested_min, cfg.y_suggested_max) == (0.0, 100.0)

    def test_y_limits_suggested_when_empty(self):
        cfg = AxisConfig()
        assert cfg.y_limits([np.array([])]) == (0.0, 100.0)

    def test_y_limits_widen_for_data(self):
        cfg = AxisConfig()
        lo, hi = cfg.y_limits([np.array([10.0, 150.0]), np.array([-5.0])])
        assert lo == -5.0
        assert hi == 150.0

    def test_y_limits_never_shrink_below_suggestion(self):
        cfg = AxisConfig()
        assert cfg.y_limits([np.array([40.0, 60.0])]) == (0.0, 100.0)

    def test_clamp_x(self):
        cfg = AxisConfig()
        assert cfg.clamp_x(-10) == 0.0
        assert cfg.clamp_x(90000) == DAY_END_SECONDS
        assert cfg.clamp_x(500) == 500.0

    def test_rejects_inverted_ranges(self):
        with pytest.raises(ValueError):
            AxisConfig(x_min=10, x_max=5)
        with pytest.raises(ValueError):
            AxisConfig(y_suggested_min=100, y_suggested_max=0)
