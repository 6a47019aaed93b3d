"""Shared fixtures: a headless matplotlib backend and a fake linear chart."""

import matplotlib

matplotlib.use("Agg")

from datetime import date  # noqa: E402

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from lightspec.editor.coordinate_manager import Axis, CoordinateManager  # noqa: E402
from lightspec.editor.data_manager import SpectrumDataManager  # noqa: E402
from lightspec.editor.display_state import AxisConfig, CursorKind  # noqa: E402
from lightspec.editor.interaction import InteractionController  # noqa: E402
from lightspec.editor.spectrum_registry import SpectrumRegistry  # noqa: E402


class FakeChart:
    """
    Linear stand-in for the matplotlib chart.

    Pixel (100, 50) maps to (00:00:00, 0.0); one pixel is 60 s on x and
    0.5 intensity on y. Hit-test results are scripted through `hits`.
    """

    X0 = 100.0
    Y0 = 50.0
    SECONDS_PER_PX = 60.0
    INTENSITY_PER_PX = 0.5

    def __init__(self):
        self.hits = []
        self.cursor = CursorKind.DEFAULT
        self.prompt = None
        self.tooltip = None

    @classmethod
    def pixel_for(cls, seconds, intensity):
        return (
            cls.X0 + seconds / cls.SECONDS_PER_PX,
            cls.Y0 + intensity / cls.INTENSITY_PER_PX,
        )

    def query_domain_value(self, axis, pixel):
        if axis is Axis.X:
            return (pixel - self.X0) * self.SECONDS_PER_PX
        return (pixel - self.Y0) * self.INTENSITY_PER_PX

    def query_axis_pixel(self, axis, value):
        if axis is Axis.X:
            return self.X0 + value / self.SECONDS_PER_PX
        return self.Y0 + value / self.INTENSITY_PER_PX

    def hit_test(self, px, py):
        return list(self.hits)

    def set_cursor(self, kind):
        self.cursor = kind

    def show_delete_prompt(self, px, py):
        self.prompt = (px, py)

    def hide_delete_prompt(self):
        self.prompt = None

    def show_tooltip(self, text, px, py):
        self.tooltip = (text, px, py)

    def hide_tooltip(self):
        self.tooltip = None


class EditorParts:
    """Registry, store and controller wired to a FakeChart, recording redraws."""

    def __init__(self, drag_round=1.0):
        self.axis = AxisConfig(day=date(2024, 6, 1))
        self.renders = []
        self.data = SpectrumDataManager()
        self.registry = SpectrumRegistry(self.data, on_change=self.renders.append)
        self.chart = FakeChart()
        self.coord_manager = CoordinateManager(self.chart)
        self.controller = InteractionController(
            self.registry,
            self.data,
            self.coord_manager,
            self.chart,
            self.axis,
            on_change=self.renders.append,
            drag_round=drag_round,
        )


@pytest.fixture
def fake_chart():
    return FakeChart()


@pytest.fixture
def parts():
    return EditorParts()


@pytest.fixture
def axis_config():
    return AxisConfig(day=date(2024, 6, 1))


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
