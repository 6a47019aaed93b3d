"""
lightspec: build light spectra by clicking points on a time-intensity chart.
"""

from lightspec.app import configure_logging, run_editor
from lightspec.editor import (
    AxisConfig,
    Point,
    SpectrumEditor,
    SpectrumPlot,
)

__all__ = [
    "SpectrumEditor",
    "SpectrumPlot",
    "AxisConfig",
    "Point",
    "configure_logging",
    "run_editor",
]
