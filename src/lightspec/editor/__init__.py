"""
Interactive point editor for light spectra.

This package contains the editing core (coordinate mapping, spectrum and
dataset state, pointer interaction) and its matplotlib rendering adapter.
"""

from lightspec.editor.coordinate_manager import Axis, CoordinateManager
from lightspec.editor.data_manager import Dataset, Point, SpectrumDataManager
from lightspec.editor.display_state import AxisConfig, CursorKind, RenderMode
from lightspec.editor.errors import (
    IndexOutOfRangeError,
    LastSpectrumError,
    SpectrumEditorError,
    StaleSelectionError,
)
from lightspec.editor.interaction import (
    HitElement,
    InteractionController,
    InteractionState,
    SelectedPoint,
)
from lightspec.editor.plot import SpectrumPlot
from lightspec.editor.session import SpectrumEditor
from lightspec.editor.spectrum_registry import Spectrum, SpectrumRegistry

__all__ = [
    "SpectrumEditor",
    "SpectrumPlot",
    "SpectrumRegistry",
    "SpectrumDataManager",
    "InteractionController",
    "CoordinateManager",
    "Spectrum",
    "Dataset",
    "Point",
    "SelectedPoint",
    "HitElement",
    "InteractionState",
    "AxisConfig",
    "Axis",
    "CursorKind",
    "RenderMode",
    "SpectrumEditorError",
    "IndexOutOfRangeError",
    "StaleSelectionError",
    "LastSpectrumError",
]
