from typing import Optional, Tuple

from loguru import logger

from .coordinate_manager import CoordinateManager
from .data_manager import SpectrumDataManager
from .display_state import AxisConfig, RenderMode
from .interaction import InteractionController
from .plot import SpectrumPlot
from .spectrum_registry import Spectrum, SpectrumRegistry


class SpectrumEditor:
    """
    One editing session: owns the spectra, their datasets and the chart.

    Construct it, call `open()` to draw and start listening for pointer
    events, and `close()` to tear it down. It can also be used as a context
    manager. Nothing is shared between sessions.
    """

    def __init__(
        self,
        axis_config: Optional[AxisConfig] = None,
        plot: Optional[SpectrumPlot] = None,
        figsize: Tuple[float, float] = SpectrumPlot.DEFAULT_FIGSIZE,
        drag_round: float = InteractionController.DEFAULT_DRAG_ROUND,
        drag_threshold_px: float = InteractionController.DEFAULT_DRAG_THRESHOLD_PX,
    ):
        """
        Initialise the session with a single default spectrum.

        Parameters
        ----------
        axis_config : Optional[AxisConfig], default=None
            Axis window. If None, today's full day with intensity 0-100.
        plot : Optional[SpectrumPlot], default=None
            Rendering collaborator. If None, a new `SpectrumPlot` is created.
        figsize : Tuple[float, float], default=(10, 5)
            Figure size used when `plot` is None.
        drag_round : float, default=1.0
            Dragged time values snap to multiples of this many seconds.
        drag_threshold_px : float, default=3.0
            Pointer travel before a press on a point becomes a drag.
        """
        self.axis = axis_config if axis_config is not None else AxisConfig()
        self.data = SpectrumDataManager()
        self.registry = SpectrumRegistry(self.data, on_change=self.request_render)
        self.plot = plot if plot is not None else SpectrumPlot(self.axis, figsize=figsize)
        self.coord_manager = CoordinateManager(self.plot)
        self.controller = InteractionController(
            self.registry,
            self.data,
            self.coord_manager,
            self.plot,
            self.axis,
            on_change=self.request_render,
            drag_threshold_px=drag_threshold_px,
            drag_round=drag_round,
        )
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        if self._open:
            logger.warning("Editor session already open.")
            return
        self.plot.render(self.data.datasets, self.axis, RenderMode.ANIMATED)
        self.plot.connect(self.controller)
        self._open = True
        logger.info(f"Editor session opened with {len(self.registry)} spectra")

    def close(self) -> None:
        if not self._open:
            return
        self.controller.cancel_delete()
        self.plot.close()
        self._open = False
        logger.info("Editor session closed")

    def __enter__(self) -> "SpectrumEditor":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def request_render(self, mode: RenderMode = RenderMode.IMMEDIATE) -> None:
        """Redraw the current state. Ignored until the session is open."""
        if not self._open:
            return
        self.plot.render(self.data.datasets, self.axis, mode)

    # --- spectrum list actions ------------------------------------------------

    def add_spectrum(self) -> Spectrum:
        return self.registry.add_spectrum()

    def remove_spectrum(self, index: int) -> Spectrum:
        # The controller drops any pending delete through the registry hook
        return self.registry.remove_spectrum(index)

    def select_spectrum(self, index: int) -> None:
        self.registry.select_spectrum(index)

    def update_color(self, index: int, color: str) -> None:
        self.registry.update_color(index, color)

    def rename_spectrum(self, index: int, title: str) -> None:
        self.registry.rename_spectrum(index, title)
