from typing import Callable, Dict, List, Optional, Sequence, Tuple

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np
from loguru import logger
from matplotlib.backend_bases import MouseButton
from matplotlib.backend_tools import Cursors
from matplotlib.ticker import MultipleLocator

from .coordinate_manager import Axis
from .data_manager import Dataset
from .display_state import AxisConfig, ClockTickFormatter, CursorKind, RenderMode
from .interaction import HitElement

_CURSORS: Dict[CursorKind, Cursors] = {
    CursorKind.DEFAULT: Cursors.POINTER,
    CursorKind.POINTER: Cursors.HAND,
    CursorKind.GRABBING: Cursors.MOVE,
}


class SpectrumPlot:
    """
    Matplotlib rendering collaborator for the spectrum editor.

    Draws one line with markers per dataset on a clock-time x axis, answers
    hit-tests and coordinate queries in display pixels, and owns the
    on-canvas affordances (cursor, tooltip, delete prompt). It only reads the
    datasets it is given and never mutates them.
    """

    DEFAULT_FIGSIZE = (10, 5)
    DEFAULT_PROMPT_COLOR = "#dc3545"
    DEFAULT_TOOLTIP_COLOR = "0.15"
    DEFAULT_LEGEND_LOC = "upper right"

    def __init__(
        self,
        axis_config: AxisConfig,
        figsize: Tuple[float, float] = DEFAULT_FIGSIZE,
    ):
        """
        Initialise the plot. The figure is created on the first render.

        Parameters
        ----------
        axis_config : AxisConfig
            Axis window and labels.
        figsize : Tuple[float, float], default=(10, 5)
            Figure size in inches.
        """
        self.axis = axis_config
        self.figsize = figsize

        self.fig: Optional[mpl.figure.Figure] = None
        self.ax: Optional[mpl.axes.Axes] = None

        self._lines: List[mpl.lines.Line2D] = []
        self._hit_radii: List[float] = []

        self._prompt: Optional[mpl.text.Annotation] = None
        self._delete_button: Optional[mpl.text.Annotation] = None
        self._cancel_button: Optional[mpl.text.Annotation] = None
        self._tooltip: Optional[mpl.text.Annotation] = None

        self._legend: Optional[mpl.legend.Legend] = None
        self._last_legend_hash: Optional[int] = None

        self._controller = None
        self._callback_ids: List[int] = []
        self.cursor = CursorKind.DEFAULT

    # --- figure setup -------------------------------------------------------

    def _require_axes(self) -> mpl.axes.Axes:
        if self.ax is None:
            raise RuntimeError("Plot must be rendered before it can be queried.")
        return self.ax

    def create_figure(self) -> None:
        if self.fig is not None:
            logger.warning("Figure already created.")
            return

        logger.info("Creating spectrum editor figure...")
        self.fig, self.ax = plt.subplots(figsize=self.figsize)
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title(
                f"Light spectra {self.axis.day.isoformat()}"
            )
        self._apply_axis_config()
        self._setup_affordances()

    def _apply_axis_config(self) -> None:
        ax = self._require_axes()
        ax.set_xlim(self.axis.xlim)
        ax.xaxis.set_major_locator(MultipleLocator(self.axis.x_tick_step))
        ax.xaxis.set_major_formatter(ClockTickFormatter())
        ax.set_xlabel(self.axis.x_label, fontsize=self.axis.title_font_size)
        ax.set_ylabel(self.axis.y_label, fontsize=self.axis.title_font_size)
        ax.set_ylim(self.axis.y_suggested_min, self.axis.y_suggested_max)

    def _setup_affordances(self) -> None:
        ax = self._require_axes()
        common = dict(
            xy=(0, 0),
            xycoords="figure pixels",
            textcoords="offset points",
            visible=False,
            zorder=10,
        )
        self._prompt = ax.annotate(
            "Delete point?",
            xytext=(8, 10),
            bbox=dict(boxstyle="round", fc="white", ec="0.5"),
            **common,
        )
        self._delete_button = ax.annotate(
            "Delete",
            xytext=(8, -14),
            color="white",
            bbox=dict(boxstyle="round", fc=self.DEFAULT_PROMPT_COLOR, ec="none"),
            **common,
        )
        self._cancel_button = ax.annotate(
            "Cancel",
            xytext=(58, -14),
            bbox=dict(boxstyle="round", fc="0.9", ec="0.5"),
            **common,
        )
        self._tooltip = ax.annotate(
            "",
            xytext=(10, 10),
            color="white",
            fontsize="small",
            bbox=dict(boxstyle="round", fc=self.DEFAULT_TOOLTIP_COLOR, ec="none"),
            **common,
        )

    # --- render contract ----------------------------------------------------

    @staticmethod
    def _radius_to_markersize(radius_px: float, dpi: float) -> float:
        # markersize is a diameter in points
        return 2.0 * radius_px * 72.0 / dpi

    def render(
        self,
        datasets: Sequence[Dataset],
        axis_config: Optional[AxisConfig] = None,
        mode: RenderMode = RenderMode.IMMEDIATE,
    ) -> None:
        """
        Push the full current state for (re)drawing.

        Parameters
        ----------
        datasets : Sequence[Dataset]
            Datasets in spectrum order.
        axis_config : Optional[AxisConfig], default=None
            New axis configuration. If None, the current one is kept.
        mode : RenderMode, default=RenderMode.IMMEDIATE
            IMMEDIATE schedules a redraw; ANIMATED redraws synchronously.
        """
        if self.fig is None:
            self.create_figure()
        ax = self._require_axes()

        if axis_config is not None and axis_config != self.axis:
            logger.info("Axis configuration changed, reapplying")
            self.axis = axis_config
            self._apply_axis_config()

        while len(self._lines) > len(datasets):
            self._lines.pop().remove()
        while len(self._lines) < len(datasets):
            (line,) = ax.plot([], [], marker="o")
            self._lines.append(line)

        dpi = self.fig.dpi
        for i, (line, dataset) in enumerate(zip(self._lines, datasets)):
            line.set_data(dataset.x_seconds(), dataset.y_values())
            line.set_color(dataset.color)
            line.set_markerfacecolor(dataset.color)
            line.set_markeredgecolor(dataset.color)
            line.set_linewidth(dataset.border_width)
            line.set_linestyle("-" if dataset.show_line else "None")
            line.set_markersize(self._radius_to_markersize(dataset.point_radius, dpi))
            # Underscore labels are skipped by the legend
            line.set_label(dataset.label if dataset.label else f"_spectrum{i}")
        self._hit_radii = [dataset.point_hit_radius for dataset in datasets]

        ax.set_ylim(self.axis.y_limits(dataset.y_values() for dataset in datasets))
        self._update_legend()

        logger.debug(
            f"Rendered {len(datasets)} datasets ({sum(len(d) for d in datasets)} points), mode={mode.value}"
        )
        if mode is RenderMode.ANIMATED:
            self.fig.canvas.draw()
        else:
            self.fig.canvas.draw_idle()

    def _update_legend(self) -> None:
        """Rebuild the legend from titled spectra, only when its content changed."""
        handles, labels = self.ax.get_legend_handles_labels()
        # Legend entries copy the line style when built, so restyles must rebuild
        styles = tuple((h.get_color(), h.get_linestyle()) for h in handles)
        current_hash = hash(tuple(id(h) for h in handles) + tuple(labels) + styles)
        if self._last_legend_hash == current_hash:
            return

        if self._legend is not None:
            self._legend.remove()
        if handles:
            self._legend = self.ax.legend(handles, labels, loc=self.DEFAULT_LEGEND_LOC)
        else:
            self._legend = None
        self._last_legend_hash = current_hash

    def hit_test(self, px: float, py: float) -> List[HitElement]:
        """
        Rendered points within their hit radius of a display pixel.

        Returns
        -------
        List[HitElement]
            Hits ordered nearest first; empty if the pixel is over empty area.
        """
        ax = self._require_axes()
        candidates = []
        for dataset_index, line in enumerate(self._lines):
            xy = line.get_xydata()
            if len(xy) == 0:
                continue
            pixels = ax.transData.transform(xy)
            dist = np.hypot(pixels[:, 0] - px, pixels[:, 1] - py)
            radius = self._hit_radii[dataset_index]
            for point_index in np.flatnonzero(dist <= radius):
                candidates.append(
                    (float(dist[point_index]), dataset_index, int(point_index))
                )
        candidates.sort(key=lambda c: c[0])
        return [HitElement(d, p) for _, d, p in candidates]

    def query_axis_pixel(self, axis: Axis, value: float) -> float:
        ax = self._require_axes()
        if axis is Axis.X:
            return float(ax.transData.transform((value, 0.0))[0])
        return float(ax.transData.transform((0.0, value))[1])

    def query_domain_value(self, axis: Axis, pixel: float) -> float:
        inverse = self._require_axes().transData.inverted()
        if axis is Axis.X:
            return float(inverse.transform((pixel, 0.0))[0])
        return float(inverse.transform((0.0, pixel))[1])

    # --- affordances ----------------------------------------------------------

    def set_cursor(self, kind: CursorKind) -> None:
        if kind is self.cursor:
            return
        self.cursor = kind
        if self.fig is not None:
            self.fig.canvas.set_cursor(_CURSORS[kind])

    @property
    def delete_prompt_visible(self) -> bool:
        return self._prompt is not None and self._prompt.get_visible()

    def show_delete_prompt(self, px: float, py: float) -> None:
        self._require_axes()
        for artist in (self._prompt, self._delete_button, self._cancel_button):
            artist.xy = (px, py)
            artist.set_visible(True)
        self.fig.canvas.draw_idle()

    def hide_delete_prompt(self) -> None:
        if not self.delete_prompt_visible:
            return
        for artist in (self._prompt, self._delete_button, self._cancel_button):
            artist.set_visible(False)
        self.fig.canvas.draw_idle()

    def show_tooltip(self, text: str, px: float, py: float) -> None:
        self._require_axes()
        self._tooltip.set_text(text)
        self._tooltip.xy = (px, py)
        self._tooltip.set_visible(True)
        self.fig.canvas.draw_idle()

    def hide_tooltip(self) -> None:
        if self._tooltip is None or not self._tooltip.get_visible():
            return
        self._tooltip.set_visible(False)
        self.fig.canvas.draw_idle()

    # --- event wiring -------------------------------------------------------

    def connect(self, controller) -> None:
        """Route matplotlib mouse and key events to an interaction controller."""
        if self.fig is None:
            raise RuntimeError("Figure must be created before connecting callbacks.")
        if self._callback_ids:
            self.disconnect()

        self._controller = controller
        canvas = self.fig.canvas
        handlers: Dict[str, Callable] = {
            "button_press_event": self._on_press,
            "motion_notify_event": self._on_motion,
            "button_release_event": self._on_release,
            "key_press_event": self._on_key,
        }
        self._callback_ids = [
            canvas.mpl_connect(name, handler) for name, handler in handlers.items()
        ]
        logger.debug(f"Connected {len(self._callback_ids)} canvas callbacks")

    def disconnect(self) -> None:
        if self.fig is not None:
            for cid in self._callback_ids:
                self.fig.canvas.mpl_disconnect(cid)
        self._callback_ids = []
        self._controller = None

    def close(self) -> None:
        self.disconnect()
        if self.fig is not None:
            plt.close(self.fig)
        self.fig = None
        self.ax = None
        self._lines = []
        self._hit_radii = []
        self._legend = None
        self._last_legend_hash = None

    def _toolbar_active(self) -> bool:
        """True while the navigation toolbar is in pan or zoom mode."""
        toolbar = getattr(self.fig.canvas, "toolbar", None)
        return bool(toolbar is not None and getattr(toolbar, "mode", ""))

    def _on_press(self, event) -> None:
        if self._controller is None or event.button != MouseButton.LEFT:
            return
        if self.delete_prompt_visible:
            if self._delete_button.contains(event)[0]:
                self._controller.confirm_delete()
                return
            if self._cancel_button.contains(event)[0]:
                self._controller.cancel_delete()
                return
        if event.inaxes is not self.ax or self._toolbar_active():
            return
        self._controller.on_press(event.x, event.y)

    def _on_motion(self, event) -> None:
        if self._controller is None or event.x is None or event.y is None:
            return
        self._controller.on_motion(event.x, event.y)

    def _on_release(self, event) -> None:
        if self._controller is None or event.button != MouseButton.LEFT:
            return
        if event.x is None or event.y is None:
            return
        self._controller.on_release(event.x, event.y)

    def _on_key(self, event) -> None:
        if self._controller is None or not self.delete_prompt_visible:
            return
        if event.key in ("enter", "delete"):
            self._controller.confirm_delete()
        elif event.key == "escape":
            self._controller.cancel_delete()
