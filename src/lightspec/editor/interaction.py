import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from .coordinate_manager import CoordinateManager
from .data_manager import Point, SpectrumDataManager
from .display_state import (
    AxisConfig,
    CursorKind,
    RenderMode,
    format_clock,
    format_tooltip,
    snap_seconds,
)
from .errors import SpectrumEditorError
from .spectrum_registry import SpectrumRegistry


class InteractionState(str, Enum):
    IDLE = "idle"
    PRESSED = "pressed"  # button down on a point, click or drag not yet decided
    DRAGGING = "dragging"
    PENDING_DELETE = "pending_delete"


@dataclass(frozen=True)
class SelectedPoint:
    spectrum_index: int = -1
    point_index: int = -1

    @property
    def is_none(self) -> bool:
        return self.spectrum_index < 0 or self.point_index < 0


NO_SELECTION = SelectedPoint()


@dataclass(frozen=True)
class HitElement:
    """A rendered point under the pointer, as reported by the chart."""

    dataset_index: int
    point_index: int


@dataclass(frozen=True)
class _Press:
    hit: HitElement
    px: float
    py: float


class InteractionController:
    """
    State machine turning pointer input into dataset mutations.

    A press on empty chart area creates a point in the selected spectrum. A
    press and release on a point opens the delete prompt. A press followed
    by motion drags the point along the time axis only; its intensity never
    changes.

    All handlers run to completion on the UI event loop. Invalid or stale
    indices are logged and dropped, leaving the controller idle.
    """

    DEFAULT_DRAG_THRESHOLD_PX = 3.0
    DEFAULT_DRAG_ROUND = 1.0  # seconds

    def __init__(
        self,
        registry: SpectrumRegistry,
        data: SpectrumDataManager,
        coord_manager: CoordinateManager,
        chart,
        axis_config: AxisConfig,
        on_change: Optional[Callable[[RenderMode], None]] = None,
        drag_threshold_px: float = DEFAULT_DRAG_THRESHOLD_PX,
        drag_round: float = DEFAULT_DRAG_ROUND,
    ):
        """
        Initialise the controller.

        Parameters
        ----------
        registry : SpectrumRegistry
            Provides the selected spectrum new points are added to.
        data : SpectrumDataManager
            Dataset store mutated by the controller.
        coord_manager : CoordinateManager
            Pixel to domain conversion.
        chart : SpectrumPlot
            Hit-testing and affordances (cursor, tooltip, delete prompt).
        axis_config : AxisConfig
            Axis window; dragged points are kept inside its time range.
        on_change : Optional[Callable[[RenderMode], None]], default=None
            Redraw request, called after every mutation.
        drag_threshold_px : float, default=3.0
            Pointer travel in pixels before a press on a point becomes a drag.
        drag_round : float, default=1.0
            Dragged time values snap to multiples of this many seconds.
        """
        self.registry = registry
        self.data = data
        self.coord_manager = coord_manager
        self.chart = chart
        self.axis = axis_config
        self._on_change = on_change
        self.drag_threshold_px = drag_threshold_px
        self.drag_round = drag_round

        self.state = InteractionState.IDLE
        self.selected_point = NO_SELECTION
        self._press: Optional[_Press] = None
        registry.add_remove_listener(self.on_spectrum_removed)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(RenderMode.IMMEDIATE)

    def _reset(self) -> None:
        self.state = InteractionState.IDLE
        self.selected_point = NO_SELECTION
        self._press = None

    # --- pointer events -------------------------------------------------

    def on_press(self, px: float, py: float) -> None:
        if self.state is InteractionState.PENDING_DELETE:
            logger.debug("Press while delete prompt open; cancelling prompt")
            self.cancel_delete()
        elif self.state is not InteractionState.IDLE:
            # The release of the previous gesture never arrived
            logger.warning(f"Press in state {self.state.value}; abandoning gesture")
            self.abandon_gesture()

        hits = self.chart.hit_test(px, py)
        if not hits:
            self._create_point(px, py)
            return

        hit = hits[0]
        logger.debug(
            f"Press on point {hit.point_index} of spectrum {hit.dataset_index}"
        )
        self._press = _Press(hit, px, py)
        self.state = InteractionState.PRESSED

    def on_motion(self, px: float, py: float) -> None:
        if self.state is InteractionState.PRESSED:
            travel = math.hypot(px - self._press.px, py - self._press.py)
            if travel < self.drag_threshold_px:
                return
            self.state = InteractionState.DRAGGING
            self.chart.set_cursor(CursorKind.GRABBING)
            logger.debug(
                f"Dragging point {self._press.hit.point_index} of spectrum {self._press.hit.dataset_index}"
            )

        if self.state is InteractionState.DRAGGING:
            self._drag_to(px)
            return

        self._hover(px, py)

    def on_release(self, px: float, py: float) -> None:
        if self.state is InteractionState.PRESSED:
            press = self._press
            self._press = None
            self.selected_point = SelectedPoint(
                press.hit.dataset_index, press.hit.point_index
            )
            self.state = InteractionState.PENDING_DELETE
            self.chart.hide_tooltip()
            self.chart.show_delete_prompt(press.px, press.py)
            logger.debug(f"Delete prompt opened for {self.selected_point}")
        elif self.state is InteractionState.DRAGGING:
            self._drag_to(px)
            hit = self._press.hit
            self._press = None
            self.state = InteractionState.IDLE
            self.chart.set_cursor(CursorKind.DEFAULT)
            self.chart.hide_tooltip()
            try:
                point = self.data.point_at(hit.dataset_index, hit.point_index)
            except SpectrumEditorError as e:
                logger.warning(f"Dragged point vanished before release: {e}")
                return
            logger.info(
                f"Moved point {hit.point_index} of spectrum {hit.dataset_index} to {point.x}"
            )

    # --- delete confirmation ------------------------------------------------

    def confirm_delete(self) -> None:
        self.chart.hide_delete_prompt()
        if self.state is not InteractionState.PENDING_DELETE:
            logger.debug(f"Ignoring delete confirmation in state {self.state.value}")
            return

        selected = self.selected_point
        self._reset()
        try:
            point = self.data.remove_point_at(
                selected.spectrum_index, selected.point_index
            )
        except SpectrumEditorError as e:
            logger.warning(f"Discarding stale point selection {selected}: {e}")
            return
        logger.info(
            f"Deleted point ({point.x}, {point.y:.2f}) from spectrum {selected.spectrum_index}"
        )
        self._notify()

    def cancel_delete(self) -> None:
        self.chart.hide_delete_prompt()
        if self.state is InteractionState.PENDING_DELETE:
            self._reset()

    def abandon_gesture(self) -> None:
        """
        Drop any gesture in progress and return to idle.

        A point already moved by a drag keeps its last position. An open
        delete prompt is closed without deleting.
        """
        self.chart.hide_delete_prompt()
        self.chart.hide_tooltip()
        self.chart.set_cursor(CursorKind.DEFAULT)
        self._reset()

    def on_spectrum_removed(self, index: int) -> None:
        """Registry hook: spectrum indices are about to shift."""
        if self.state is not InteractionState.IDLE:
            logger.debug(
                f"Spectrum {index} removed in state {self.state.value}; abandoning gesture"
            )
            self.abandon_gesture()

    # --- helpers ------------------------------------------------------------

    def _create_point(self, px: float, py: float) -> None:
        seconds, intensity = self.coord_manager.pixel_to_domain(px, py)
        point = Point.from_seconds(seconds, intensity)
        spectrum_index = self.registry.selected_index
        try:
            self.data.append_point(spectrum_index, point)
        except SpectrumEditorError as e:
            logger.warning(f"Cannot add point to spectrum {spectrum_index}: {e}")
            return
        self._notify()

    def _drag_to(self, px: float) -> None:
        hit = self._press.hit
        seconds, _ = self.coord_manager.pixel_to_domain(px, 0.0)
        seconds = self.axis.clamp_x(snap_seconds(seconds, self.drag_round))
        try:
            point = self.data.set_point_x(
                hit.dataset_index, hit.point_index, format_clock(seconds)
            )
        except SpectrumEditorError as e:
            logger.warning(f"Abandoning drag: {e}")
            self._reset()
            self.chart.set_cursor(CursorKind.DEFAULT)
            return
        self._notify()
        self._show_tooltip_for(point)

    def _hover(self, px: float, py: float) -> None:
        hits = self.chart.hit_test(px, py)
        if not hits:
            self.chart.set_cursor(CursorKind.DEFAULT)
            self.chart.hide_tooltip()
            return
        self.chart.set_cursor(CursorKind.POINTER)
        hit = hits[0]
        try:
            point = self.data.point_at(hit.dataset_index, hit.point_index)
        except SpectrumEditorError:
            self.chart.hide_tooltip()
            return
        self._show_tooltip_for(point)

    def _show_tooltip_for(self, point: Point) -> None:
        px, py = self.coord_manager.domain_to_pixel(point.seconds, point.y)
        self.chart.show_tooltip(format_tooltip(point.x, point.y), px, py)
