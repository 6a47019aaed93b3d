import math
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, Tuple

import numpy as np
from matplotlib.ticker import Formatter

# Axis window: one wall-clock day, no date component
SECONDS_PER_DAY = 86400
DAY_START_SECONDS = 0.0
DAY_END_SECONDS = float(SECONDS_PER_DAY - 1)  # 23:59:59

CLOCK_FORMAT = "%H:%M:%S"
INTENSITY_DECIMALS = 2


class RenderMode(str, Enum):
    """How the rendering collaborator should apply a redraw."""

    IMMEDIATE = "none"
    ANIMATED = "default"


class CursorKind(str, Enum):
    DEFAULT = "default"
    POINTER = "pointer"
    GRABBING = "grabbing"


def parse_clock(text: str) -> int:
    """
    Parse a "HH:MM:SS" clock string into seconds since midnight.

    Parameters
    ----------
    text : str
        24h zero-padded wall-clock string.

    Returns
    -------
    int
        Seconds since midnight.

    Raises
    ------
    ValueError
        If the string is not a valid clock value.
    """
    if not isinstance(text, str) or len(text) != 8:
        raise ValueError(f"Invalid clock value {text!r}. Expected 'HH:MM:SS'.")
    t = datetime.strptime(text, CLOCK_FORMAT).time()
    return t.hour * 3600 + t.minute * 60 + t.second


def format_clock(seconds: float) -> str:
    """
    Format seconds since midnight as "HH:MM:SS".

    Fractional seconds are truncated and values outside one day wrap around,
    since a time of day carries no date.
    """
    total = int(math.floor(seconds)) % SECONDS_PER_DAY
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return time(hours, minutes, secs).strftime(CLOCK_FORMAT)


def snap_seconds(seconds: float, step: float = 1.0) -> float:
    """Round a time value to the nearest multiple of `step` seconds."""
    if step <= 0:
        return float(seconds)
    return float(round(seconds / step) * step)


def format_intensity(value: float) -> str:
    return f"{value:.{INTENSITY_DECIMALS}f}"


def format_tooltip(x: str, y: float) -> str:
    """Tooltip text for a point: clock title above the intensity label."""
    return f"{x}\n{format_intensity(y)}"


class ClockTickFormatter(Formatter):
    """
    Tick formatter for the time axis.

    Labels every second visible tick and the last one, leaving the first tick
    blank so the label does not collide with the intensity axis. Ticks the
    locator places outside the view are not counted.
    """

    def __call__(self, x, pos=None):
        return format_clock(x)

    def format_ticks(self, values):
        values = np.asarray(values, dtype=float)
        visible = np.ones(len(values), dtype=bool)
        if self.axis is not None:
            lo, hi = sorted(self.axis.get_view_interval())
            visible = (values >= lo) & (values <= hi)

        labels = [""] * len(values)
        shown = np.flatnonzero(visible)
        for rank, i in enumerate(shown):
            if rank > 0 and (rank == len(shown) - 1 or rank % 2 == 0):
                labels[i] = format_clock(values[i])
        return labels


@dataclass(frozen=True)
class AxisConfig:
    """
    Fixed axis window for one render session.

    The x axis is linear in clock time across a single day. The y range is a
    suggestion: actual data outside it widens the limits instead of being
    clamped.
    """

    day: date = field(default_factory=date.today)
    x_min: float = DAY_START_SECONDS
    x_max: float = DAY_END_SECONDS
    y_suggested_min: float = 0.0
    y_suggested_max: float = 100.0
    x_label: str = "Time"
    y_label: str = "Intensity"
    title_font_size: int = 16
    x_tick_step: float = 3600.0

    def __post_init__(self):
        if self.x_max <= self.x_min:
            raise ValueError(
                f"x_max ({self.x_max}) must be greater than x_min ({self.x_min})."
            )
        if self.y_suggested_max <= self.y_suggested_min:
            raise ValueError(
                f"y_suggested_max ({self.y_suggested_max}) must be greater than "
                f"y_suggested_min ({self.y_suggested_min})."
            )

    @property
    def xlim(self) -> Tuple[float, float]:
        return self.x_min, self.x_max

    def clamp_x(self, seconds: float) -> float:
        return float(min(max(seconds, self.x_min), self.x_max))

    def y_limits(self, values: Iterable[np.ndarray]) -> Tuple[float, float]:
        """
        Y-axis limits covering the suggested range and all data values.

        Parameters
        ----------
        values : Iterable[np.ndarray]
            Intensity arrays, one per dataset. Empty arrays are ignored.

        Returns
        -------
        Tuple[float, float]
            Lower and upper y limits.
        """
        y_lo, y_hi = self.y_suggested_min, self.y_suggested_max
        for arr in values:
            if arr.size == 0:
                continue
            y_lo = min(y_lo, float(np.min(arr)))
            y_hi = max(y_hi, float(np.max(arr)))
        return y_lo, y_hi
