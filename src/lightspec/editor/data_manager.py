import math
import re
from dataclasses import dataclass, field, replace
from numbers import Real
from typing import List

import numpy as np
from loguru import logger

from .display_state import format_clock, parse_clock
from .errors import IndexOutOfRangeError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def normalize_color(color: str) -> str:
    """
    Validate an RGB hex color and return it in lower case.

    Raises
    ------
    ValueError
        If `color` is not of the form '#rrggbb'.
    """
    if not isinstance(color, str) or not _HEX_COLOR.match(color):
        raise ValueError(f"Invalid color {color!r}. Expected '#rrggbb'.")
    return color.lower()


@dataclass(frozen=True)
class Point:
    """
    A single point of a light spectrum.

    `x` is a wall-clock time "HH:MM:SS" with no date, `y` the intensity.
    Intensity is not clamped to the suggested axis range.
    """

    x: str
    y: float

    def __post_init__(self):
        parse_clock(self.x)
        if isinstance(self.y, bool) or not isinstance(self.y, Real):
            raise ValueError(f"Intensity must be a real number. Got {self.y!r}.")
        if not math.isfinite(self.y):
            raise ValueError(f"Intensity must be finite. Got {self.y!r}.")

    @classmethod
    def from_seconds(cls, seconds: float, y: float) -> "Point":
        return cls(format_clock(seconds), float(y))

    @property
    def seconds(self) -> int:
        return parse_clock(self.x)


@dataclass
class Dataset:
    """Ordered points of one spectrum plus the styling used to draw them."""

    color: str
    label: str = ""
    points: List[Point] = field(default_factory=list)
    border_width: float = 1.0
    point_radius: float = 6.0
    point_hit_radius: float = 6.0
    show_line: bool = True

    def __post_init__(self):
        self.color = normalize_color(self.color)

    def __len__(self) -> int:
        return len(self.points)

    def x_seconds(self) -> np.ndarray:
        return np.array([p.seconds for p in self.points], dtype=np.float64)

    def y_values(self) -> np.ndarray:
        return np.array([p.y for p in self.points], dtype=np.float64)


class SpectrumDataManager:
    """
    Stores one point sequence per spectrum, index-aligned with the registry.

    Points are kept in insertion order, never sorted by time. Invalid
    indices raise `IndexOutOfRangeError`; there are no silent no-ops.
    """

    def __init__(self):
        self._datasets: List[Dataset] = []

    @property
    def datasets(self) -> List[Dataset]:
        """Datasets in spectrum order. Treat as read-only."""
        return self._datasets

    @property
    def num_datasets(self) -> int:
        return len(self._datasets)

    def __len__(self) -> int:
        return len(self._datasets)

    def _check_spectrum_index(self, spectrum_index: int) -> Dataset:
        if not 0 <= spectrum_index < len(self._datasets):
            raise IndexOutOfRangeError(
                f"Invalid spectrum index: {spectrum_index}. Must be between 0 and {len(self._datasets) - 1}."
            )
        return self._datasets[spectrum_index]

    def _check_point_index(self, spectrum_index: int, point_index: int) -> Dataset:
        dataset = self._check_spectrum_index(spectrum_index)
        if not 0 <= point_index < len(dataset.points):
            raise IndexOutOfRangeError(
                f"Invalid point index: {point_index} for spectrum {spectrum_index}. "
                f"Must be between 0 and {len(dataset.points) - 1}."
            )
        return dataset

    def get_dataset(self, spectrum_index: int) -> Dataset:
        return self._check_spectrum_index(spectrum_index)

    def create_dataset(self, color: str, label: str = "") -> Dataset:
        """Append an empty dataset for a newly added spectrum."""
        dataset = Dataset(color=color, label=label)
        self._datasets.append(dataset)
        logger.debug(f"Created dataset {len(self._datasets) - 1} with color {dataset.color}")
        return dataset

    def remove_dataset(self, spectrum_index: int) -> Dataset:
        self._check_spectrum_index(spectrum_index)
        dataset = self._datasets.pop(spectrum_index)
        logger.debug(
            f"Removed dataset {spectrum_index} ({len(dataset.points)} points)"
        )
        return dataset

    def set_color(self, spectrum_index: int, color: str) -> None:
        """Set both stroke and fill color of a dataset."""
        dataset = self._check_spectrum_index(spectrum_index)
        dataset.color = normalize_color(color)

    def set_label(self, spectrum_index: int, label: str) -> None:
        self._check_spectrum_index(spectrum_index).label = label

    def append_point(self, spectrum_index: int, point: Point) -> int:
        """
        Append a point to the end of a spectrum's dataset.

        Parameters
        ----------
        spectrum_index : int
            Index of the spectrum to append to.
        point : Point
            The point to append.

        Returns
        -------
        int
            Index of the new point within the dataset.
        """
        if not isinstance(point, Point):
            raise ValueError(f"Expected a Point. Got {type(point)}.")
        dataset = self._check_spectrum_index(spectrum_index)
        dataset.points.append(point)
        logger.debug(
            f"Appended point ({point.x}, {point.y:.3f}) to spectrum {spectrum_index}"
        )
        return len(dataset.points) - 1

    def remove_point_at(self, spectrum_index: int, point_index: int) -> Point:
        dataset = self._check_point_index(spectrum_index, point_index)
        point = dataset.points.pop(point_index)
        logger.debug(
            f"Removed point {point_index} ({point.x}, {point.y:.3f}) from spectrum {spectrum_index}"
        )
        return point

    def point_at(self, spectrum_index: int, point_index: int) -> Point:
        return self._check_point_index(spectrum_index, point_index).points[point_index]

    def set_point_x(self, spectrum_index: int, point_index: int, x: str) -> Point:
        """Move a point along the time axis. Its intensity is left untouched."""
        dataset = self._check_point_index(spectrum_index, point_index)
        point = replace(dataset.points[point_index], x=x)
        dataset.points[point_index] = point
        return point
