from enum import Enum
from typing import Tuple

from loguru import logger


class Axis(str, Enum):
    X = "x"
    Y = "y"


class CoordinateManager:
    """
    Handles coordinate transformations between display pixels and domain values.

    The x domain is seconds since midnight, the y domain is intensity. The
    chart owns the actual scale (including any zoom or pan), so every
    conversion is delegated to it rather than re-derived here.
    """

    def __init__(self, chart):
        """
        Initialise the coordinate manager.

        Parameters
        ----------
        chart : SpectrumPlot
            Rendering collaborator providing `query_axis_pixel` and
            `query_domain_value`.
        """
        self.chart = chart

    def pixel_to_domain(self, px: float, py: float) -> Tuple[float, float]:
        """
        Convert a display pixel position to (seconds, intensity).

        No clamping is applied: pixels outside the plot area extrapolate
        linearly.
        """
        seconds = float(self.chart.query_domain_value(Axis.X, px))
        intensity = float(self.chart.query_domain_value(Axis.Y, py))
        logger.debug(
            f"Converting pixel ({px:.1f}, {py:.1f}) to domain ({seconds:.3f}s, {intensity:.3f})"
        )
        return seconds, intensity

    def domain_to_pixel(self, seconds: float, intensity: float) -> Tuple[float, float]:
        """Convert (seconds, intensity) to a display pixel position."""
        px = float(self.chart.query_axis_pixel(Axis.X, seconds))
        py = float(self.chart.query_axis_pixel(Axis.Y, intensity))
        return px, py
