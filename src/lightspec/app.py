import sys
from typing import Tuple

import matplotlib.pyplot as plt
from loguru import logger

from lightspec.editor.display_state import AxisConfig
from lightspec.editor.session import SpectrumEditor


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure loguru logging with specified level.

    Parameters
    ----------
    log_level : str, default="INFO"
        Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )


def run_editor(
    drag_round: float = 1.0,
    y_suggested_min: float = 0.0,
    y_suggested_max: float = 100.0,
    figsize: Tuple[float, float] = (10, 5),
    show: bool = True,
) -> SpectrumEditor:
    """
    Open an editor session for today's light spectra.

    Parameters
    ----------
    drag_round : float, default=1.0
        Dragged time values snap to multiples of this many seconds.
    y_suggested_min : float, default=0.0
        Lower bound of the suggested intensity range.
    y_suggested_max : float, default=100.0
        Upper bound of the suggested intensity range.
    figsize : Tuple[float, float], default=(10, 5)
        Figure size in inches.
    show : bool, default=True
        Block in `plt.show()` and close the session when the window closes.

    Returns
    -------
    SpectrumEditor
        The session. Already closed if `show` is True.
    """
    axis_config = AxisConfig(
        y_suggested_min=y_suggested_min, y_suggested_max=y_suggested_max
    )
    editor = SpectrumEditor(axis_config, figsize=figsize, drag_round=drag_round)
    editor.open()
    logger.success(
        f"Editor ready for {axis_config.day.isoformat()}: click to add points, click a point to delete it, drag to move it"
    )
    if show:
        try:
            plt.show()
        finally:
            editor.close()
    return editor
