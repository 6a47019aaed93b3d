from warnings import warn

import matplotlib as mpl

from lightspec import configure_logging, run_editor

# --- User configuration dictionary ---
CONFIG = {
    "LOG_LEVEL": "INFO",  # logging level: DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    "DRAG_ROUND": 60,  # dragged points snap to this many seconds (60 = whole minutes)
    "Y_SUGGESTED_MIN": 0,  # intensity axis lower bound, widened by data below it
    "Y_SUGGESTED_MAX": 100,  # intensity axis upper bound, widened by data above it
    "FIGSIZE": (12, 5),  # figure size in inches
}


def main() -> None:
    """
    Open the spectrum editor with the settings in CONFIG.
    """
    configure_logging(CONFIG.get("LOG_LEVEL", "INFO"))

    run_editor(
        drag_round=CONFIG.get("DRAG_ROUND", 1.0),
        y_suggested_min=CONFIG.get("Y_SUGGESTED_MIN", 0.0),
        y_suggested_max=CONFIG.get("Y_SUGGESTED_MAX", 100.0),
        figsize=CONFIG.get("FIGSIZE", (10, 5)),
    )


if __name__ == "__main__":
    # Set Matplotlib rcParams directly here
    for optn, val in {
        "backend": "QtAgg",
        "figure.dpi": 90,
        "font.family": ("sans-serif",),
        "font.size": 11,
        "legend.fontsize": "small",
        "xtick.labelsize": 10,
        "xtick.direction": "in",
        "ytick.labelsize": 10,
        "ytick.direction": "in",
        "axes.formatter.useoffset": False,
        "axes.linewidth": 1.4,
        "toolbar": "toolbar2",
    }.items():
        if isinstance(val, (list, tuple)):
            val = tuple(val)
        try:
            mpl.rcParams[optn] = val
        except KeyError:
            warn(f"mpl rcparams key '{optn}' not recognised as a valid rc parameter.")
    main()
