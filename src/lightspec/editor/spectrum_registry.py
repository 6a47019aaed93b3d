import itertools
from dataclasses import dataclass
from typing import Callable, List, Optional

from loguru import logger

from .data_manager import SpectrumDataManager, normalize_color
from .display_state import RenderMode
from .errors import IndexOutOfRangeError, LastSpectrumError, StaleSelectionError


@dataclass
class Spectrum:
    title: str
    color: str
    is_default: bool = False
    id: int = -1  # assigned by the owning registry

    def __post_init__(self):
        self.color = normalize_color(self.color)


class SpectrumRegistry:
    """
    Ordered list of named, colored spectra and the currently selected one.

    Keeps `SpectrumDataManager` index-aligned: adding a spectrum creates its
    dataset, removing one drops its dataset. At least one spectrum always
    exists.
    """

    DEFAULT_TITLE = "none"
    DEFAULT_COLOR = "#ffffff"
    NEW_SPECTRUM_TITLE = ""
    NEW_SPECTRUM_COLOR = "#000000"

    def __init__(
        self,
        data: SpectrumDataManager,
        on_change: Optional[Callable[[RenderMode], None]] = None,
    ):
        """
        Initialise the registry with the default spectrum.

        Parameters
        ----------
        data : SpectrumDataManager
            Dataset store kept aligned with the spectra. Must be empty.
        on_change : Optional[Callable[[RenderMode], None]], default=None
            Called with the render mode whenever a change needs a redraw.
        """
        if data.num_datasets != 0:
            raise ValueError(
                f"Dataset store must start empty. Got {data.num_datasets} datasets."
            )
        self.data = data
        self._on_change = on_change
        self._spectra: List[Spectrum] = []
        self._ids = itertools.count()
        self._remove_listeners: List[Callable[[int], None]] = []

        default = Spectrum(self.DEFAULT_TITLE, self.DEFAULT_COLOR, is_default=True)
        self._attach(default)
        self.selected_index = 0

    @property
    def spectra(self) -> List[Spectrum]:
        """Spectra in display order. Treat as read-only."""
        return self._spectra

    def __len__(self) -> int:
        return len(self._spectra)

    @property
    def selected_spectrum(self) -> Spectrum:
        if not 0 <= self.selected_index < len(self._spectra):
            raise StaleSelectionError(
                f"Selected spectrum index {self.selected_index} is out of range "
                f"for {len(self._spectra)} spectra."
            )
        return self._spectra[self.selected_index]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._spectra):
            raise IndexOutOfRangeError(
                f"Invalid spectrum index: {index}. Must be between 0 and {len(self._spectra) - 1}."
            )

    def _attach(self, spectrum: Spectrum) -> None:
        spectrum.id = next(self._ids)
        self._spectra.append(spectrum)
        self.data.create_dataset(spectrum.color, spectrum.title)

    def _notify(self, mode: RenderMode) -> None:
        if self._on_change is not None:
            self._on_change(mode)

    def add_remove_listener(self, listener: Callable[[int], None]) -> None:
        """Call `listener(index)` before a spectrum is removed and indices shift."""
        self._remove_listeners.append(listener)

    def add_spectrum(self) -> Spectrum:
        """Append a new, empty spectrum and select it."""
        spectrum = Spectrum(self.NEW_SPECTRUM_TITLE, self.NEW_SPECTRUM_COLOR)
        self._attach(spectrum)
        self.selected_index = len(self._spectra) - 1
        logger.info(
            f"Added spectrum {self.selected_index} (id={spectrum.id}); {len(self._spectra)} spectra"
        )
        self._notify(RenderMode.ANIMATED)
        return spectrum

    def remove_spectrum(self, index: int) -> Spectrum:
        """
        Remove a spectrum and its dataset.

        The selection follows the remaining spectra: removing a spectrum
        before the selected one shifts the selection down, removing the
        selected one selects its successor (or the new last spectrum).

        Raises
        ------
        IndexOutOfRangeError
            If `index` does not address a spectrum.
        LastSpectrumError
            If `index` addresses the only remaining spectrum.
        """
        self._check_index(index)
        if len(self._spectra) == 1:
            raise LastSpectrumError("Cannot remove the last remaining spectrum.")

        for listener in self._remove_listeners:
            listener(index)

        spectrum = self._spectra.pop(index)
        self.data.remove_dataset(index)

        if index < self.selected_index:
            self.selected_index -= 1
        self.selected_index = min(self.selected_index, len(self._spectra) - 1)

        logger.info(
            f"Removed spectrum {index} (id={spectrum.id}); selected is now {self.selected_index}"
        )
        self._notify(RenderMode.IMMEDIATE)
        return spectrum

    def select_spectrum(self, index: int) -> None:
        self._check_index(index)
        self.selected_index = index
        logger.debug(f"Selected spectrum {index}")

    def update_color(self, index: int, color: str) -> None:
        """Recolor a spectrum and the stroke and fill of its dataset."""
        self._check_index(index)
        color = normalize_color(color)
        self._spectra[index].color = color
        self.data.set_color(index, color)
        logger.debug(f"Spectrum {index} color set to {color}")
        self._notify(RenderMode.IMMEDIATE)

    def rename_spectrum(self, index: int, title: str) -> None:
        self._check_index(index)
        self._spectra[index].title = title
        self.data.set_label(index, title)
        self._notify(RenderMode.IMMEDIATE)
