"""
Exceptions raised by the spectrum editor core.

Invalid indices are contract violations: the UI is expected to only offer
valid ones, so these are raised early and contained by the interaction
controller rather than shown to the user.
"""


class SpectrumEditorError(Exception):
    """Base class for all editor errors."""


class IndexOutOfRangeError(SpectrumEditorError, IndexError):
    """A spectrum or point was addressed by an index that does not exist."""


class StaleSelectionError(SpectrumEditorError):
    """The selected spectrum index no longer addresses a spectrum."""


class LastSpectrumError(SpectrumEditorError):
    """Attempted to remove the only remaining spectrum."""
