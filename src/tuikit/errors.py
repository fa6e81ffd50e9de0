"""Exception types raised by tuikit.

Lookup failures (``find`` with no match or the wrong type) are *not*
errors; they return ``None``.
"""

from __future__ import annotations


class TuikitError(Exception):
    """Base class for every error raised by tuikit."""


class InvalidScreenError(TuikitError, IndexError):
    """Raised when selecting a screen id that does not exist."""

    def __init__(self, screen_id: int, screen_count: int) -> None:
        super().__init__(
            f"Tried to set an invalid screen ID: {screen_id}, "
            f"but only {screen_count} screens present."
        )
        self.screen_id = screen_id
        self.screen_count = screen_count


class EmptyLayerStackError(TuikitError, IndexError):
    """Raised when popping a layer from a screen that has none."""

    def __init__(self) -> None:
        super().__init__("pop_layer() called on a screen with no layers")


class ThemeError(TuikitError):
    """Base class for theme loading failures."""


class ThemeParseError(ThemeError):
    """The theme source is not valid TOML or holds invalid values."""


class ThemeFileError(ThemeError):
    """The theme file could not be read."""


class BackendError(TuikitError):
    """The terminal backend could not be initialised."""
