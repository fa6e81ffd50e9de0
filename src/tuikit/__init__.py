"""tuikit - application core for terminal user interfaces.

An :class:`Application` owns a set of screens (stacks of full-screen view
layers), a focus-stealing :class:`Menubar` and a table of global callbacks,
and drives the layout/draw/poll/dispatch loop against a :class:`Backend`.
"""

from tuikit.app import Application
from tuikit.backend import AnsiBackend, Backend
from tuikit.config import AppConfig
from tuikit.errors import (
    BackendError,
    EmptyLayerStackError,
    InvalidScreenError,
    ThemeError,
    ThemeFileError,
    ThemeParseError,
    TuikitError,
)
from tuikit.event import Callback, Event, EventResult
from tuikit.keys import Key
from tuikit.menu import MenuItem, MenuTree
from tuikit.printer import Printer
from tuikit.theme import BorderStyle, Color, ColorPair, ColorStyle, Palette, Theme
from tuikit.vec import Vec2
from tuikit.view import (
    BaseView,
    IdView,
    Menubar,
    MenuPopup,
    Selector,
    StackView,
    TextView,
    View,
)

__all__ = [
    "AnsiBackend",
    "AppConfig",
    "Application",
    "Backend",
    "BackendError",
    "BaseView",
    "BorderStyle",
    "Callback",
    "Color",
    "ColorPair",
    "ColorStyle",
    "EmptyLayerStackError",
    "Event",
    "EventResult",
    "IdView",
    "InvalidScreenError",
    "Key",
    "MenuItem",
    "MenuPopup",
    "MenuTree",
    "Menubar",
    "Palette",
    "Printer",
    "Selector",
    "StackView",
    "TextView",
    "Theme",
    "ThemeError",
    "ThemeFileError",
    "ThemeParseError",
    "TuikitError",
    "Vec2",
    "View",
]
