"""Views: the tree of drawable, focusable nodes managed by the application."""

from tuikit.view.id_view import IdView
from tuikit.view.menu_popup import MenuPopup
from tuikit.view.menubar import Menubar
from tuikit.view.stack_view import StackView
from tuikit.view.text_view import TextView
from tuikit.view.view import BaseView, Selector, View

__all__ = [
    "BaseView",
    "IdView",
    "MenuPopup",
    "Menubar",
    "Selector",
    "StackView",
    "TextView",
    "View",
]
