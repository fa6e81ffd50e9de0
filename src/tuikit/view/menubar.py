"""Single-row menu bar that only takes input while explicitly selected."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tuikit.event import Callback, Event, EventResult
from tuikit.keys import Key
from tuikit.menu import MenuTree
from tuikit.theme import ColorStyle
from tuikit.utils import visible_width
from tuikit.vec import Vec2
from tuikit.view.menu_popup import MenuPopup
from tuikit.view.view import BaseView

if TYPE_CHECKING:
    from tuikit.app import Application
    from tuikit.printer import Printer

logger = logging.getLogger(__name__)


class Menubar(BaseView):
    """Menu titles laid out on one row.

    The bar is inactive until :meth:`take_focus` is called (usually through
    ``Application.select_menubar``). While active it receives every event;
    escape, opening a menu or running a root action makes it inactive again.

    With ``autohide`` set, an inactive bar is not drawn and the bar never
    reserves a row: while active it is drawn over the top row of the screen.
    """

    def __init__(self, root: MenuTree | None = None, autohide: bool = True) -> None:
        self.root = root if root is not None else MenuTree()
        self.autohide = autohide
        self.selected = 0
        self._focused = False

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def add_subtree(self, title: str, tree: MenuTree) -> Menubar:
        self.root.add_subtree(title, tree)
        return self

    def add_leaf(self, title: str, callback: Callback) -> Menubar:
        self.root.add_leaf(title, callback)
        return self

    def find_subtree(self, title: str) -> MenuTree | None:
        return self.root.find_subtree(title)

    def clear(self) -> None:
        self.root = MenuTree()
        self.selected = 0
        self.dismiss()

    def __len__(self) -> int:
        return len(self.root)

    # ------------------------------------------------------------------
    # Focus state
    # ------------------------------------------------------------------

    def _first_selectable(self) -> int:
        for i, item in enumerate(self.root):
            if not item.is_delimiter:
                return i
        return 0

    def take_focus(self) -> bool:
        if not self._focused:
            logger.debug("Menubar selected")
        if not 0 <= self.selected < len(self.root) or self.root[self.selected].is_delimiter:
            self.selected = self._first_selectable()
        self._focused = True
        return True

    def dismiss(self) -> None:
        if self._focused:
            logger.debug("Menubar dismissed")
        self._focused = False

    def receive_events(self) -> bool:
        return self._focused

    def visible(self) -> bool:
        """Whether the bar is drawn this frame."""
        return not self.autohide or self.receive_events()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def title_positions(self) -> list[int]:
        """Column of each root entry's title, delimiters included."""
        positions = []
        x = 1
        for item in self.root:
            positions.append(x)
            x += (visible_width(item.label) + 2) if not item.is_delimiter else 2
        return positions

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(constraint.x, 1)

    def draw(self, printer: Printer) -> None:
        printer.clear(ColorStyle.PRIMARY)
        for i, (item, x) in enumerate(zip(self.root, self.title_positions())):
            if item.is_delimiter:
                printer.print((x, 0), "|")
                continue
            with printer.with_selection(printer.focused and i == self.selected):
                printer.print((x, 0), f" {item.label} ")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _step(self, step: int) -> None:
        i = self.selected + step
        while 0 <= i < len(self.root):
            if not self.root[i].is_delimiter:
                self.selected = i
                return
            i += step

    def _open(self, index: int, tree: MenuTree) -> Callback:
        x = self.title_positions()[index]

        def open_menu(app: Application) -> None:
            # An inactive bar only keeps its row when it cannot hide.
            y = 1 if self.autohide else 0
            popup = MenuPopup(tree, (x, y), on_dismiss=lambda a: a.select_menubar())
            app.add_layer(popup)

        return open_menu

    def on_event(self, event: Event) -> EventResult:
        if event.is_key(Key.escape):
            self.dismiss()
            return EventResult.consumed()
        if event.is_key(Key.left):
            self._step(-1)
            return EventResult.consumed()
        if event.is_key(Key.right):
            self._step(1)
            return EventResult.consumed()

        if event.is_key(Key.enter) or event.is_key(Key.down):
            if not 0 <= self.selected < len(self.root):
                return EventResult.ignored()
            item = self.root[self.selected]
            if item.is_subtree and item.subtree is not None:
                self.dismiss()
                return EventResult.consumed(self._open(self.selected, item.subtree))
            if item.is_leaf:
                self.dismiss()
                return EventResult.consumed(item.callback)
        return EventResult.ignored()
