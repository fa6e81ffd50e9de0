"""Dropdown list for a :class:`~tuikit.menu.MenuTree`, shown as a layer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tuikit.event import Callback, Event, EventResult
from tuikit.keys import Key
from tuikit.menu import MenuTree
from tuikit.theme import ColorStyle
from tuikit.utils import truncate_to_width, visible_width
from tuikit.vec import Vec2, VecLike
from tuikit.view.view import BaseView

if TYPE_CHECKING:
    from tuikit.app import Application
    from tuikit.printer import Printer

logger = logging.getLogger(__name__)

SUBMENU_MARKER = " >"


class MenuPopup(BaseView):
    """Boxed list of menu entries anchored at a screen position.

    The popup occupies a whole layer but only paints its box (and shadow),
    so the layers below stay visible. ``depth`` counts the popups opened
    beneath this one; activating a leaf closes the whole chain.
    """

    def __init__(
        self,
        tree: MenuTree,
        anchor: VecLike = (0, 0),
        on_dismiss: Callback | None = None,
        depth: int = 0,
    ) -> None:
        self.tree = tree
        self.anchor = Vec2.of(anchor)
        self.on_dismiss = on_dismiss
        self.depth = depth
        self.selected: int | None = self._next_selectable(-1, 1)
        self._position = self.anchor

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def position(self) -> Vec2:
        """Top-left corner of the box after the last ``layout``."""
        return self._position

    def _content_width(self) -> int:
        width = 0
        for item in self.tree:
            if item.is_delimiter:
                continue
            w = visible_width(item.label)
            if item.is_subtree:
                w += len(SUBMENU_MARKER)
            width = max(width, w)
        return width

    def box_size(self) -> Vec2:
        """Outer size of the box: one column of padding inside the border."""
        return Vec2(self._content_width() + 4, len(self.tree) + 2)

    def required_size(self, constraint: Vec2) -> Vec2:
        return self.box_size()

    def layout(self, size: Vec2) -> None:
        room = size.saturating_sub(self.required_size(size))
        self._position = self.anchor.min(room)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, printer: Printer) -> None:
        box = self.box_size()
        shadow = printer.theme.shadow

        if shadow:
            area = printer.sub_printer(self._position + (1, 1), box, True)
            with area.with_color(ColorStyle.SHADOW):
                area.print_hline((0, box.y - 1), box.x, " ")
                area.print_vline((box.x - 1, 0), box.y, " ")

        printer = printer.sub_printer(self._position, box, True)
        printer.clear(ColorStyle.PRIMARY)
        printer.print_box((0, 0), box)

        inner = box.x - 4
        for i, item in enumerate(self.tree):
            y = i + 1
            if item.is_delimiter:
                with printer.with_color(ColorStyle.PRIMARY):
                    printer.print_hline((1, y), box.x - 2, "─")
                continue
            if item.is_subtree:
                label = truncate_to_width(item.label, inner - len(SUBMENU_MARKER), pad=True)
                label += SUBMENU_MARKER
            else:
                label = truncate_to_width(item.label, inner, pad=True)
            with printer.with_selection(i == self.selected):
                printer.print((1, y), f" {label} ")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def take_focus(self) -> bool:
        return self.selected is not None

    def _next_selectable(self, start: int, step: int) -> int | None:
        i = start + step
        while 0 <= i < len(self.tree):
            if not self.tree[i].is_delimiter:
                return i
            i += step
        return None

    def _move(self, step: int) -> None:
        if self.selected is None:
            return
        target = self._next_selectable(self.selected, step)
        if target is not None:
            self.selected = target

    def _dismiss(self) -> EventResult:
        on_dismiss = self.on_dismiss

        def close(app: Application) -> None:
            app.pop_layer()
            if on_dismiss is not None:
                on_dismiss(app)

        return EventResult.consumed(close)

    def _open_subtree(self, index: int, label: str, tree: MenuTree) -> EventResult:
        anchor = self._position + (self.box_size().x, index)
        depth = self.depth + 1

        def open_nested(app: Application) -> None:
            logger.debug("Opening submenu %r", label)
            app.add_layer(MenuPopup(tree, anchor, depth=depth))

        return EventResult.consumed(open_nested)

    def _activate_leaf(self, label: str, callback: Callback | None) -> EventResult:
        count = self.depth + 1

        def activate(app: Application) -> None:
            for _ in range(count):
                app.pop_layer()
            logger.debug("Menu entry %r activated", label)
            if callback is not None:
                callback(app)

        return EventResult.consumed(activate)

    def on_event(self, event: Event) -> EventResult:
        if event.is_key(Key.escape) or event.is_key(Key.left):
            return self._dismiss()
        if event.is_key(Key.up):
            self._move(-1)
            return EventResult.consumed()
        if event.is_key(Key.down):
            self._move(1)
            return EventResult.consumed()

        if self.selected is None:
            return EventResult.ignored()
        item = self.tree[self.selected]
        if event.is_key(Key.enter) or event.is_key(Key.right):
            if item.is_subtree and item.subtree is not None:
                return self._open_subtree(self.selected, item.label, item.subtree)
            if event.is_key(Key.enter):
                return self._activate_leaf(item.label, item.callback)
        return EventResult.ignored()

    def __repr__(self) -> str:
        return f"MenuPopup({len(self.tree)} items, depth={self.depth})"
