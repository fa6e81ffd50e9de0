"""Screen: an ordered stack of full-screen layers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tuikit.errors import EmptyLayerStackError
from tuikit.event import Event, EventResult
from tuikit.vec import Vec2
from tuikit.view.view import BaseView, Selector, View

if TYPE_CHECKING:
    from tuikit.printer import Printer

logger = logging.getLogger(__name__)


class StackView(BaseView):
    """Layers drawn bottom-to-top, with input going to the top layer only.

    Every layer covers the whole screen area; views that only paint part of
    it leave the layers below visible.
    """

    def __init__(self) -> None:
        self._layers: list[View] = []
        self._size: Vec2 | None = None

    @property
    def layers(self) -> tuple[View, ...]:
        """Layers in drawing order (bottom first)."""
        return tuple(self._layers)

    @property
    def top(self) -> View | None:
        return self._layers[-1] if self._layers else None

    def __len__(self) -> int:
        return len(self._layers)

    def add_layer(self, view: View) -> None:
        """Push *view* on top. It becomes the input target immediately."""
        self._layers.append(view)
        view.take_focus()
        logger.debug("Pushed layer %r (%d layers)", view, len(self._layers))

    def pop_layer(self) -> View:
        """Remove and return the top layer.

        Raises ``EmptyLayerStackError`` if there is none.
        """
        if not self._layers:
            raise EmptyLayerStackError()
        view = self._layers.pop()
        if self._layers:
            self._layers[-1].take_focus()
        logger.debug("Popped layer %r (%d layers)", view, len(self._layers))
        return view

    # ------------------------------------------------------------------
    # View contract
    # ------------------------------------------------------------------

    def layout(self, size: Vec2) -> None:
        self._size = size
        for layer in self._layers:
            layer.layout(size)

    def draw(self, printer: Printer) -> None:
        for layer in self._layers:
            layer.draw(printer)

    def on_event(self, event: Event) -> EventResult:
        if not self._layers:
            return EventResult.ignored()
        return self._layers[-1].on_event(event)

    def take_focus(self) -> bool:
        if not self._layers:
            return False
        return self._layers[-1].take_focus()

    def required_size(self, constraint: Vec2) -> Vec2:
        return constraint

    def find(self, selector: Selector) -> object | None:
        if selector.matches(self):
            return self
        for layer in reversed(self._layers):
            found = layer.find(selector)
            if found is not None:
                return found
        return None
