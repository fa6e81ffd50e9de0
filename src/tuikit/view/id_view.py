"""Named wrapper that makes a view reachable through ``Selector.id``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tuikit.event import Event, EventResult
from tuikit.vec import Vec2
from tuikit.view.view import BaseView, Selector, View

if TYPE_CHECKING:
    from tuikit.printer import Printer


class IdView(BaseView):
    """Wraps a view and gives it a name.

    A ``Selector.id(name)`` lookup resolves to the *wrapped* view, so callers
    ask for the concrete type they put in::

        app.add_layer(IdView("status", TextView("ready")))
        app.find_id("status", TextView).set_content("done")
    """

    def __init__(self, name: str, view: View) -> None:
        self.name = name
        self.view = view

    def layout(self, size: Vec2) -> None:
        self.view.layout(size)

    def draw(self, printer: Printer) -> None:
        self.view.draw(printer)

    def on_event(self, event: Event) -> EventResult:
        return self.view.on_event(event)

    def take_focus(self) -> bool:
        return self.view.take_focus()

    def required_size(self, constraint: Vec2) -> Vec2:
        return self.view.required_size(constraint)

    def find(self, selector: Selector) -> object | None:
        if selector.name is not None and selector.name == self.name:
            return self.view
        if selector.matches(self):
            return self
        return self.view.find(selector)

    def __repr__(self) -> str:
        return f"IdView({self.name!r}, {self.view!r})"
