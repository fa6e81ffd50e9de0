"""The view contract every node of the view tree satisfies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

from tuikit.event import Event, EventResult
from tuikit.vec import Vec2

if TYPE_CHECKING:
    from tuikit.printer import Printer

__all__ = ["BaseView", "Selector", "View"]


@dataclass(frozen=True)
class Selector:
    """Query used to locate a view in the tree.

    Either by name (matched by :class:`~tuikit.view.IdView` wrappers) or by
    a predicate evaluated on each candidate view.
    """

    name: str | None = None
    predicate: Callable[[object], bool] | None = None

    @classmethod
    def id(cls, name: str) -> Selector:
        return cls(name=name)

    @classmethod
    def matching(cls, predicate: Callable[[object], bool]) -> Selector:
        return cls(predicate=predicate)

    def matches(self, view: object) -> bool:
        """Return ``True`` if the predicate accepts *view*."""
        return self.predicate is not None and bool(self.predicate(view))


@runtime_checkable
class View(Protocol):
    """A node of the view tree.

    ``layout`` must be called with the available size before ``draw``.
    ``find`` returns the matching descendant (or the view itself), or
    ``None``.
    """

    def layout(self, size: Vec2) -> None: ...

    def draw(self, printer: Printer) -> None: ...

    def on_event(self, event: Event) -> EventResult: ...

    def find(self, selector: Selector) -> object | None: ...

    def take_focus(self) -> bool: ...

    def required_size(self, constraint: Vec2) -> Vec2: ...


class BaseView(ABC):
    """Default behaviour for views; subclasses only need ``draw``."""

    def layout(self, size: Vec2) -> None:
        """Called once the final size is known. Does nothing by default."""

    @abstractmethod
    def draw(self, printer: Printer) -> None:
        """Paint the view into *printer*."""

    def on_event(self, event: Event) -> EventResult:
        return EventResult.ignored()

    def find(self, selector: Selector) -> object | None:
        return self if selector.matches(self) else None

    def take_focus(self) -> bool:
        """Try to accept focus. Views that never take focus return ``False``."""
        return False

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2(1, 1)
