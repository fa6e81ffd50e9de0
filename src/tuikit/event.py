"""Input events and the result of dispatching them.

An :class:`Event` is what the backend produces. Dispatch through the view
tree yields an :class:`EventResult`: either *ignored* (try the next
candidate) or *consumed*, optionally carrying a deferred callback that the
application runs with full access to itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, ClassVar, Literal, Union

from tuikit.keys import KeyId

if TYPE_CHECKING:
    from tuikit.app import Application

__all__ = [
    "Callback",
    "Event",
    "EventKind",
    "EventLike",
    "EventResult",
    "as_event",
]

Callback = Callable[["Application"], None]
"""Deferred action run with exclusive access to the application."""

EventKind = Literal["key", "resize", "refresh", "unknown"]


@dataclass(frozen=True)
class Event:
    """A single input event.

    * ``kind="key"`` -- a key press; ``key`` holds its key id.
    * ``kind="resize"`` -- the terminal changed size.
    * ``kind="refresh"`` -- a periodic tick (only with a refresh rate set).
    * ``kind="unknown"`` -- input that could not be parsed; ``key`` holds
      the raw data.
    """

    kind: EventKind
    key: str = ""

    WINDOW_RESIZE: ClassVar[Event]
    REFRESH: ClassVar[Event]

    @classmethod
    def of_key(cls, key_id: KeyId) -> Event:
        return cls("key", key_id)

    @classmethod
    def unknown(cls, raw: str) -> Event:
        return cls("unknown", raw)

    @property
    def char(self) -> str | None:
        """The typed character, for plain printable key presses."""
        if self.kind == "key" and len(self.key) == 1:
            return self.key
        if self.kind == "key" and self.key == "space":
            return " "
        return None

    def is_key(self, key_id: KeyId) -> bool:
        return self.kind == "key" and self.key == key_id

    def __str__(self) -> str:
        if self.kind == "key":
            return self.key
        return f"<{self.kind}>"


Event.WINDOW_RESIZE = Event("resize")
Event.REFRESH = Event("refresh")

EventLike = Union[Event, KeyId]


def as_event(value: EventLike) -> Event:
    """Coerce *value* to an :class:`Event`; strings are key ids."""
    if isinstance(value, Event):
        return value
    if isinstance(value, str):
        return Event.of_key(value)
    raise TypeError(f"cannot convert {type(value).__name__} to Event")


@dataclass(frozen=True)
class EventResult:
    """Outcome of offering an event to a view."""

    is_consumed: bool
    callback: Callback | None = None

    @classmethod
    def ignored(cls) -> EventResult:
        return _IGNORED

    @classmethod
    def consumed(cls, callback: Callback | None = None) -> EventResult:
        return cls(True, callback)

    @property
    def is_ignored(self) -> bool:
        return not self.is_consumed

    def process(self, app: Application) -> None:
        """Run the callback, if any, against *app*."""
        if self.callback is not None:
            self.callback(app)


_IGNORED = EventResult(False)
