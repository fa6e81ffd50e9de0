"""TextView - displays multi-line text with word wrapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tuikit.utils import visible_width, wrap_text
from tuikit.vec import Vec2
from tuikit.view.view import BaseView

if TYPE_CHECKING:
    from tuikit.printer import Printer


class TextView(BaseView):
    """Static text, word-wrapped to the width it is laid out at."""

    def __init__(self, content: str = "") -> None:
        self._content = content

        # Cache
        self._cached_width: int | None = None
        self._rows: list[str] = []

    def get_content(self) -> str:
        return self._content

    def set_content(self, content: str) -> None:
        self._content = content
        self._cached_width = None

    def _wrap(self, width: int) -> list[str]:
        if self._cached_width != width:
            self._rows = wrap_text(self._content, width) if self._content else []
            self._cached_width = width
        return self._rows

    def layout(self, size: Vec2) -> None:
        self._wrap(size.x)

    def required_size(self, constraint: Vec2) -> Vec2:
        rows = wrap_text(self._content, constraint.x) if self._content else []
        width = max((visible_width(row) for row in rows), default=0)
        return Vec2(width, len(rows))

    def draw(self, printer: Printer) -> None:
        rows = self._wrap(printer.size.x)
        for y, row in enumerate(rows[: printer.size.y]):
            printer.print((0, y), row)

    def __repr__(self) -> str:
        return f"TextView({self._content[:20]!r})"
