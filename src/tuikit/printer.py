"""Clipped drawing surface.

A :class:`Printer` is a window onto the character grid: it has an offset,
a size, a ``focused`` flag and the theme of the current draw pass.  Views
draw in local coordinates; everything outside the printer's area is
clipped.  :meth:`Printer.sub_printer` derives nested windows without
copying anything.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Iterator

from tuikit.theme import BorderStyle, ColorStyle, Theme
from tuikit.utils import take_columns, visible_width
from tuikit.vec import Vec2, VecLike

if TYPE_CHECKING:
    from tuikit.backend import Backend


class _ColorState:
    """Style stack shared by a printer and every printer derived from it."""

    def __init__(self) -> None:
        self.stack: list[ColorStyle] = [ColorStyle.PRIMARY]


class Printer:
    """Convenient interface to draw on a rectangular part of the screen."""

    def __init__(
        self,
        size: VecLike,
        theme: Theme,
        backend: Backend,
        offset: VecLike = (0, 0),
        focused: bool = True,
        _state: _ColorState | None = None,
    ) -> None:
        self.size = Vec2.of(size)
        self.offset = Vec2.of(offset)
        self.focused = focused
        self.theme = theme
        self._backend = backend
        self._state = _state if _state is not None else _ColorState()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def sub_printer(self, offset: VecLike, size: VecLike, focused: bool) -> Printer:
        """Return a printer restricted to ``offset..offset+size``.

        The new area is clamped to this printer's bounds, and the result is
        focused only if this printer is focused too.
        """
        offset = Vec2.of(offset).min(self.size)
        available = self.size.saturating_sub(offset)
        return Printer(
            Vec2.of(size).min(available),
            self.theme,
            self._backend,
            self.offset + offset,
            self.focused and focused,
            self._state,
        )

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def print(self, pos: VecLike, text: str) -> None:
        """Print *text* at *pos*, clipped to the printer's area."""
        pos = Vec2.of(pos)
        if pos.x < 0 or pos.y < 0 or pos.y >= self.size.y or pos.x >= self.size.x:
            return
        text = take_columns(text, self.size.x - pos.x)
        if text:
            self._backend.print_at(self.offset + pos, text)

    def print_hline(self, start: VecLike, length: int, c: str) -> None:
        """Print a horizontal line of *c* starting at *start*."""
        start = Vec2.of(start)
        width = max(1, visible_width(c))
        self.print(start, c * (length // width))

    def print_vline(self, start: VecLike, length: int, c: str) -> None:
        """Print a vertical line of *c* starting at *start*."""
        start = Vec2.of(start)
        for y in range(length):
            self.print(start + (0, y), c)

    def clear(self, style: ColorStyle = ColorStyle.BACKGROUND) -> None:
        """Fill the whole area with blanks in *style*."""
        with self.with_color(style):
            blank = " " * self.size.x
            for y in range(self.size.y):
                self.print((0, y), blank)

    def print_box(self, start: VecLike, size: VecLike) -> None:
        """Draw a border box, following the theme's border style.

        ``size`` is the outer size and must be at least 2x2.
        """
        start = Vec2.of(start)
        size = Vec2.of(size)
        if size.x < 2 or size.y < 2 or self.theme.borders is BorderStyle.NONE:
            return

        end = start + size - (1, 1)
        outset = self.theme.borders is BorderStyle.OUTSET

        with self.with_color(ColorStyle.TERTIARY if outset else ColorStyle.PRIMARY):
            self.print(start, "┌")
            self.print_hline(start + (1, 0), size.x - 2, "─")
            self.print_vline(start + (0, 1), size.y - 2, "│")
            self.print(Vec2(start.x, end.y), "└")

        with self.with_color(ColorStyle.PRIMARY):
            self.print(Vec2(end.x, start.y), "┐")
            self.print_vline(Vec2(end.x, start.y + 1), size.y - 2, "│")
            self.print_hline(Vec2(start.x + 1, end.y), size.x - 2, "─")
            self.print(end, "┘")

    # ------------------------------------------------------------------
    # Styles
    # ------------------------------------------------------------------

    @contextlib.contextmanager
    def with_color(self, style: ColorStyle) -> Iterator[Printer]:
        """Draw with *style* for the duration of the block.

        The previous style is restored on exit.
        """
        stack = self._state.stack
        stack.append(style)
        self._backend.set_color(self.theme.color_pair(style))
        try:
            yield self
        finally:
            stack.pop()
            self._backend.set_color(self.theme.color_pair(stack[-1]))

    def with_selection(self, selected: bool) -> contextlib.AbstractContextManager[Printer]:
        """Highlight style for a selected item; plain style otherwise.

        Selected items use the inactive highlight when the printer is not
        focused.
        """
        if not selected:
            return self.with_color(ColorStyle.PRIMARY)
        if self.focused:
            return self.with_color(ColorStyle.HIGHLIGHT)
        return self.with_color(ColorStyle.HIGHLIGHT_INACTIVE)
