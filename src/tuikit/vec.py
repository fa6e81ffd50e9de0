"""Two-dimensional integer vector used for sizes and positions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Vec2:
    """A column/row pair. ``x`` is the column, ``y`` the row."""

    x: int = 0
    y: int = 0

    @classmethod
    def of(cls, value: VecLike) -> Vec2:
        """Coerce a ``Vec2`` or an ``(x, y)`` tuple into a ``Vec2``."""
        if isinstance(value, Vec2):
            return value
        x, y = value
        return cls(int(x), int(y))

    def __add__(self, other: VecLike) -> Vec2:
        other = Vec2.of(other)
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: VecLike) -> Vec2:
        other = Vec2.of(other)
        return Vec2(self.x - other.x, self.y - other.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def saturating_sub(self, other: VecLike) -> Vec2:
        """Subtract component-wise, clamping each component at zero."""
        other = Vec2.of(other)
        return Vec2(max(0, self.x - other.x), max(0, self.y - other.y))

    def min(self, other: VecLike) -> Vec2:
        other = Vec2.of(other)
        return Vec2(min(self.x, other.x), min(self.y, other.y))


VecLike = Union[Vec2, "tuple[int, int]"]
