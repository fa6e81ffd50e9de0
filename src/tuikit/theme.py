"""Theme model: palette colors, color styles and border style.

Themes are immutable pydantic models. They are loaded from TOML, either
from a file or from an in-memory string::

    shadow = true
    borders = "simple"   # "simple", "outset" or "none"

    [colors]
    background = "blue"
    view = "white"
    primary = ["#333", "black"]   # first color that parses wins
    highlight = "light red"

Missing keys keep their default values.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Literal, NamedTuple

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tuikit.errors import ThemeFileError, ThemeParseError

logger = logging.getLogger(__name__)

__all__ = [
    "BaseColor",
    "BorderStyle",
    "Color",
    "ColorPair",
    "ColorStyle",
    "Palette",
    "Theme",
    "load_default",
    "load_theme",
    "load_theme_file",
]

# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


class BaseColor(str, Enum):
    """The eight colors every terminal supports."""

    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"

    @property
    def code(self) -> int:
        """ANSI color number, 0..7."""
        return list(BaseColor).index(self)


_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_LOW_RES_RE = re.compile(r"^0x([0-5])([0-5])([0-5])$")


class Color(BaseModel):
    """A terminal color.

    ``kind`` is one of:

    * ``"default"`` -- the terminal's own foreground/background.
    * ``"dark"`` / ``"light"`` -- one of the eight base colors.
    * ``"rgb"`` -- true color, 0..255 per channel.
    * ``"rgb_low"`` -- a point of the 6x6x6 color cube, 0..5 per channel.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["default", "dark", "light", "rgb", "rgb_low"] = "default"
    base: BaseColor | None = None
    r: int = 0
    g: int = 0
    b: int = 0

    @classmethod
    def default(cls) -> Color:
        return cls(kind="default")

    @classmethod
    def dark(cls, base: BaseColor) -> Color:
        return cls(kind="dark", base=base)

    @classmethod
    def light(cls, base: BaseColor) -> Color:
        return cls(kind="light", base=base)

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> Color:
        return cls(kind="rgb", r=r, g=g, b=b)

    @classmethod
    def rgb_low(cls, r: int, g: int, b: int) -> Color:
        return cls(kind="rgb_low", r=r, g=g, b=b)

    @classmethod
    def parse(cls, value: str) -> Color:
        """Parse a color description.

        Accepts ``"default"``, a base color name (``"red"``), a light base
        color (``"light red"``), hex (``"#ff0000"`` or ``"#f00"``) and the
        low-resolution cube notation (``"0x500"``).

        Raises ``ValueError`` on anything else.
        """
        text = value.strip().lower()
        if text == "default":
            return cls.default()

        try:
            return cls.dark(BaseColor(text))
        except ValueError:
            pass

        if text.startswith("light "):
            try:
                return cls.light(BaseColor(text[len("light ") :].strip()))
            except ValueError:
                pass

        m = _HEX_RE.match(text)
        if m:
            digits = m.group(1)
            if len(digits) == 3:
                r, g, b = (int(d, 16) * 17 for d in digits)
            else:
                r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
            return cls.rgb(r, g, b)

        m = _LOW_RES_RE.match(text)
        if m:
            r, g, b = (int(d) for d in m.groups())
            return cls.rgb_low(r, g, b)

        raise ValueError(f"invalid color: {value!r}")


class ColorPair(NamedTuple):
    """Foreground/background combination sent to the backend."""

    front: Color
    back: Color


class ColorStyle(str, Enum):
    """Semantic color roles views draw with."""

    BACKGROUND = "background"
    SHADOW = "shadow"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    TITLE_PRIMARY = "title_primary"
    TITLE_SECONDARY = "title_secondary"
    HIGHLIGHT = "highlight"
    HIGHLIGHT_INACTIVE = "highlight_inactive"


class BorderStyle(str, Enum):
    SIMPLE = "simple"
    OUTSET = "outset"
    NONE = "none"


# ---------------------------------------------------------------------------
# Palette / Theme
# ---------------------------------------------------------------------------


def _coerce_color(value: Any) -> Any:
    if isinstance(value, str):
        return Color.parse(value)
    if isinstance(value, list):
        # Fallback list: the first entry that parses wins.
        for item in value:
            if isinstance(item, str):
                try:
                    return Color.parse(item)
                except ValueError:
                    continue
        raise ValueError(f"no valid color in {value!r}")
    return value


class Palette(BaseModel):
    """One color per palette role."""

    model_config = ConfigDict(frozen=True)

    background: Color = Color.dark(BaseColor.BLUE)
    shadow: Color = Color.dark(BaseColor.BLACK)
    view: Color = Color.dark(BaseColor.WHITE)
    primary: Color = Color.dark(BaseColor.BLACK)
    secondary: Color = Color.dark(BaseColor.BLUE)
    tertiary: Color = Color.light(BaseColor.WHITE)
    title_primary: Color = Color.dark(BaseColor.RED)
    title_secondary: Color = Color.dark(BaseColor.YELLOW)
    highlight: Color = Color.dark(BaseColor.RED)
    highlight_inactive: Color = Color.dark(BaseColor.BLUE)

    @field_validator("*", mode="before")
    @classmethod
    def _parse_color(cls, value: Any) -> Any:
        return _coerce_color(value)


class Theme(BaseModel):
    """Complete visual configuration handed to every draw pass."""

    model_config = ConfigDict(frozen=True)

    shadow: bool = True
    borders: BorderStyle = BorderStyle.SIMPLE
    colors: Palette = Field(default_factory=Palette)

    def color_pair(self, style: ColorStyle) -> ColorPair:
        """Resolve a semantic style to concrete colors."""
        c = self.colors
        if style is ColorStyle.BACKGROUND:
            return ColorPair(c.view, c.background)
        if style is ColorStyle.SHADOW:
            return ColorPair(c.shadow, c.shadow)
        if style is ColorStyle.HIGHLIGHT:
            return ColorPair(c.view, c.highlight)
        if style is ColorStyle.HIGHLIGHT_INACTIVE:
            return ColorPair(c.view, c.highlight_inactive)
        return ColorPair(getattr(c, style.value), c.view)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_default() -> Theme:
    """Return the built-in theme."""
    return Theme()


def load_theme(content: str) -> Theme:
    """Parse a theme from TOML *content*.

    Raises ``ThemeParseError`` when the TOML is malformed or a value is
    invalid.
    """
    try:
        data = toml.loads(content)
    except toml.TomlDecodeError as e:
        raise ThemeParseError(f"malformed theme: {e}") from e

    try:
        return Theme.model_validate(data)
    except ValidationError as e:
        raise ThemeParseError(f"invalid theme: {e}") from e


def load_theme_file(path: str | Path) -> Theme:
    """Read and parse the TOML theme at *path*.

    Raises ``ThemeFileError`` if the file cannot be read and
    ``ThemeParseError`` if its content is invalid.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ThemeFileError(f"cannot read theme file {path}: {e}") from e

    logger.debug("Loaded theme source from %s", path)
    return load_theme(content)
