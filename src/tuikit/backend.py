"""Terminal backends.

Provides the ``Backend`` protocol the application drives, and
``AnsiBackend``, a concrete implementation for POSIX terminals that manages
raw mode, the alternate screen, resize detection and color output via ANSI
escape sequences.
"""

from __future__ import annotations

import codecs
import collections
import logging
import os
import select
import signal
import sys
import termios
import tty
from typing import Protocol

from tuikit.errors import BackendError
from tuikit.event import Event
from tuikit.keys import parse_key, split_sequences
from tuikit.theme import Color, ColorPair
from tuikit.vec import Vec2

logger = logging.getLogger(__name__)

MAX_FPS = 1000

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_RESET_ATTRS = "\x1b[0m"
_MOVE_FMT = "\x1b[{};{}H"


# ---------------------------------------------------------------------------
# Backend protocol
# ---------------------------------------------------------------------------


class Backend(Protocol):
    """Interface between the application and a terminal.

    ``init`` must be idempotent and ``finish`` must tolerate being called
    once after ``init``.  ``poll_event`` blocks until input arrives, or
    until the next tick when a refresh rate is set.
    """

    def init(self) -> None: ...

    def finish(self) -> None: ...

    def poll_event(self) -> Event: ...

    def screen_size(self) -> Vec2: ...

    def refresh(self) -> None: ...

    def clear(self) -> None: ...

    def set_refresh_rate(self, fps: int) -> None: ...

    def print_at(self, pos: Vec2, text: str) -> None: ...

    def set_color(self, pair: ColorPair) -> None: ...


def check_fps(fps: int) -> int:
    """Validate a refresh rate, returning it unchanged."""
    if not 0 <= fps <= MAX_FPS:
        raise ValueError(f"fps must be between 0 and {MAX_FPS}, got {fps}")
    return fps


# ---------------------------------------------------------------------------
# Color encoding
# ---------------------------------------------------------------------------


def color_sgr(color: Color, background: bool) -> str:
    """SGR parameters selecting *color* as foreground or background."""
    if color.kind == "dark" and color.base is not None:
        return str((40 if background else 30) + color.base.code)
    if color.kind == "light" and color.base is not None:
        return str((100 if background else 90) + color.base.code)
    if color.kind == "rgb":
        return f"{48 if background else 38};2;{color.r};{color.g};{color.b}"
    if color.kind == "rgb_low":
        index = 16 + 36 * color.r + 6 * color.g + color.b
        return f"{48 if background else 38};5;{index}"
    return "49" if background else "39"


def pair_sgr(pair: ColorPair) -> str:
    return f"\x1b[0;{color_sgr(pair.front, False)};{color_sgr(pair.back, True)}m"


# ---------------------------------------------------------------------------
# AnsiBackend implementation
# ---------------------------------------------------------------------------


class AnsiBackend:
    """Backend for POSIX terminals driven through ``sys.stdin``/``sys.stdout``.

    Raw mode is managed via :mod:`tty` and :mod:`termios`.  Terminal resizes
    are caught with ``SIGWINCH`` and delivered through a self-pipe so that a
    blocking ``poll_event`` wakes up immediately.  Drawing is buffered until
    :meth:`refresh`.
    """

    def __init__(self, write_log_path: str = "") -> None:
        self._initialized = False
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._wake_r: int | None = None
        self._wake_w: int | None = None
        self._timeout: float | None = None
        self._buffer: list[str] = []
        self._pending: collections.deque[Event] = collections.deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._write_log_path = write_log_path

    # -- lifecycle ----------------------------------------------------------

    def init(self) -> None:
        """Enter raw mode and the alternate screen."""
        if self._initialized:
            return

        fd = sys.stdin.fileno()
        if not os.isatty(fd):
            raise BackendError("stdin is not a terminal")

        try:
            self._original_termios = termios.tcgetattr(fd)
            tty.setraw(fd)
        except termios.error as e:
            raise BackendError(f"cannot enter raw mode: {e}") from e

        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_w, False)
        self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._on_sigwinch)

        self._raw_write(_ALT_SCREEN_ENABLE + _HIDE_CURSOR + _CLEAR_SCREEN)
        self._initialized = True
        logger.info("Terminal backend initialised (%s)", self.screen_size())

    def finish(self) -> None:
        """Restore the terminal to the state found by :meth:`init`."""
        if not self._initialized:
            return
        self._initialized = False

        self._raw_write(_RESET_ATTRS + _CLEAR_SCREEN + _SHOW_CURSOR + _ALT_SCREEN_DISABLE)

        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        for fd in (self._wake_r, self._wake_w):
            if fd is not None:
                os.close(fd)
        self._wake_r = self._wake_w = None

        if self._original_termios is not None:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

        logger.info("Terminal backend finished")

    # -- input --------------------------------------------------------------

    def set_refresh_rate(self, fps: int) -> None:
        check_fps(fps)
        self._timeout = 1.0 / fps if fps else None

    def poll_event(self) -> Event:
        """Block until the next event.

        Returns ``Event.REFRESH`` when the refresh-rate timeout expires and
        ``Event.WINDOW_RESIZE`` after a ``SIGWINCH``.
        """
        if self._pending:
            return self._pending.popleft()

        stdin_fd = sys.stdin.fileno()
        watched = [stdin_fd]
        if self._wake_r is not None:
            watched.append(self._wake_r)

        ready, _, _ = select.select(watched, [], [], self._timeout)
        if not ready:
            return Event.REFRESH

        if self._wake_r is not None and self._wake_r in ready:
            try:
                os.read(self._wake_r, 1024)
            except BlockingIOError:
                pass
            return Event.WINDOW_RESIZE

        try:
            raw = os.read(stdin_fd, 4096)
        except OSError as e:
            raise BackendError(f"cannot read terminal input: {e}") from e
        if not raw:
            raise BackendError("terminal input closed")

        sequences, _ = split_sequences(self._decoder.decode(raw))
        for seq in sequences:
            key_id = parse_key(seq)
            self._pending.append(Event.of_key(key_id) if key_id else Event.unknown(seq))

        if not self._pending:
            return Event.unknown("")
        return self._pending.popleft()

    # -- output -------------------------------------------------------------

    def screen_size(self) -> Vec2:
        try:
            size = os.get_terminal_size(sys.stdout.fileno())
        except (ValueError, OSError):
            return Vec2(80, 24)
        return Vec2(size.columns, size.lines)

    def print_at(self, pos: Vec2, text: str) -> None:
        self._buffer.append(_MOVE_FMT.format(pos.y + 1, pos.x + 1))
        self._buffer.append(text)

    def set_color(self, pair: ColorPair) -> None:
        self._buffer.append(pair_sgr(pair))

    def refresh(self) -> None:
        """Flush everything drawn since the last refresh."""
        out = "".join(self._buffer)
        self._buffer.clear()
        self.write(out)

    def clear(self) -> None:
        self._buffer.clear()
        self.write(_RESET_ATTRS + _CLEAR_SCREEN)

    def write(self, data: str) -> None:
        """Write data to stdout and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass

    # -- private ------------------------------------------------------------

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        if self._wake_w is not None:
            try:
                os.write(self._wake_w, b"\0")
            except BlockingIOError:
                pass

    def _raw_write(self, data: str) -> None:
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass
