"""Application context: screens, menubar, global callbacks and the event loop.

One iteration of :meth:`Application.run`:

1. lay out the menubar and the active screen against the terminal size,
2. draw the active screen, then the menubar over it (when visible), then flush,
3. block on the backend for one event (a resize also clears the backend),
4. dispatch it: to the menubar alone while it is active, otherwise to the
   active screen and, if ignored there, to the global callback table.

Callbacks returned by views run immediately with the application as their
only argument.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar

from tuikit import theme as themes
from tuikit.backend import AnsiBackend, Backend, check_fps
from tuikit.config import AppConfig
from tuikit.errors import InvalidScreenError, ThemeError
from tuikit.event import Callback, Event, EventLike, as_event
from tuikit.printer import Printer
from tuikit.theme import Theme
from tuikit.vec import Vec2
from tuikit.view import Menubar, Selector, StackView, View

logger = logging.getLogger(__name__)

V = TypeVar("V")


class Application:
    """Root of the view tree and owner of the terminal backend.

    Constructing an application initialises the backend; :meth:`close`
    (called automatically when :meth:`run` returns, or when used as a
    context manager) finishes it exactly once::

        with Application() as app:
            app.add_layer(TextView("Hello"))
            app.add_global_callback("q", Application.quit)
            app.run()
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        backend: Backend | None = None,
        theme: Theme | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()

        if theme is None:
            theme = themes.load_default()
            if self.config.theme_path:
                theme = themes.load_theme_file(self.config.theme_path)
        self._theme: Theme = theme
        self._fps = check_fps(self.config.fps)

        # Screens; there is always at least one and the active id is valid.
        self._screens: list[StackView] = [StackView()]
        self._active_screen = 0

        self._global_callbacks: dict[Event, Callback] = {}
        self._menubar = Menubar(autohide=self.config.autohide_menu)

        # Lifecycle
        self._running = True
        self._closed = False
        self._size: Vec2 | None = None

        self.backend: Backend = (
            backend if backend is not None else AnsiBackend(self.config.write_log_path)
        )
        self.backend.init()
        self.backend.set_refresh_rate(self._fps)
        logger.debug("Application initialised (fps=%d)", self._fps)

    def __enter__(self) -> Application:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop the loop and restore the terminal. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        self._running = False
        self.backend.finish()
        logger.debug("Backend finished")

    # ------------------------------------------------------------------
    # Menubar
    # ------------------------------------------------------------------

    @property
    def menubar(self) -> Menubar:
        return self._menubar

    def select_menubar(self) -> None:
        """Give input focus to the menubar."""
        self._menubar.take_focus()

    def set_autohide_menu(self, autohide: bool) -> None:
        """Draw the menubar only while it is selected.

        With autohide off the bar is always drawn and reserves the top row.
        """
        self._menubar.autohide = autohide

    # ------------------------------------------------------------------
    # Theme and refresh rate
    # ------------------------------------------------------------------

    def current_theme(self) -> Theme:
        return self._theme

    def set_theme(self, theme: Theme) -> None:
        self._theme = theme

    def load_theme(self, content: str) -> None:
        """Replace the theme with one parsed from TOML *content*.

        On failure the error is raised and the current theme is kept.
        """
        try:
            theme = themes.load_theme(content)
        except ThemeError as e:
            logger.warning("Keeping current theme: %s", e)
            raise
        self.set_theme(theme)
        logger.info("Theme reloaded")

    def load_theme_file(self, path: str | Path) -> None:
        """Replace the theme with the one stored in *path*."""
        try:
            theme = themes.load_theme_file(path)
        except ThemeError as e:
            logger.warning("Keeping current theme: %s", e)
            raise
        self.set_theme(theme)
        logger.info("Theme loaded from %s", path)

    @property
    def fps(self) -> int:
        return self._fps

    def set_fps(self, fps: int) -> None:
        """Tick ``fps`` times per second even without input; 0 disables ticks."""
        self._fps = check_fps(fps)
        self.backend.set_refresh_rate(fps)
        logger.debug("Refresh rate set to %d fps", fps)

    # ------------------------------------------------------------------
    # Screens and layers
    # ------------------------------------------------------------------

    def screen(self) -> StackView:
        """The active screen."""
        return self._screens[self._active_screen]

    def active_screen(self) -> int:
        return self._active_screen

    def screen_count(self) -> int:
        return len(self._screens)

    def add_screen(self) -> int:
        """Create a new, empty screen and return its id."""
        self._screens.append(StackView())
        screen_id = len(self._screens) - 1
        logger.debug("Added screen %d", screen_id)
        return screen_id

    def add_active_screen(self) -> int:
        """Create a new screen, make it active, and return its id."""
        screen_id = self.add_screen()
        self.set_screen(screen_id)
        return screen_id

    def set_screen(self, screen_id: int) -> None:
        """Make *screen_id* the active screen.

        Raises ``InvalidScreenError`` for an unknown id, leaving the active
        screen unchanged.
        """
        if not 0 <= screen_id < len(self._screens):
            raise InvalidScreenError(screen_id, len(self._screens))
        if screen_id != self._active_screen:
            logger.debug("Switching to screen %d", screen_id)
        self._active_screen = screen_id

    def add_layer(self, view: View) -> None:
        """Push *view* on top of the active screen."""
        self.screen().add_layer(view)

    def pop_layer(self) -> View:
        """Remove and return the top layer of the active screen."""
        return self.screen().pop_layer()

    def screen_size(self) -> Vec2:
        return self.backend.screen_size()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find(self, selector: Selector, view_type: type[V]) -> V | None:
        """Return the view matching *selector* in the active screen.

        ``None`` if nothing matches or the match is not a *view_type*.
        """
        found = self.screen().find(selector)
        if isinstance(found, view_type):
            return found
        return None

    def find_id(self, name: str, view_type: type[V]) -> V | None:
        return self.find(Selector.id(name), view_type)

    # ------------------------------------------------------------------
    # Global callbacks
    # ------------------------------------------------------------------

    def add_global_callback(self, event: EventLike, callback: Callback) -> None:
        """Run *callback* when *event* reaches the application unhandled.

        Registering again for the same event replaces the previous callback.
        """
        event = as_event(event)
        if event in self._global_callbacks:
            logger.debug("Replacing global callback for %s", event)
        self._global_callbacks[event] = callback

    def clear_global_callbacks(self, event: EventLike) -> None:
        self._global_callbacks.pop(as_event(event), None)

    # ------------------------------------------------------------------
    # Event loop
    # ------------------------------------------------------------------

    def is_running(self) -> bool:
        return self._running

    def quit(self) -> None:
        """Stop the loop once the current event has been handled."""
        logger.debug("Quit requested")
        self._running = False

    def _screen_offset(self) -> int:
        # Only a permanent menubar reserves a row; an auto-hidden one is
        # drawn over the screen while active.
        return 0 if self._menubar.autohide else 1

    def layout(self) -> None:
        """Lay out the menubar and the active screen for the current size."""
        size = self.backend.screen_size()
        if size != self._size:
            logger.debug("Layout size is now %dx%d", size.x, size.y)
        self._size = size
        self._menubar.layout(self._menubar.required_size(size))
        self.screen().layout(size.saturating_sub((0, self._screen_offset())))

    def draw(self) -> None:
        """Draw the active screen, then the menubar over it, and flush the backend."""
        size = self._size if self._size is not None else self.backend.screen_size()
        printer = Printer(size, self._theme, self.backend)
        printer.clear()

        menubar_active = self._menubar.receive_events()
        offset = Vec2(0, self._screen_offset())
        self.screen().draw(
            printer.sub_printer(offset, size.saturating_sub(offset), not menubar_active)
        )

        if self._menubar.visible():
            bar = self._menubar.required_size(size)
            self._menubar.draw(printer.sub_printer((0, 0), bar, menubar_active))
        self.backend.refresh()

    def on_event(self, event: EventLike) -> None:
        """Dispatch one event and run whatever callback it produces."""
        event = as_event(event)

        if self._menubar.receive_events():
            self._menubar.on_event(event).process(self)
            return

        result = self.screen().on_event(event)
        if not result.is_ignored:
            result.process(self)
            return

        callback = self._global_callbacks.get(event)
        if callback is not None:
            callback(self)
        elif event.kind == "key":
            logger.debug("Unhandled event %s", event)

    def step(self) -> None:
        """Run a single iteration: layout, draw, wait for an event, dispatch it."""
        self.layout()
        self.draw()

        event = self.backend.poll_event()
        if event == Event.WINDOW_RESIZE:
            self.backend.clear()
        self.on_event(event)

    def run(self) -> None:
        """Loop until :meth:`quit` is called, then finish the backend."""
        logger.debug("Entering event loop")
        try:
            while self._running:
                self.step()
        finally:
            self.close()
