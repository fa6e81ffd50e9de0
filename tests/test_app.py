"""Tests for the Application context and its event loop.

Uses the VirtualBackend helper to script input and inspect the drawn grid.
"""

from __future__ import annotations

import pytest

from tuikit.app import Application
from tuikit.config import AppConfig
from tuikit.errors import (
    EmptyLayerStackError,
    InvalidScreenError,
    ThemeFileError,
    ThemeParseError,
)
from tuikit.event import Event, EventResult
from tuikit.keys import Key
from tuikit.menu import MenuTree
from tuikit.theme import BorderStyle, ColorStyle, Theme
from tuikit.vec import Vec2
from tuikit.view import BaseView, IdView, Menubar, MenuPopup, Selector, TextView

from .virtual_backend import OutOfEvents, VirtualBackend

# ---------------------------------------------------------------------------
# Minimal test views
# ---------------------------------------------------------------------------


class Fill(BaseView):
    """Fills its whole area with one character and records layout sizes."""

    def __init__(self, ch: str) -> None:
        self.ch = ch
        self.layout_sizes: list[Vec2] = []

    def layout(self, size: Vec2) -> None:
        self.layout_sizes.append(size)

    def draw(self, printer) -> None:
        for y in range(printer.size.y):
            printer.print((0, y), self.ch * printer.size.x)


class Patch(BaseView):
    """Paints a rectangle of one character at a fixed position."""

    def __init__(self, ch: str, width: int, height: int) -> None:
        self.ch = ch
        self.width = width
        self.height = height

    def draw(self, printer) -> None:
        for y in range(self.height):
            printer.print((0, y), self.ch * self.width)


class Recorder(BaseView):
    """Records every event; consumes them (optionally with a callback) or not."""

    def __init__(self, consume: bool = False, callback=None) -> None:
        self.consume = consume
        self.callback = callback
        self.events: list[Event] = []

    def draw(self, printer) -> None:
        pass

    def on_event(self, event: Event) -> EventResult:
        self.events.append(event)
        if self.consume:
            return EventResult.consumed(self.callback)
        return EventResult.ignored()


def make_app(columns: int = 40, rows: int = 10, **kwargs) -> tuple[Application, VirtualBackend]:
    backend = VirtualBackend(columns, rows)
    return Application(backend=backend, **kwargs), backend


def render(app: Application) -> None:
    app.layout()
    app.draw()


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_construction_initialises_backend(self) -> None:
        app, backend = make_app()
        assert backend.init_count == 1
        assert backend.finish_count == 0
        assert app.is_running() is True

    def test_close_finishes_backend_once(self) -> None:
        app, backend = make_app()
        app.close()
        app.close()
        assert backend.finish_count == 1
        assert app.is_running() is False

    def test_context_manager_closes(self) -> None:
        backend = VirtualBackend()
        with Application(backend=backend) as app:
            app.add_layer(TextView("hi"))
        assert backend.finish_count == 1

    def test_config_is_applied(self) -> None:
        app, backend = make_app(config=AppConfig(fps=30, autohide_menu=False))
        assert backend.fps == 30
        assert app.fps == 30
        assert app.menubar.autohide is False

    def test_invalid_config_fps_does_not_touch_backend(self) -> None:
        backend = VirtualBackend()
        with pytest.raises(ValueError):
            Application(backend=backend, config=AppConfig(fps=5000))
        assert backend.init_count == 0

    def test_theme_path_in_config_is_loaded(self, tmp_path) -> None:
        path = tmp_path / "theme.toml"
        path.write_text('shadow = false\nborders = "none"\n')
        app, _ = make_app(config=AppConfig(theme_path=str(path)))
        assert app.current_theme().shadow is False
        assert app.current_theme().borders is BorderStyle.NONE

    def test_explicit_theme_wins_over_config(self, tmp_path) -> None:
        path = tmp_path / "theme.toml"
        path.write_text("shadow = false\n")
        theme = Theme(shadow=True)
        app, _ = make_app(theme=theme, config=AppConfig(theme_path=str(path)))
        assert app.current_theme() is theme


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------


class TestScreens:
    def test_starts_with_one_active_screen(self) -> None:
        app, _ = make_app()
        assert app.screen_count() == 1
        assert app.active_screen() == 0

    def test_add_screen_keeps_active_screen(self) -> None:
        app, _ = make_app()
        assert app.add_screen() == 1
        assert app.active_screen() == 0

    def test_add_active_screen_switches(self) -> None:
        app, _ = make_app()
        assert app.add_active_screen() == 1
        assert app.active_screen() == 1

    def test_set_screen(self) -> None:
        app, _ = make_app()
        app.add_screen()
        app.set_screen(1)
        assert app.active_screen() == 1
        app.set_screen(0)
        assert app.active_screen() == 0

    @pytest.mark.parametrize("bad_id", [2, 5, -1])
    def test_invalid_screen_id_is_reported_and_ignored(self, bad_id: int) -> None:
        app, _ = make_app()
        app.add_active_screen()
        with pytest.raises(InvalidScreenError) as exc_info:
            app.set_screen(bad_id)
        assert app.active_screen() == 1
        assert exc_info.value.screen_id == bad_id
        assert exc_info.value.screen_count == 2

    def test_active_index_stays_in_bounds(self) -> None:
        app, _ = make_app()
        for i in range(5):
            app.add_screen()
            for candidate in (i, i + 1, i + 2, -1):
                try:
                    app.set_screen(candidate)
                except InvalidScreenError:
                    pass
                assert 0 <= app.active_screen() < app.screen_count()

    def test_layers_belong_to_their_screen(self) -> None:
        app, backend = make_app()
        app.add_layer(Fill("a"))
        app.add_active_screen()
        app.add_layer(Fill("b"))
        render(app)
        assert backend.row(0) == "b" * 40
        app.set_screen(0)
        render(app)
        assert backend.row(0) == "a" * 40

    def test_pop_empty_screen_raises(self) -> None:
        app, _ = make_app()
        with pytest.raises(EmptyLayerStackError):
            app.pop_layer()


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------


class TestDrawing:
    def test_layers_occlude_in_push_order(self) -> None:
        app, backend = make_app(10, 3)
        app.add_layer(Fill("a"))
        app.add_layer(Patch("b", 4, 2))
        app.add_layer(Patch("c", 2, 1))
        render(app)
        assert backend.row(0) == "ccbbaaaaaa"
        assert backend.row(1) == "bbbbaaaaaa"
        assert backend.row(2) == "aaaaaaaaaa"

    def test_popped_layer_disappears(self) -> None:
        app, backend = make_app(10, 3)
        app.add_layer(Fill("a"))
        app.add_layer(Patch("b", 4, 2))
        app.add_layer(Patch("c", 2, 1))
        render(app)
        app.pop_layer()
        render(app)
        assert backend.row(0) == "bbbbaaaaaa"
        assert backend.row(1) == "bbbbaaaaaa"

    def test_draw_refreshes_backend(self) -> None:
        app, backend = make_app()
        render(app)
        assert backend.refresh_count == 1

    def test_screen_is_focused_when_menubar_inactive(self) -> None:
        app, backend = make_app(10, 3)
        app.add_layer(MenuPopup(MenuTree().leaf("Go", Application.quit)))
        render(app)
        pos = backend.find_text("Go")
        assert pos is not None
        theme = app.current_theme()
        assert backend.color_at(pos.x, pos.y) == theme.color_pair(ColorStyle.HIGHLIGHT)

    def test_screen_is_unfocused_when_menubar_active(self) -> None:
        app, backend = make_app(10, 5)
        app.add_layer(MenuPopup(MenuTree().leaf("Go", Application.quit)))
        app.select_menubar()
        render(app)
        pos = backend.find_text("Go")
        assert pos is not None
        theme = app.current_theme()
        assert backend.color_at(pos.x, pos.y) == theme.color_pair(ColorStyle.HIGHLIGHT_INACTIVE)

    def test_active_menubar_highlights_selected_title(self) -> None:
        app, backend = make_app(20, 4)
        app.menubar.add_subtree("File", MenuTree())
        app.select_menubar()
        render(app)
        assert "File" in backend.row(0)
        x = backend.row(0).index("File")
        theme = app.current_theme()
        assert backend.color_at(x, 0) == theme.color_pair(ColorStyle.HIGHLIGHT)


# ---------------------------------------------------------------------------
# Menubar row reservation
# ---------------------------------------------------------------------------


class TestAutohide:
    def test_hidden_menubar_reserves_no_row(self) -> None:
        app, backend = make_app(10, 4)
        fill = Fill("x")
        app.add_layer(fill)
        render(app)
        assert backend.row(0) == "x" * 10
        assert fill.layout_sizes[-1] == Vec2(10, 4)

    def test_visible_menubar_offsets_screen(self) -> None:
        app, backend = make_app(10, 4, config=AppConfig(autohide_menu=False))
        fill = Fill("x")
        app.add_layer(fill)
        render(app)
        assert backend.row(0) == " " * 10
        assert backend.row(1) == "x" * 10
        assert backend.row(3) == "x" * 10
        assert fill.layout_sizes[-1] == Vec2(10, 3)

    def test_active_autohidden_menubar_covers_first_row(self) -> None:
        app, backend = make_app(10, 4)
        app.menubar.add_subtree("File", MenuTree())
        fill = Fill("x")
        app.add_layer(fill)
        app.select_menubar()
        render(app)
        assert fill.layout_sizes[-1] == Vec2(10, 4)
        assert "x" not in backend.row(0)
        assert "File" in backend.row(0)
        assert backend.row(1) == "x" * 10
        assert backend.row(3) == "x" * 10

    def test_opening_autohidden_menubar_does_not_move_screen(self) -> None:
        app, backend = make_app(10, 4)
        fill = Fill("x")
        app.add_layer(fill)
        render(app)
        before = backend.lines()[1:]

        app.select_menubar()
        render(app)
        assert backend.lines()[1:] == before
        assert fill.layout_sizes[-1] == Vec2(10, 4)

    def test_toggling_autohide_applies_on_next_layout(self) -> None:
        app, backend = make_app(10, 4)
        fill = Fill("x")
        app.add_layer(fill)
        render(app)
        assert backend.row(0) == "x" * 10

        app.set_autohide_menu(False)
        render(app)
        assert backend.row(0) == " " * 10
        assert fill.layout_sizes[-1] == Vec2(10, 3)

        app.set_autohide_menu(True)
        render(app)
        assert backend.row(0) == "x" * 10
        assert fill.layout_sizes[-1] == Vec2(10, 4)


# ---------------------------------------------------------------------------
# Event dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_active_menubar_gets_event_before_global_callbacks(self) -> None:
        app, _ = make_app()
        calls: list[str] = []
        app.menubar.add_subtree("File", MenuTree()).add_subtree("Edit", MenuTree())
        app.add_global_callback(Key.right, lambda a: calls.append("global"))
        layer = Recorder()
        app.add_layer(layer)

        app.select_menubar()
        app.on_event(Key.right)

        assert calls == []
        assert layer.events == []
        assert app.menubar.selected == 1

    def test_active_menubar_drops_ignored_events(self) -> None:
        app, _ = make_app()
        calls: list[str] = []
        app.add_global_callback("q", lambda a: calls.append("global"))
        layer = Recorder()
        app.add_layer(layer)

        app.select_menubar()
        app.on_event("q")

        assert calls == []
        assert layer.events == []

    def test_ignored_event_falls_back_to_global_callback_once(self) -> None:
        app, _ = make_app()
        calls: list[str] = []
        app.add_global_callback("q", lambda a: calls.append("global"))
        layer = Recorder()
        app.add_layer(layer)

        app.on_event("q")

        assert calls == ["global"]
        assert layer.events == [Event.of_key("q")]

    def test_consumed_event_skips_global_callbacks(self) -> None:
        app, _ = make_app()
        calls: list[str] = []
        app.add_global_callback("q", lambda a: calls.append("global"))
        app.add_layer(Recorder(consume=True, callback=lambda a: calls.append("layer")))

        app.on_event("q")

        assert calls == ["layer"]

    def test_only_top_layer_receives_events(self) -> None:
        app, _ = make_app()
        bottom = Recorder(consume=True)
        top = Recorder()
        app.add_layer(bottom)
        app.add_layer(top)

        app.on_event("x")

        assert bottom.events == []
        assert top.events == [Event.of_key("x")]

    def test_missing_binding_is_ignored(self) -> None:
        app, _ = make_app()
        app.on_event("z")
        assert app.is_running() is True

    def test_callback_gets_application(self) -> None:
        app, _ = make_app()
        seen: list[Application] = []
        app.add_global_callback(Event.REFRESH, seen.append)
        app.on_event(Event.REFRESH)
        assert seen == [app]

    def test_duplicate_binding_keeps_last(self) -> None:
        app, _ = make_app()
        calls: list[str] = []
        app.add_global_callback("q", lambda a: calls.append("first"))
        app.add_global_callback(Event.of_key("q"), lambda a: calls.append("second"))

        app.on_event("q")

        assert calls == ["second"]

    def test_clear_global_callbacks(self) -> None:
        app, _ = make_app()
        calls: list[str] = []
        app.add_global_callback("q", lambda a: calls.append("q"))
        app.clear_global_callbacks("q")
        app.on_event("q")
        assert calls == []


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestLookup:
    def test_find_id_with_matching_type(self) -> None:
        app, _ = make_app()
        text = TextView("hello")
        app.add_layer(IdView("label", text))
        assert app.find_id("label", TextView) is text

    def test_find_id_with_wrong_type_returns_none(self) -> None:
        app, _ = make_app()
        app.add_layer(IdView("label", TextView("hello")))
        assert app.find_id("label", Menubar) is None

    def test_find_id_missing_returns_none(self) -> None:
        app, _ = make_app()
        app.add_layer(IdView("label", TextView("hello")))
        assert app.find_id("other", TextView) is None

    def test_found_view_mutation_shows_on_next_draw(self) -> None:
        app, backend = make_app(20, 3)
        app.add_layer(IdView("label", TextView("hello")))
        render(app)
        assert backend.row(0).startswith("hello")

        view = app.find_id("label", TextView)
        assert view is not None
        view.set_content("changed")
        render(app)
        assert backend.row(0).startswith("changed")

    def test_find_by_predicate(self) -> None:
        app, _ = make_app()
        text = TextView("hello")
        app.add_layer(Fill("x"))
        app.add_layer(IdView("label", text))
        selector = Selector.matching(lambda v: isinstance(v, TextView))
        assert app.find(selector, TextView) is text

    def test_find_only_searches_active_screen(self) -> None:
        app, _ = make_app()
        app.add_layer(IdView("label", TextView("hello")))
        app.add_active_screen()
        assert app.find_id("label", TextView) is None


# ---------------------------------------------------------------------------
# Theme and refresh rate
# ---------------------------------------------------------------------------


class TestTheme:
    def test_set_theme_replaces_theme(self) -> None:
        app, _ = make_app()
        theme = Theme(shadow=False)
        app.set_theme(theme)
        assert app.current_theme() is theme

    def test_load_theme(self) -> None:
        app, _ = make_app()
        app.load_theme('borders = "outset"\n')
        assert app.current_theme().borders is BorderStyle.OUTSET

    def test_bad_theme_keeps_current(self) -> None:
        app, _ = make_app()
        before = app.current_theme()
        with pytest.raises(ThemeParseError):
            app.load_theme("[colors]\nview = 'not a color'\n")
        assert app.current_theme() is before

    def test_missing_theme_file_keeps_current(self, tmp_path) -> None:
        app, _ = make_app()
        before = app.current_theme()
        with pytest.raises(ThemeFileError):
            app.load_theme_file(tmp_path / "missing.toml")
        assert app.current_theme() is before

    def test_set_fps(self) -> None:
        app, backend = make_app()
        app.set_fps(60)
        assert backend.fps == 60
        assert app.fps == 60

    @pytest.mark.parametrize("fps", [-1, 1001])
    def test_set_fps_out_of_range(self, fps: int) -> None:
        app, backend = make_app()
        with pytest.raises(ValueError):
            app.set_fps(fps)
        assert backend.fps == 0


# ---------------------------------------------------------------------------
# Event loop
# ---------------------------------------------------------------------------


class TestRun:
    def test_resize_clears_and_relayouts(self) -> None:
        app, backend = make_app(40, 10)
        fill = Fill("x")
        app.add_layer(fill)
        app.add_global_callback("q", Application.quit)
        backend.feed_resize(60, 20)
        backend.feed("q")

        app.run()

        assert backend.calls == ["init", "refresh", "poll", "clear", "refresh", "poll", "finish"]
        assert fill.layout_sizes == [Vec2(40, 10), Vec2(60, 20)]
        assert backend.frames[-1][0] == "x" * 60

    def test_quit_stops_polling_and_finishes_once(self) -> None:
        app, backend = make_app()
        app.add_global_callback("q", Application.quit)
        backend.feed("q", "x", "y")

        app.run()

        assert backend.poll_count == 1
        assert backend.pending_events == 2
        assert backend.finish_count == 1
        assert app.is_running() is False

    def test_quit_lets_current_callback_finish(self) -> None:
        app, backend = make_app()
        calls: list[str] = []

        def stop(a: Application) -> None:
            a.quit()
            calls.append("after quit")

        app.add_global_callback("q", stop)
        backend.feed("q")
        app.run()
        assert calls == ["after quit"]

    def test_quit_from_layer_callback(self) -> None:
        app, backend = make_app()
        app.add_layer(Recorder(consume=True, callback=Application.quit))
        backend.feed("x")
        app.run()
        assert backend.poll_count == 1
        assert backend.finish_count == 1

    def test_exception_in_callback_still_finishes(self) -> None:
        app, backend = make_app()

        def boom(a: Application) -> None:
            raise RuntimeError("boom")

        app.add_global_callback("b", boom)
        backend.feed("b")
        with pytest.raises(RuntimeError, match="boom"):
            app.run()
        assert backend.finish_count == 1

    def test_backend_failure_still_finishes(self) -> None:
        app, backend = make_app()
        with pytest.raises(OutOfEvents):
            app.run()
        assert backend.finish_count == 1

    def test_run_inside_context_manager_finishes_once(self) -> None:
        backend = VirtualBackend()
        with Application(backend=backend) as app:
            app.add_global_callback("q", Application.quit)
            backend.feed("q")
            app.run()
        assert backend.finish_count == 1

    def test_step_draws_before_polling(self) -> None:
        app, backend = make_app()
        backend.feed("a")
        app.step()
        assert backend.calls == ["init", "refresh", "poll"]


# ---------------------------------------------------------------------------
# Menubar through the application
# ---------------------------------------------------------------------------


class TestMenubarFlow:
    def _app_with_menu(self) -> tuple[Application, VirtualBackend, list[str]]:
        app, backend = make_app(40, 10)
        calls: list[str] = []
        app.menubar.add_subtree(
            "File",
            MenuTree().leaf("Open", lambda a: calls.append("open")).leaf("Quit", Application.quit),
        )
        app.add_global_callback(Key.escape, Application.select_menubar)
        return app, backend, calls

    def test_enter_opens_popup_and_releases_focus(self) -> None:
        app, _, _ = self._app_with_menu()
        app.select_menubar()
        app.on_event(Key.enter)

        assert app.menubar.receive_events() is False
        assert isinstance(app.screen().top, MenuPopup)

    def test_popup_drawn_below_menubar_row(self) -> None:
        app, backend, _ = self._app_with_menu()
        app.select_menubar()
        app.on_event(Key.down)
        render(app)
        assert backend.grid[1][1] == "┌"
        assert backend.find_text("Open") == Vec2(3, 2)

    def test_leaf_runs_callback_and_closes_popup(self) -> None:
        app, _, calls = self._app_with_menu()
        app.select_menubar()
        app.on_event(Key.enter)
        app.on_event(Key.enter)

        assert calls == ["open"]
        assert len(app.screen()) == 0

    def test_leaf_can_quit(self) -> None:
        app, _, _ = self._app_with_menu()
        app.select_menubar()
        app.on_event(Key.enter)
        app.on_event(Key.down)
        app.on_event(Key.enter)
        assert app.is_running() is False

    def test_escape_in_popup_returns_to_menubar(self) -> None:
        app, _, _ = self._app_with_menu()
        app.select_menubar()
        app.on_event(Key.enter)
        app.on_event(Key.escape)

        assert len(app.screen()) == 0
        assert app.menubar.receive_events() is True

        app.on_event(Key.escape)
        assert app.menubar.receive_events() is False

    def test_global_escape_selects_menubar(self) -> None:
        app, _, _ = self._app_with_menu()
        app.on_event(Key.escape)
        assert app.menubar.receive_events() is True
