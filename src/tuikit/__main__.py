"""Entry point for the ``python -m tuikit`` demo."""

from __future__ import annotations

import argparse
import logging
import sys

from tuikit.app import Application
from tuikit.config import AppConfig
from tuikit.errors import TuikitError
from tuikit.keys import Key
from tuikit.menu import MenuTree
from tuikit.view import IdView, TextView

INTRO = (
    "Welcome to tuikit.\n\n"
    "Press escape to open the menu bar, use the arrow keys to move and "
    "enter to choose. Press q to quit."
)


def _set_status(app: Application, text: str) -> None:
    status = app.find_id("status", TextView)
    if status is not None:
        status.set_content(text)


def _new_screen(app: Application) -> None:
    screen_id = app.add_active_screen()
    app.add_layer(TextView(f"This is screen {screen_id}. Press tab to cycle screens."))


def _next_screen(app: Application) -> None:
    app.set_screen((app.active_screen() + 1) % app.screen_count())


def build_demo(app: Application) -> None:
    app.add_layer(IdView("status", TextView(INTRO)))

    app.menubar.add_subtree(
        "File",
        MenuTree()
        .leaf("New screen", _new_screen)
        .leaf("Reset text", lambda a: _set_status(a, INTRO))
        .delimiter()
        .leaf("Quit", Application.quit),
    )
    app.menubar.add_subtree(
        "Help",
        MenuTree()
        .subtree(
            "Keys",
            MenuTree()
            .leaf("escape: menu", lambda a: _set_status(a, "escape selects the menu bar."))
            .leaf("tab: screens", lambda a: _set_status(a, "tab cycles through screens.")),
        )
        .leaf("About", lambda a: _set_status(a, "tuikit demo application.")),
    )

    app.add_global_callback("q", Application.quit)
    app.add_global_callback(Key.escape, Application.select_menubar)
    app.add_global_callback(Key.tab, _next_screen)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tuikit", description="tuikit demo application")
    parser.add_argument("--fps", type=int, default=None, help="Refresh rate (default: 0, no ticks)")
    parser.add_argument("--theme", default=None, help="Theme file (TOML)")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    parser.add_argument("--log-file", default=None, help="Write logs to this file")
    parser.add_argument("--no-autohide", action="store_true", help="Always show the menu bar")
    args = parser.parse_args(argv)

    # The terminal is taken over by the UI; logs only go to a file.
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=args.log_file,
        handlers=None if args.log_file else [logging.NullHandler()],
    )

    config = AppConfig.from_env()
    if args.fps is not None:
        config.fps = args.fps
    if args.theme:
        config.theme_path = args.theme
    if args.no_autohide:
        config.autohide_menu = False

    try:
        with Application(config=config) as app:
            build_demo(app)
            app.run()
    except (TuikitError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
