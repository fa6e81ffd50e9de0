"""Application configuration, optionally read from ``TUIKIT_*`` variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from tuikit.backend import check_fps

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Settings applied when an :class:`~tuikit.app.Application` starts."""

    fps: int = 0
    autohide_menu: bool = True
    theme_path: str | None = None
    write_log_path: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Build a config from ``TUIKIT_FPS``, ``TUIKIT_AUTOHIDE_MENU``,
        ``TUIKIT_THEME`` and ``TUIKIT_WRITE_LOG``.

        Unset variables keep their defaults; a malformed number is logged
        and ignored.
        """
        env = os.environ if environ is None else environ
        config = cls()

        fps = env.get("TUIKIT_FPS")
        if fps:
            try:
                config.fps = check_fps(int(fps))
            except ValueError:
                logger.warning("Ignoring invalid TUIKIT_FPS=%r", fps)

        autohide = env.get("TUIKIT_AUTOHIDE_MENU")
        if autohide:
            config.autohide_menu = autohide.strip().lower() not in ("0", "false", "no", "off")

        config.theme_path = env.get("TUIKIT_THEME") or None
        config.write_log_path = env.get("TUIKIT_WRITE_LOG", "")
        return config
