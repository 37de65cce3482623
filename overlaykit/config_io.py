"""Locations of configuration files and raw access to them."""

from __future__ import annotations

import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

APP_DIR_NAME = "wlxoverlay"
FALLBACK_CONFIG_PATH = Path("/tmp") / APP_DIR_NAME
CONF_D_NAME = "conf.d"


def _config_home() -> Path | None:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    home = os.environ.get("HOME")
    if not home:
        try:
            home = str(Path.home())
        except (RuntimeError, KeyError):
            return None
    return Path(home) / ".config"


def config_root() -> Path:
    """Return the root configuration directory."""
    home = _config_home()
    if home is None:
        log.error("Err: Failed to find config path, using %s", FALLBACK_CONFIG_PATH)
        return FALLBACK_CONFIG_PATH
    return home / APP_DIR_NAME


def conf_d_path() -> Path:
    """Return the directory holding drop-in configuration files."""
    return config_root() / CONF_D_NAME


def ensure_config_root() -> Path:
    """Create the root and conf.d directories if missing and return the root."""
    root = config_root()
    for directory in (root, conf_d_path()):
        try:
            directory.mkdir()
        except OSError:
            pass
    return root


def load(filename: str) -> str | None:
    """Return the text of a file in the config root, or None if unreadable."""
    path = config_root() / filename
    log.info("Loading config %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None