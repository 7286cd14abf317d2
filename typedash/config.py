from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_ENV = "TYPEDASH_CONFIG"
CONFIG_PATH = Path(__file__).resolve().parent / "typedash.config.json"

DEFAULT_DURATION = 60
DEFAULT_THEME = "slate"
DURATIONS = (15, 30, 60, 120)


class ConfigError(ValueError):
    """A startup invariant (vocabulary, duration, line size) does not hold."""


# ---------------------------
# Paths
# ---------------------------

def sys_platform() -> str:
    try:
        return os.uname().sysname.lower()
    except AttributeError:
        # windows
        return os.name.lower()


def data_dir() -> Path:
    """
    Per-user data directory (log file lives here):
    - macOS: ~/Library/Application Support/typedash
    - Linux: $XDG_DATA_HOME/typedash or ~/.local/share/typedash
    """
    home = Path.home()
    if sys_platform() == "darwin":
        return home / "Library" / "Application Support" / "typedash"
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "typedash"
    return home / ".local" / "share" / "typedash"


def config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return CONFIG_PATH


# ---------------------------
# Settings
# ---------------------------

@dataclass
class Settings:
    duration_sec: int = DEFAULT_DURATION
    line_size: int = 12
    theme: str = DEFAULT_THEME
    sound: bool = True
    text_file: Optional[str] = None
    themes: Dict[str, Dict[str, str]] = field(default_factory=dict)


def load_config(path: Optional[Path] = None) -> Dict[str, object]:
    path = path or config_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: top level is not an object", path)
        return {}
    return data


def _positive_int(value: object, default: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def load_settings(path: Optional[Path] = None) -> Settings:
    config = load_config(path)
    settings = Settings()
    settings.duration_sec = _positive_int(config.get("duration_sec"), settings.duration_sec)
    settings.line_size = _positive_int(config.get("line_size"), settings.line_size)
    theme = config.get("theme")
    if isinstance(theme, str) and theme:
        settings.theme = theme
    sound = config.get("sound")
    if isinstance(sound, bool):
        settings.sound = sound
    text_file = config.get("text_file")
    if isinstance(text_file, str) and text_file:
        settings.text_file = text_file
    extra_themes = config.get("themes")
    if isinstance(extra_themes, dict):
        for name, colors in extra_themes.items():
            if isinstance(colors, dict):
                settings.themes[str(name)] = {str(k): str(v) for k, v in colors.items()}
    return settings
