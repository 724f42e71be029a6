"""
Configuration loader for fast-kit.

Configuration is resolved once at process start (see load_config) and handed
to the stores explicitly. Nothing below this module reads the environment.

Resolution order, lowest to highest precedence:
  1. built-in defaults
  2. <home>/kit.env (LIST_LIMIT, SEARCH_LIMIT, ANALYTICS)
  3. FAST_KIT_* environment variables
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from . import envparse
from .constants import DEFAULT_LIST_LIMIT, DEFAULT_SEARCH_LIMIT

logger = logging.getLogger(__name__)

HOME_ENV = "FAST_KIT_HOME"
ENV_PREFIX = "FAST_KIT_"
SETTINGS_FILE = "kit.env"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class KitConfig:
    """Resolved fast-kit settings."""
    home: Path
    list_limit: int = DEFAULT_LIST_LIMIT
    search_limit: int = DEFAULT_SEARCH_LIMIT
    analytics_enabled: bool = True

    @property
    def prompts_dir(self) -> Path:
        return self.home / "prompts"

    @property
    def specs_dir(self) -> Path:
        return self.home / "specs"

    @property
    def analytics_dir(self) -> Path:
        return self.home / "analytics"


def default_home(environ: Mapping[str, str]) -> Path:
    """Storage root: $FAST_KIT_HOME, else ~/.fast-kit."""
    if environ.get(HOME_ENV):
        return Path(environ[HOME_ENV]).expanduser()
    return Path.home() / ".fast-kit"


def _parse_limit(key: str, raw: str, default: int) -> int:
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {key}={raw!r}: not an integer, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring {key}={raw!r}: must be positive, using {default}")
        return default
    return value


def _parse_bool(key: str, raw: str, default: bool) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    logger.warning(f"Ignoring {key}={raw!r}: not a boolean, using {default}")
    return default


def load_config(home: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> KitConfig:
    """Build a KitConfig from defaults, kit.env and the environment.

    Args:
        home: Explicit storage root (e.g. from --home); wins over FAST_KIT_HOME
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Resolved KitConfig
    """
    if environ is None:
        environ = os.environ
    home = Path(home).expanduser() if home else default_home(environ)

    settings: dict[str, str] = {}
    settings_path = home / SETTINGS_FILE
    if settings_path.exists():
        settings.update(envparse.load_env(settings_path))
        logger.debug(f"Loaded settings from {settings_path}")

    for key in ("LIST_LIMIT", "SEARCH_LIMIT", "ANALYTICS"):
        env_key = ENV_PREFIX + key
        if env_key in environ:
            settings[key] = environ[env_key]

    config = KitConfig(home=home)
    if "LIST_LIMIT" in settings:
        config.list_limit = _parse_limit("LIST_LIMIT", settings["LIST_LIMIT"], DEFAULT_LIST_LIMIT)
    if "SEARCH_LIMIT" in settings:
        config.search_limit = _parse_limit("SEARCH_LIMIT", settings["SEARCH_LIMIT"], DEFAULT_SEARCH_LIMIT)
    if "ANALYTICS" in settings:
        config.analytics_enabled = _parse_bool("ANALYTICS", settings["ANALYTICS"], True)

    return config
