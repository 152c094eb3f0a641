"""
Where clones go and which credentials they use.

Settings are read from an INI file in the platform config directory
($XDG_CONFIG_HOME/revclone/revclone.cfg, or Application Support on macOS):

    [dirs]
    clones = ~/scratch/clones

    [auth]
    token = ghp_...

REVCLONE_TOKEN, REVCLONE_USERNAME and REVCLONE_PASSWORD take precedence over
the [auth] section.
"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

from revclone.model import Credentials, PersonalAccessToken, UsernameAndPassword

logger = logging.getLogger(__name__)

APP_NAME = "revclone"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")
xdg_cache_home = os.environ.get("XDG_CACHE_HOME") or os.path.join(_home, ".cache")

default_cfg = {"dirs": {"clones": os.path.join(xdg_cache_home, APP_NAME, "clones")}}

if platform.system() == "Darwin":
    config_dir = Path(f"~/Library/Application Support/{APP_NAME}").expanduser()
else:
    config_dir = Path(xdg_config_home) / APP_NAME

ENV_TOKEN = "REVCLONE_TOKEN"
ENV_USERNAME = "REVCLONE_USERNAME"
ENV_PASSWORD = "REVCLONE_PASSWORD"


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    Read-only view of a revclone config file.

    A missing file behaves like an empty one.

    Usage:
        config = ConfigAccessor()
        clones = config.get("dirs", "clones", default="/tmp/clones")
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else get_config_file()
        self.config = configparser.ConfigParser()
        try:
            self.config.read(self.config_path)
        except configparser.Error as e:
            logger.warning(f"Ignoring unreadable config file {self.config_path}: {e}")

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get `key` from `section`, or `default` when either is missing."""
        return self.config.get(section, key, fallback=default)


config = ConfigAccessor()


def get_clone_base_dir() -> Path:
    """
    Get the directory under which clone workspaces are allocated.

    Returns:
        The configured [dirs] clones path (default ~/.cache/revclone/clones),
        created if it does not exist yet
    """
    base_dir = Path(
        config.get("dirs", "clones", default_cfg["dirs"]["clones"])
    ).expanduser()
    base_dir.mkdir(parents=True, exist_ok=True)
    return base_dir


def get_credentials() -> Optional[Credentials]:
    """
    Get repository credentials from the environment or the [auth] section.

    Environment variables take precedence over the config file, and a token
    wins over a username/password pair.

    Returns:
        The configured credentials, or None when nothing is configured
    """
    token = os.environ.get(ENV_TOKEN) or config.get("auth", "token")
    if token:
        return PersonalAccessToken(token)

    username = os.environ.get(ENV_USERNAME) or config.get("auth", "username")
    if username:
        password = os.environ.get(ENV_PASSWORD) or config.get("auth", "password", "")
        return UsernameAndPassword(username, password)

    return None
