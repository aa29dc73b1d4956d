"""Config file discovery.

Lookup order:
  1. ``UDPCOMM_CONFIG`` env var (must name an existing file)
  2. ``udpcomm.toml`` in *start* or any parent directory
  3. ``$XDG_CONFIG_HOME/udpcomm/udpcomm.toml`` (default ``~/.config``)
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "udpcomm.toml"
CONFIG_ENV_VAR = "UDPCOMM_CONFIG"


def user_config_path() -> Path:
    """Per-user config location."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "udpcomm" / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the first config file found, or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

    user_path = user_config_path()
    return user_path if user_path.is_file() else None
