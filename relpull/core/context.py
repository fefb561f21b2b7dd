"""
Runtime context — where relpull keeps things on this machine.

Resolved ONCE at startup by the CLI and passed down explicitly:

    - install dir:  ~/.local/bin                   (RELPULL_BIN_DIR)
    - config dir:   packages.yml                   (RELPULL_CONFIG_DIR)
    - state dir:    installed.json + lock file     (RELPULL_STATE_DIR)
    - cache dir:    scratch space for downloads    (RELPULL_CACHE_DIR)

Defaults for the last three come from platformdirs.  Environment
overrides exist mainly so tests and CI can point everything at a
temporary directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir, user_state_dir

APP_NAME = "relpull"

CONFIG_FILE = "packages.yml"
STATE_FILE = "installed.json"
LOCK_FILE = "relpull.lock"


@dataclass(frozen=True)
class RelpullPaths:
    bin_dir: Path
    config_dir: Path
    state_dir: Path
    cache_dir: Path

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE

    @property
    def state_file(self) -> Path:
        return self.state_dir / STATE_FILE

    @property
    def lock_file(self) -> Path:
        return self.state_dir / LOCK_FILE

    @classmethod
    def under(cls, root: Path) -> RelpullPaths:
        """Everything below one directory (tests)."""
        return cls(
            bin_dir=root / "bin",
            config_dir=root / "config",
            state_dir=root / "state",
            cache_dir=root / "cache",
        )


def _env_path(var: str, default: str | Path) -> Path:
    value = os.environ.get(var)
    return Path(value).expanduser() if value else Path(default)


def resolve_paths() -> RelpullPaths:
    """Resolve all directories from the environment and platform defaults."""
    return RelpullPaths(
        bin_dir=_env_path("RELPULL_BIN_DIR", Path.home() / ".local" / "bin"),
        config_dir=_env_path("RELPULL_CONFIG_DIR", user_config_dir(APP_NAME)),
        state_dir=_env_path("RELPULL_STATE_DIR", user_state_dir(APP_NAME)),
        cache_dir=_env_path("RELPULL_CACHE_DIR", user_cache_dir(APP_NAME)),
    )


def github_token() -> str | None:
    """API token from the environment, or None for anonymous access."""
    return os.environ.get("GITHUB_TOKEN") or None
