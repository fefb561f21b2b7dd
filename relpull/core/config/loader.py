"""
Configuration loader — reads packages.yml into Package models.

The file maps each alias to its package settings:

    rg:
      name: BurntSushi/ripgrep
      alias: rg
      asset_pattern: ""
      file_pattern: ""

In memory, packages are keyed by repository id (``owner/repo``).
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from relpull.core.errors import ConfigError
from relpull.core.models.package import Package
from relpull.core.persistence.state_file import write_atomic

logger = logging.getLogger(__name__)


def load_packages(path: Path) -> dict[str, Package]:
    """Load and validate package configuration.

    Args:
        path: Path to packages.yml.

    Returns:
        Mapping of repo id to Package. Empty if the file doesn't exist.

    Raises:
        ConfigError: If the file is unreadable or invalid.
    """
    if not path.is_file():
        logger.debug("No config file at %s", path)
        return {}

    logger.debug("Reading config file from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Unable to read file '{path}': {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    packages: dict[str, Package] = {}
    for alias, entry in data.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"Entry '{alias}' in {path} must be a mapping")
        entry = {"alias": str(alias), **entry}
        try:
            package = Package.model_validate(entry)
        except ValidationError as e:
            raise ConfigError(f"Invalid package '{alias}' in {path}: {e}") from e
        packages[package.name] = package

    logger.info("Loaded %d package(s) from %s", len(packages), path)
    return packages


def save_packages(packages: dict[str, Package], path: Path) -> None:
    """Write packages.yml keyed by alias (atomic write, full rewrite)."""
    data = {
        package.alias: package.model_dump(mode="json")
        for package in sorted(packages.values(), key=lambda p: p.alias)
    }
    content = yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    logger.debug("Writing config file to %s", path)
    try:
        write_atomic(path, content, prefix=".packages_")
    except OSError as e:
        raise ConfigError(f"Writing config file: {path}: {e}") from e
