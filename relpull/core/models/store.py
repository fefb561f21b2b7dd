"""
PackageStore — the root in-memory model of everything relpull manages.

Loaded from packages.yml (``packages``) and installed.json
(``installed``) on every operation, mutated in memory, then written back
in full.  The two halves are independent on disk; either may be missing.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from relpull.core.models.package import InstalledRecord, Package

logger = logging.getLogger(__name__)


class PackageStore(BaseModel):
    """Package configs keyed by repo id, installed records keyed by alias."""

    packages: dict[str, Package] = Field(default_factory=dict)
    installed: dict[str, InstalledRecord] = Field(default_factory=dict)

    def package_for_alias(self, alias: str) -> Package | None:
        """Find the package config whose alias is ``alias``."""
        for package in self.packages.values():
            if package.alias == alias:
                return package
        return None

    def package_for_record(self, alias: str) -> Package | None:
        """Package config backing an installed record, or None if orphaned."""
        record = self.installed.get(alias)
        if record is None:
            return None
        return self.packages.get(record.name)

    def is_installed(self, alias: str) -> bool:
        return alias in self.installed

    def set_package(self, package: Package) -> None:
        self.packages[package.name] = package

    def set_installed(self, alias: str, record: InstalledRecord) -> None:
        self.installed[alias] = record

    def forget(self, alias: str) -> InstalledRecord | None:
        """Drop an alias and its package config.  Returns the removed record."""
        record = self.installed.pop(alias, None)
        if record is None:
            return None
        package = self.packages.get(record.name)
        if package is not None and package.alias == alias:
            del self.packages[record.name]
        return record

    def orphaned_aliases(self) -> list[str]:
        """Aliases whose record has no package config."""
        return sorted(
            alias for alias, record in self.installed.items()
            if record.name not in self.packages
        )
