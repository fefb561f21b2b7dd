"""
List use case — what is installed, and from where.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from relpull.core.context import RelpullPaths
from relpull.core.errors import EmptyPackageListError, RelpullError
from relpull.core.persistence.store import load_store

logger = logging.getLogger(__name__)


@dataclass
class ListEntry:
    alias: str
    version: str
    path: str
    repository: str


@dataclass
class ListResult:
    """Result of the list use case."""

    entries: list[ListEntry] = field(default_factory=list)
    orphaned: list[str] = field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error, "error_kind": self.error_kind}
        return {
            "installed": [
                {
                    "alias": e.alias,
                    "version": e.version,
                    "path": e.path,
                    "repository": e.repository,
                }
                for e in self.entries
            ],
            "orphaned": self.orphaned,
        }


def run_list(*, paths: RelpullPaths) -> ListResult:
    """List installed packages, sorted by alias.

    Records without a matching package config are reported in
    ``orphaned`` and left out of ``entries``.
    """
    result = ListResult()

    try:
        store = load_store(paths)
        if not store.installed:
            raise EmptyPackageListError()
    except RelpullError as e:
        result.error = str(e)
        result.error_kind = type(e).__name__
        return result

    for alias in sorted(store.installed):
        record = store.installed[alias]
        package = store.packages.get(record.name)
        if package is None:
            logger.warning("Installed alias '%s' has no package config for %s, skipping", alias, record.name)
            result.orphaned.append(alias)
            continue
        result.entries.append(
            ListEntry(
                alias=alias,
                version=record.version,
                path=str(record.path),
                repository=f"https://github.com/{package.name}",
            )
        )

    return result
