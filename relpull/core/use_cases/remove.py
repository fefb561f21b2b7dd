"""
Remove use case — delete an installed binary and forget the package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from relpull.core.context import RelpullPaths
from relpull.core.errors import FileDeleteError, PackageNotFoundError, RelpullError
from relpull.core.persistence.store import locked_store, save_store

logger = logging.getLogger(__name__)


@dataclass
class RemoveResult:
    """Result of the remove use case."""

    alias: str = ""
    name: str = ""
    path: Path | None = None
    file_deleted: bool = False
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.error:
            return {"alias": self.alias, "error": self.error, "error_kind": self.error_kind}
        return {
            "alias": self.alias,
            "name": self.name,
            "path": str(self.path) if self.path else None,
            "file_deleted": self.file_deleted,
        }


def run_remove(alias: str, *, paths: RelpullPaths) -> RemoveResult:
    """Remove the package installed as ``alias``.

    The binary is unlinked first (a missing file is fine), then both
    records are dropped and the store is saved.  An unknown alias
    touches nothing on disk.
    """
    result = RemoveResult(alias=alias)

    try:
        with locked_store(paths) as store:
            record = store.installed.get(alias)
            if record is None:
                raise PackageNotFoundError(alias)

            result.name = record.name
            result.path = record.path

            if record.path.exists():
                logger.debug("Removing %s", record.path)
                try:
                    record.path.unlink()
                except OSError as e:
                    raise FileDeleteError(record.path, str(e)) from e
                result.file_deleted = True
            else:
                logger.info("Binary %s already gone", record.path)

            store.forget(alias)
            save_store(store, paths)
    except RelpullError as e:
        result.error = str(e)
        result.error_kind = type(e).__name__

    return result
