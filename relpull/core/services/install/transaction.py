"""
L4 Execution — Commit a located binary and record it.

Steps, in order:

    1. short-circuit with NoUpdateNeeded if the alias is already at
       this version
    2. copy the binary into the install dir (temp file + atomic rename)
    3. chmod 0755
    4. record the Package (first install only) and the InstalledRecord
    5. persist the store

There is no filesystem rollback; the persisted store is the recovery
boundary.  It is only written in step 5, so a failure anywhere earlier
leaves the previously committed records untouched.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

from relpull.core.errors import NoUpdateNeeded
from relpull.core.models.package import InstalledRecord, Package
from relpull.core.models.store import PackageStore
from relpull.core.models.version import VersionIdentifier, same_version

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755

Persist = Callable[[PackageStore], None]


def check_up_to_date(store: PackageStore, alias: str, version: VersionIdentifier) -> None:
    """Raise NoUpdateNeeded if ``alias`` is installed at ``version``.

    Tags are compared after normalisation, so a record of ``v1.0.0``
    matches a resolved ``1.0.0``.
    """
    record = store.installed.get(alias)
    if record is not None and same_version(record.version, version):
        raise NoUpdateNeeded(alias, record.version)


def place_binary(source: Path, destination: Path) -> None:
    """Copy ``source`` to ``destination`` atomically and make it executable."""
    destination.parent.mkdir(parents=True, exist_ok=True)

    _fd, tmp_path = tempfile.mkstemp(dir=destination.parent, prefix=f".{destination.name}.")
    os.close(_fd)
    tmp = Path(tmp_path)
    try:
        shutil.copyfile(source, tmp)
        tmp.chmod(EXECUTABLE_MODE)
        tmp.replace(destination)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def commit(
    store: PackageStore,
    package: Package,
    version: VersionIdentifier,
    source: Path,
    install_dir: Path,
    *,
    standalone: bool,
    persist: Persist,
) -> InstalledRecord:
    """Install ``source`` for ``package`` and record it in ``store``.

    Args:
        store: Store to update in memory.
        package: Package being installed.
        version: Concrete resolved version.
        source: Located binary (inside the work dir).
        install_dir: Directory binaries are installed into.
        standalone: True when the downloaded asset itself is the binary;
            it is then installed under the package alias.
        persist: Writes the store to disk.

    Returns:
        The new InstalledRecord.
    """
    check_up_to_date(store, package.alias, version)

    destination = install_dir / (package.alias if standalone else source.name)
    previous = store.installed.get(package.alias)

    logger.info("Binary '%s'.", source)
    logger.info("Installing to '%s' and setting executable.", destination)
    place_binary(source, destination)

    # Stage on a copy so a failed save leaves the caller's store as it was
    staged = store.model_copy(deep=True)
    if previous is None:
        staged.set_package(package)

    record = InstalledRecord(name=package.name, version=version.as_tag(), path=destination)
    staged.set_installed(package.alias, record)
    persist(staged)

    store.packages = staged.packages
    store.installed = staged.installed

    if previous is not None and previous.path != destination:
        _remove_stale(previous.path)

    return record


def _remove_stale(path: Path) -> None:
    """Best-effort removal of a binary replaced under a new file name."""
    try:
        path.unlink(missing_ok=True)
        logger.info("Removed previous binary %s", path)
    except OSError as e:
        logger.warning("Could not remove previous binary %s: %s", path, e)
