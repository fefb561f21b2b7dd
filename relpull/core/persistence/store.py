"""
Store persistence — load, save and lock the combined PackageStore.

Every mutating command follows the same cycle:

    with locked_store(paths) as store:
        ...mutate store...
        save_store(store, paths)

The lock is an exclusive ``fcntl.flock`` on a side file in the state
directory, held for the whole read-mutate-write cycle so two
concurrent invocations cannot lose each other's updates.
"""

from __future__ import annotations

import fcntl
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

from relpull.core.config.loader import load_packages, save_packages
from relpull.core.context import RelpullPaths
from relpull.core.models.store import PackageStore
from relpull.core.persistence.state_file import load_installed, save_installed

logger = logging.getLogger(__name__)


def load_store(paths: RelpullPaths) -> PackageStore:
    """Read both halves of the store.  Missing files are empty maps."""
    return PackageStore(
        packages=load_packages(paths.config_file),
        installed=load_installed(paths.state_file),
    )


def save_store(store: PackageStore, paths: RelpullPaths) -> None:
    """Rewrite packages.yml and installed.json from ``store``."""
    save_packages(store.packages, paths.config_file)
    save_installed(store.installed, paths.state_file)


@contextmanager
def store_lock(paths: RelpullPaths) -> Iterator[None]:
    """Hold the exclusive advisory lock on the store.

    Tries a non-blocking lock first so we can tell the user why we
    are waiting, then blocks.
    """
    paths.state_dir.mkdir(parents=True, exist_ok=True)
    fd = os.open(paths.lock_file, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            logger.warning("Another relpull process holds %s, waiting", paths.lock_file)
            fcntl.flock(fd, fcntl.LOCK_EX)
        yield
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        os.close(fd)


@contextmanager
def locked_store(paths: RelpullPaths) -> Iterator[PackageStore]:
    """Lock, then load the store.  The caller decides whether to save."""
    with store_lock(paths):
        yield load_store(paths)
