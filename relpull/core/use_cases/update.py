"""
Update use case — bring installed packages to their latest release.

Packages are processed one after another; each one's pipeline runs to
completion before the next starts.  A failure is recorded against
that package and the batch moves on.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from relpull.adapters.base import ReleaseGateway
from relpull.core.context import RelpullPaths
from relpull.core.errors import (
    EmptyPackageListError,
    NoUpdateNeeded,
    PackageNotFoundError,
    RelpullError,
)
from relpull.core.models.platform import PlatformDescriptor
from relpull.core.persistence.store import locked_store, save_store
from relpull.core.services.install.pipeline import install_release
from relpull.core.services.install.selection import Chooser, fail_on_ambiguous

logger = logging.getLogger(__name__)

STATUS_UPDATED = "updated"
STATUS_UP_TO_DATE = "up_to_date"
STATUS_FAILED = "failed"


@dataclass
class UpdateOutcome:
    """What happened to one package."""

    alias: str
    name: str
    status: str
    version: str | None = None
    previous_version: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "alias": self.alias,
            "name": self.name,
            "status": self.status,
            "version": self.version,
            "previous_version": self.previous_version,
            "error": self.error,
        }


@dataclass
class UpdateReport:
    """Result of the update use case."""

    outcomes: list[UpdateOutcome] = field(default_factory=list)
    duration_s: float = 0.0
    error: str | None = None
    error_kind: str | None = None

    @property
    def checked(self) -> int:
        return len(self.outcomes)

    @property
    def updated(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_UPDATED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_FAILED)

    @property
    def ok(self) -> bool:
        return self.error is None and self.failed == 0

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error, "error_kind": self.error_kind}
        return {
            "checked": self.checked,
            "updated": self.updated,
            "failed": self.failed,
            "duration_s": round(self.duration_s, 3),
            "packages": [o.to_dict() for o in self.outcomes],
        }


def run_update(
    *,
    paths: RelpullPaths,
    gateway: ReleaseGateway,
    platform: PlatformDescriptor,
    only: str | None = None,
    on_ambiguous: Chooser = fail_on_ambiguous,
    on_outcome: Callable[[UpdateOutcome], None] | None = None,
    token: str | None = None,
) -> UpdateReport:
    """Update every package, or just the one whose alias or repo is ``only``.

    Args:
        paths: relpull directories.
        gateway: Release host.
        platform: Target platform.
        only: Alias or ``owner/repo`` to restrict the run to.
        on_ambiguous: Picks one asset when several match.
        on_outcome: Called after each package finishes.
        token: Optional bearer token for downloads.

    Returns:
        UpdateReport with one outcome per checked package.
    """
    report = UpdateReport()
    started = time.monotonic()

    try:
        with locked_store(paths) as store:
            if not store.packages:
                raise EmptyPackageListError()

            targets = [
                store.packages[key]
                for key in sorted(store.packages, key=lambda k: store.packages[k].alias)
                if only is None or only in (key, store.packages[key].alias)
            ]
            if not targets:
                raise PackageNotFoundError(only or "")

            for package in targets:
                record = store.installed.get(package.alias)
                outcome = UpdateOutcome(
                    alias=package.alias,
                    name=package.name,
                    status=STATUS_FAILED,
                    previous_version=record.version if record else None,
                )
                logger.info("Checking %s ...", package.alias)
                try:
                    installed = install_release(
                        store,
                        package,
                        gateway=gateway,
                        platform=platform,
                        paths=paths,
                        persist=lambda s: save_store(s, paths),
                        on_ambiguous=on_ambiguous,
                        token=token,
                    )
                    outcome.status = STATUS_UPDATED
                    outcome.version = installed.version
                except NoUpdateNeeded as e:
                    outcome.status = STATUS_UP_TO_DATE
                    outcome.version = e.version
                except (RelpullError, OSError) as e:
                    logger.debug("update of %s failed", package.alias, exc_info=True)
                    outcome.error = str(e)
                except Exception as e:
                    logger.error("Unexpected error updating %s", package.alias, exc_info=True)
                    outcome.error = f"{package.name}: unexpected error: {type(e).__name__}: {e}"

                report.outcomes.append(outcome)
                if on_outcome is not None:
                    on_outcome(outcome)
    except RelpullError as e:
        report.error = str(e)
        report.error_kind = type(e).__name__

    report.duration_s = time.monotonic() - started
    return report
