"""
L5 Orchestration — The release install pipeline.

One package, strictly in sequence; each stage feeds the next:

    resolve version → fetch release → choose asset → download
        → classify / extract → locate binary → commit

Download and extraction happen in a temporary directory under the
cache dir that is created fresh per attempt and removed on every exit
path.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from relpull.adapters.base import ReleaseGateway
from relpull.core.context import RelpullPaths
from relpull.core.errors import AssetNotFoundError, InstallStepError, UnableToFindBinaryError
from relpull.core.models.package import InstalledRecord, Package
from relpull.core.models.platform import PlatformDescriptor
from relpull.core.models.release import Asset, Release
from relpull.core.models.store import PackageStore
from relpull.core.models.version import VersionIdentifier, parse_version
from relpull.core.services.install.download import download
from relpull.core.services.install.locate import find_binary
from relpull.core.services.install.resolution import fetch_release, resolve_with_release
from relpull.core.services.install.selection import Chooser, choose_asset, fail_on_ambiguous
from relpull.core.services.install.transaction import Persist, check_up_to_date, commit
from relpull.core.services.install.unpack import Standalone, classify_and_extract

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """What one successful pipeline run produced."""

    package: Package
    version: str
    asset: Asset
    record: InstalledRecord
    previous_version: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.package.name,
            "alias": self.package.alias,
            "version": self.version,
            "previous_version": self.previous_version,
            "asset": self.asset.name,
            "path": str(self.record.path),
        }


def _resolve(
    gateway: ReleaseGateway,
    package: Package,
    requested: str | None,
) -> tuple[VersionIdentifier, Release | None]:
    """Resolve to a concrete version, fetching the release when needed.

    Named channels only become a version once the release is known, so
    for them the release comes back too, as it does when no version was
    requested and the latest release had to be fetched anyway.
    """
    version, release = resolve_with_release(gateway, package.owner, package.repo, requested)
    if release is not None or not version.is_channel:
        return version, release

    release = fetch_release(gateway, package.owner, package.repo, version)
    return parse_version(release.tag), release


def install_release(
    store: PackageStore,
    package: Package,
    *,
    gateway: ReleaseGateway,
    platform: PlatformDescriptor,
    paths: RelpullPaths,
    persist: Persist,
    requested: str | None = None,
    on_ambiguous: Chooser = fail_on_ambiguous,
    token: str | None = None,
) -> InstallResult:
    """Install (or update) ``package`` and record it in ``store``.

    Args:
        store: Loaded store; updated in memory and persisted on success.
        package: What to install.
        gateway: Release host.
        platform: Target platform.
        paths: Install / cache directories.
        persist: Writes the store to disk.
        requested: Version string; None means latest.
        on_ambiguous: Chooser for when several assets match.
        token: Optional bearer token for the asset download.

    Raises:
        NoUpdateNeeded: Already installed at the resolved version.
        RelpullError: Any other pipeline failure.
    """
    version, release = _resolve(gateway, package, requested)
    check_up_to_date(store, package.alias, version)

    try:
        return _install(store, package, version, release, gateway, platform, paths, persist,
                        on_ambiguous, token)
    except InstallStepError as e:
        e.attach(package.name, version.as_tag())
        raise


def _install(
    store: PackageStore,
    package: Package,
    version: VersionIdentifier,
    release: Release | None,
    gateway: ReleaseGateway,
    platform: PlatformDescriptor,
    paths: RelpullPaths,
    persist: Persist,
    on_ambiguous: Chooser,
    token: str | None,
) -> InstallResult:
    if release is None:
        release = fetch_release(gateway, package.owner, package.repo, version)

    asset = choose_asset(release.assets, platform, package.asset_pattern, on_ambiguous)
    if asset is None:
        raise AssetNotFoundError(
            package.name, version.as_tag(), platform.os.display_name, platform.arch.display_name
        )
    logger.info("Selected asset %s from %s", asset.name, release.tag)

    previous = store.installed.get(package.alias)

    paths.cache_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix="relpull-", dir=paths.cache_dir) as tmp:
        work_dir = Path(tmp)
        asset_path = download(asset.download_url, work_dir / "download", token=token)
        logger.info("Completed downloading %s", asset.download_url)

        unpacked = classify_and_extract(asset_path, work_dir)
        if isinstance(unpacked, Standalone):
            source = unpacked.path
            standalone = True
        else:
            binary_name = package.binary_name
            located = find_binary(unpacked.root, binary_name)
            if located is None:
                raise UnableToFindBinaryError(binary_name)
            source = located
            standalone = False

        record = commit(
            store,
            package,
            version,
            source,
            paths.bin_dir,
            standalone=standalone,
            persist=persist,
        )

    return InstallResult(
        package=package,
        version=record.version,
        asset=asset,
        record=record,
        previous_version=previous.version if previous else None,
    )
