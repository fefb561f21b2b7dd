"""
Add use case — install a new package from its GitHub releases.

Ties together argument parsing, version choice, the install pipeline and
store persistence.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from relpull.adapters.base import ReleaseGateway
from relpull.core.context import RelpullPaths
from relpull.core.errors import (
    AliasConflictError,
    AlreadyInstalledError,
    NoUpdateNeeded,
    ReleaseNotFoundError,
    RelpullError,
)
from relpull.core.models.package import Package
from relpull.core.models.platform import PlatformDescriptor
from relpull.core.models.store import PackageStore
from relpull.core.persistence.store import locked_store, save_store
from relpull.core.services.install.pipeline import InstallResult, install_release
from relpull.core.services.install.resolution import release_tags
from relpull.core.services.install.selection import Chooser, fail_on_ambiguous

logger = logging.getLogger(__name__)

VersionChooser = Callable[[list[str]], str]


@dataclass
class AddResult:
    """Result of the add use case."""

    name: str = ""
    alias: str = ""
    requested_version: str | None = None
    install: InstallResult | None = None
    already_installed: bool = False
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {"name": self.name, "alias": self.alias}
        if self.error:
            result["error"] = self.error
            result["error_kind"] = self.error_kind
            return result
        result["already_installed"] = self.already_installed
        if self.install:
            result.update(self.install.to_dict())
        return result


def parse_package_spec(spec: str) -> tuple[str, str | None]:
    """Split ``owner/repo[@version]``.

    Raises:
        ValueError: If the repository part is not ``owner/repo``.
    """
    repo_id, sep, version = spec.partition("@")
    owner, slash, repo = repo_id.partition("/")
    if not slash or not owner or not repo or "/" in repo:
        raise ValueError(f"Expected OWNER/REPO[@VERSION], got '{spec}'")
    if sep and not version:
        raise ValueError(f"Missing version after '@' in '{spec}'")
    return repo_id, (version or None)


def _check_alias(store: PackageStore, package: Package) -> None:
    """Aliases are unique across installed packages."""
    record = store.installed.get(package.alias)
    if record is not None and record.name != package.name:
        raise AliasConflictError(package.alias, record.name, package.name)

    existing = store.packages.get(package.name)
    if existing is not None and existing.alias != package.alias and existing.alias in store.installed:
        raise AlreadyInstalledError(package.name, existing.alias)


def _requested_version(
    gateway: ReleaseGateway,
    package: Package,
    version: str | None,
    *,
    pre_release: bool,
    show: bool,
    choose_version: VersionChooser | None,
) -> str | None:
    if version:
        return version

    if show and choose_version is not None:
        tags = release_tags(
            gateway, package.owner, package.repo, include_prereleases=pre_release
        )
        if not tags:
            raise ReleaseNotFoundError(package.name)
        return choose_version(tags)

    if pre_release:
        return "pre-release"
    return None


def run_add(
    spec: str,
    *,
    paths: RelpullPaths,
    gateway: ReleaseGateway,
    platform: PlatformDescriptor,
    alias: str | None = None,
    asset_pattern: str | None = None,
    file_pattern: str | None = None,
    pre_release: bool = False,
    show: bool = False,
    choose_version: VersionChooser | None = None,
    on_ambiguous: Chooser = fail_on_ambiguous,
    token: str | None = None,
) -> AddResult:
    """Install ``spec`` (``owner/repo[@version]``).

    Args:
        spec: Repository and optional version.
        paths: relpull directories.
        gateway: Release host.
        platform: Target platform.
        alias: Command name; defaults to the repository name.
        asset_pattern: Regex for asset names, with ``{os}``/``{arch}``.
        file_pattern: Binary file name inside archives; defaults to alias.
        pre_release: Consider pre-releases when no version is given.
        show: Present the release list and let ``choose_version`` pick.
        choose_version: Picks one tag out of a list.
        on_ambiguous: Picks one asset when several match.
        token: Optional bearer token for downloads.

    Returns:
        AddResult with the install outcome or the error.
    """
    result = AddResult()

    try:
        repo_id, version = parse_package_spec(spec)
    except ValueError as e:
        result.error = str(e)
        result.error_kind = "InvalidSpec"
        return result

    package = Package(
        name=repo_id,
        alias=alias or repo_id.split("/", 1)[1],
        asset_pattern=asset_pattern or "",
        file_pattern=file_pattern or "",
    )
    result.name = package.name
    result.alias = package.alias

    logger.info(
        "Repository `%s`, Alias `%s`, Pattern `%s`, Filter `%s`",
        package.name, package.alias, package.asset_pattern, package.binary_name,
    )

    try:
        with locked_store(paths) as store:
            _check_alias(store, package)
            requested = _requested_version(
                gateway, package, version,
                pre_release=pre_release, show=show, choose_version=choose_version,
            )
            result.requested_version = requested
            result.install = install_release(
                store,
                package,
                gateway=gateway,
                platform=platform,
                paths=paths,
                persist=lambda s: save_store(s, paths),
                requested=requested,
                on_ambiguous=on_ambiguous,
                token=token,
            )
    except NoUpdateNeeded:
        result.already_installed = True
    except (RelpullError, OSError) as e:
        logger.debug("add %s failed", spec, exc_info=True)
        result.error = str(e)
        result.error_kind = type(e).__name__
    except Exception as e:
        logger.error("Unexpected error adding %s", spec, exc_info=True)
        result.error = f"{package.name}: unexpected error: {type(e).__name__}: {e}"
        result.error_kind = type(e).__name__

    return result
