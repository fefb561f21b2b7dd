"""
L2 Resolver — Turn a version request into a concrete release.

    resolve_version   request string (or None) → VersionIdentifier
    resolve_with_release  same, plus the release when one was fetched
    fetch_release     VersionIdentifier → Release
    release_tags      release listing for interactive version picking
"""

from __future__ import annotations

import logging

from relpull.adapters.base import ReleaseGateway
from relpull.core.errors import ReleaseNotFoundError
from relpull.core.models.release import Release
from relpull.core.models.version import (
    Latest,
    PreRelease,
    Stable,
    VersionIdentifier,
    parse_version,
)

logger = logging.getLogger(__name__)


def resolve_version(
    gateway: ReleaseGateway,
    owner: str,
    repo: str,
    requested: str | None,
) -> VersionIdentifier:
    """Parse ``requested``, or ask the gateway for the latest tag.

    A given string is parsed locally and never triggers a request.

    Raises:
        ReleaseNotFoundError: ``requested`` is None and the project has
            no releases.
    """
    return resolve_with_release(gateway, owner, repo, requested)[0]


def resolve_with_release(
    gateway: ReleaseGateway,
    owner: str,
    repo: str,
    requested: str | None,
) -> tuple[VersionIdentifier, Release | None]:
    """``resolve_version``, keeping the latest release it had to fetch."""
    if requested:
        return parse_version(requested), None

    release = gateway.latest(owner, repo)
    logger.info("Latest release of %s/%s is %s", owner, repo, release.tag)
    return parse_version(release.tag), release


def release_tags(
    gateway: ReleaseGateway,
    owner: str,
    repo: str,
    *,
    include_prereleases: bool = False,
    page_size: int = 100,
) -> list[str]:
    """Tags of recent releases, newest first."""
    return [
        r.tag
        for r in gateway.list_releases(owner, repo, page_size=page_size)
        if include_prereleases or not r.prerelease
    ]


def fetch_release(
    gateway: ReleaseGateway,
    owner: str,
    repo: str,
    version: VersionIdentifier,
) -> Release:
    """Look up the release for ``version``.

    ``Latest`` and ``Stable`` use the host's latest-release endpoint,
    ``PreRelease`` takes the newest entry of the listing including
    pre-releases, everything else is a tag lookup.
    """
    logger.info("Getting release: %s for %s/%s", version.as_tag(), owner, repo)

    if isinstance(version, (Latest, Stable)):
        return gateway.latest(owner, repo)

    if isinstance(version, PreRelease):
        tags = release_tags(gateway, owner, repo, include_prereleases=True)
        if not tags:
            raise ReleaseNotFoundError(f"{owner}/{repo}", version.as_tag())
        return gateway.by_tag(owner, repo, tags[0])

    return gateway.by_tag(owner, repo, version.as_tag())
