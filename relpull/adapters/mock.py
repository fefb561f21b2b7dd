"""
Mock gateway — in-memory release host for tests.

Releases are registered per ``owner/repo``, newest first.  Every
lookup is recorded in ``call_log`` so tests can assert on the exact
sequence of requests (e.g. the ``v`` prefix fallback).
"""

from __future__ import annotations

from relpull.adapters.base import ReleaseGateway
from relpull.core.errors import ReleaseNotFoundError
from relpull.core.models.release import Asset, Release, ReleaseSummary


class MockGateway(ReleaseGateway):
    """Universal mock gateway for testing."""

    def __init__(self, gateway_name: str = "mock"):
        self._name = gateway_name
        self._releases: dict[str, list[Release]] = {}
        self._call_log: list[tuple[str, str, str | None]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, str, str | None]]:
        """``(operation, repo_id, tag)`` for every lookup received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def add_release(
        self,
        repo_id: str,
        tag: str,
        assets: list[str] | dict[str, str] | None = None,
        *,
        prerelease: bool = False,
    ) -> Release:
        """Register a release.  Later calls are treated as newer.

        ``assets`` is either a list of names (URLs are synthesised) or a
        name → download URL mapping.
        """
        if isinstance(assets, dict):
            asset_models = [Asset(name=n, download_url=u) for n, u in assets.items()]
        else:
            asset_models = [
                Asset(name=n, download_url=f"https://example.invalid/{repo_id}/{tag}/{n}")
                for n in (assets or [])
            ]
        release = Release(tag=tag, assets=asset_models, is_prerelease=prerelease)
        self._releases.setdefault(repo_id, []).insert(0, release)
        return release

    def latest(self, owner: str, repo: str) -> Release:
        repo_id = f"{owner}/{repo}"
        self._call_log.append(("latest", repo_id, None))
        for release in self._releases.get(repo_id, []):
            if not release.is_prerelease:
                return release
        raise ReleaseNotFoundError(repo_id)

    def _get_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        repo_id = f"{owner}/{repo}"
        self._call_log.append(("by_tag", repo_id, tag))
        for release in self._releases.get(repo_id, []):
            if release.tag == tag:
                return release
        raise ReleaseNotFoundError(repo_id, tag)

    def list_releases(self, owner: str, repo: str, page_size: int = 100) -> list[ReleaseSummary]:
        repo_id = f"{owner}/{repo}"
        self._call_log.append(("list", repo_id, None))
        return [
            ReleaseSummary(tag=r.tag, prerelease=r.is_prerelease)
            for r in self._releases.get(repo_id, [])[:page_size]
        ]
