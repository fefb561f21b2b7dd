"""
Gateway base — the contract between the install pipeline and a release host.

The pipeline only talks to the hosting platform through this
interface, never directly over HTTP.  Implementations:

    GitHubGateway   the real thing (relpull.adapters.github)
    MockGateway     in-memory releases for tests and offline runs

To add a host:
    1. Subclass ReleaseGateway
    2. Implement name, latest, _get_by_tag, list_releases
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from relpull.core.errors import ReleaseNotFoundError
from relpull.core.models.release import Release, ReleaseSummary

logger = logging.getLogger(__name__)


class ReleaseGateway(ABC):
    """Read-only access to a project's releases."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The gateway identifier (e.g., 'github', 'mock')."""

    @abstractmethod
    def latest(self, owner: str, repo: str) -> Release:
        """The newest non-prerelease release.

        Raises:
            ReleaseNotFoundError: If the project has no releases.
        """

    @abstractmethod
    def _get_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        """Exact tag lookup, no fallback.  Raises ReleaseNotFoundError."""

    @abstractmethod
    def list_releases(self, owner: str, repo: str, page_size: int = 100) -> list[ReleaseSummary]:
        """Most recent releases first, including pre-releases."""

    def by_tag(self, owner: str, repo: str, tag: str) -> Release:
        """Release for ``tag``, retrying once with a ``v`` prefix.

        Projects are inconsistent about tagging ``1.2.3`` versus
        ``v1.2.3``; this is a single extra attempt, not a loop.
        """
        try:
            return self._get_by_tag(owner, repo, tag)
        except ReleaseNotFoundError:
            logger.debug("Tag %s not found for %s/%s, retrying as v%s", tag, owner, repo, tag)

        try:
            return self._get_by_tag(owner, repo, f"v{tag}")
        except ReleaseNotFoundError:
            raise ReleaseNotFoundError(f"{owner}/{repo}", tag) from None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
