"""
GitHub gateway — release metadata from the GitHub REST API.

Uses ``urllib.request`` with JSON responses.  An API token, when
given, is sent as a bearer token; without one requests are anonymous
and subject to GitHub's unauthenticated rate limit.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from relpull import __version__
from relpull.adapters.base import ReleaseGateway
from relpull.core.errors import GatewayError, ReleaseNotFoundError
from relpull.core.models.release import Release, ReleaseSummary

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitHubGateway(ReleaseGateway):
    """ReleaseGateway backed by api.github.com."""

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 15,
    ):
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        if token:
            logger.info("Initializing the GitHub client with token from environment")

    @property
    def name(self) -> str:
        return "github"

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"relpull/{__version__}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get_json(self, path: str, *, repo: str, tag: str | None = None) -> Any:
        url = f"{self._api_url}{path}"
        logger.debug("GET %s", url)
        req = urllib.request.Request(url, headers=self._headers())
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                return json.loads(resp.read())
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise ReleaseNotFoundError(repo, tag) from e
            raise GatewayError(f"Error with the GitHub API ({url}): HTTP {e.code} {e.reason}") from e
        except urllib.error.URLError as e:
            raise GatewayError(f"Error with the GitHub API ({url}): {e.reason}") from e
        except (OSError, http.client.HTTPException, json.JSONDecodeError) as e:
            raise GatewayError(f"Error with the GitHub API ({url}): {type(e).__name__}: {e}") from e

    def latest(self, owner: str, repo: str) -> Release:
        logger.info("Getting latest release for %s/%s", owner, repo)
        data = self._get_json(f"/repos/{owner}/{repo}/releases/latest", repo=f"{owner}/{repo}")
        return Release.from_api(data)

    def _get_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        logger.info("Getting release: %s for %s/%s", tag, owner, repo)
        quoted = urllib.parse.quote(tag, safe="")
        data = self._get_json(
            f"/repos/{owner}/{repo}/releases/tags/{quoted}",
            repo=f"{owner}/{repo}",
            tag=tag,
        )
        return Release.from_api(data)

    def list_releases(self, owner: str, repo: str, page_size: int = 100) -> list[ReleaseSummary]:
        data = self._get_json(
            f"/repos/{owner}/{repo}/releases?per_page={page_size}",
            repo=f"{owner}/{repo}",
        )
        if not isinstance(data, list):
            raise GatewayError(f"Unexpected release listing for {owner}/{repo}")
        return [
            ReleaseSummary(tag=item.get("tag_name", ""), prerelease=bool(item.get("prerelease")))
            for item in data
            if not item.get("draft")
        ]
