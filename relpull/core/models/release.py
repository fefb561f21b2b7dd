"""
Release model — what the hosting platform publishes.

Transient: built from API responses for one install attempt and
never persisted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Asset(BaseModel):
    """One downloadable file attached to a release."""

    name: str
    download_url: str
    size: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Asset:
        return cls(
            name=data.get("name", ""),
            download_url=data.get("browser_download_url", ""),
            size=data.get("size", 0) or 0,
        )


class Release(BaseModel):
    """A tagged release with its assets."""

    tag: str
    assets: list[Asset] = Field(default_factory=list)
    is_prerelease: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Release:
        return cls(
            tag=data.get("tag_name", ""),
            assets=[Asset.from_api(a) for a in data.get("assets", [])],
            is_prerelease=bool(data.get("prerelease", False)),
        )

    @property
    def asset_names(self) -> list[str]:
        return [a.name for a in self.assets]


class ReleaseSummary(BaseModel):
    """Entry of a release listing: tag plus pre-release flag."""

    tag: str
    prerelease: bool = False
