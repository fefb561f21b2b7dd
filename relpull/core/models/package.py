"""
Package models — the two persisted records.

``Package`` is the user's intent (what to install and how to match it),
stored in packages.yml.  ``InstalledRecord`` is what actually landed on
disk, stored in installed.json.  They are linked by the repository id
(``owner/repo``).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, field_validator


class Package(BaseModel):
    """A release source the user asked to track."""

    name: str  # owner/repo
    alias: str
    asset_pattern: str = ""
    file_pattern: str = ""

    @field_validator("name")
    @classmethod
    def _check_repo_id(cls, value: str) -> str:
        owner, sep, repo = value.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"expected 'owner/repo', got {value!r}")
        return value

    @property
    def owner(self) -> str:
        return self.name.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.name.split("/", 1)[1]

    @property
    def binary_name(self) -> str:
        """File name to look for inside an extracted archive."""
        return self.file_pattern or self.alias


class InstalledRecord(BaseModel):
    """What is installed under an alias."""

    name: str  # owner/repo
    version: str
    path: Path
