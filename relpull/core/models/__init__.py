"""
Domain models — Pydantic types and value objects for relpull.

All models are re-exported here for convenient access:

    from relpull.core.models import Package, InstalledRecord, PackageStore, Release
"""

from relpull.core.models.package import InstalledRecord, Package
from relpull.core.models.platform import Architecture, OperatingSystem, PlatformDescriptor
from relpull.core.models.release import Asset, Release, ReleaseSummary
from relpull.core.models.store import PackageStore
from relpull.core.models.version import (
    Latest,
    Lts,
    Opaque,
    PreRelease,
    SemVer,
    Stable,
    VersionIdentifier,
    parse_version,
)

__all__ = [
    "Architecture",
    "Asset",
    "InstalledRecord",
    "Latest",
    "Lts",
    "Opaque",
    "OperatingSystem",
    "Package",
    "PackageStore",
    "PlatformDescriptor",
    "PreRelease",
    "Release",
    "ReleaseSummary",
    "SemVer",
    "Stable",
    "VersionIdentifier",
    "parse_version",
]
