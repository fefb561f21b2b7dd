"""
Error types — everything the install pipeline can raise.

Every error carries enough context to render a useful one-line message
naming the package, the attempted version and the cause.  Use cases
catch ``RelpullError`` at their boundary and turn it into a result
object; nothing below that boundary swallows these.
"""

from __future__ import annotations

from pathlib import Path


class RelpullError(Exception):
    """Base class for all relpull errors."""


class InstallStepError(RelpullError):
    """A failure once the release is known.

    The stage that raises it only knows its own file, URL or asset list;
    the pipeline calls ``attach`` to prefix the package and version.
    """

    package: str | None = None
    version: str | None = None

    def attach(self, package: str, version: str) -> None:
        if self.package is not None:
            return
        self.package = package
        self.version = version
        self.args = (f"{package}@{version}: {self.args[0]}",)


# ── Configuration ───────────────────────────────────────────────


class ConfigError(RelpullError):
    """Raised when the package config or state file is unreadable."""


class InvalidAssetPatternError(ConfigError):
    """A user-supplied asset pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"'{pattern}' is not a valid regular expression: {reason}")


class UnsupportedPlatformError(RelpullError):
    """The running OS / CPU combination is not one we can install for."""

    def __init__(self, system: str, machine: str):
        self.system = system
        self.machine = machine
        super().__init__(f"Unsupported platform: OS={system!r} arch={machine!r}")


# ── Release lookup ──────────────────────────────────────────────


class GatewayError(RelpullError):
    """Transport or API failure while talking to the release host."""


class ReleaseNotFoundError(RelpullError):
    def __init__(self, repo: str, tag: str | None = None):
        self.repo = repo
        self.tag = tag
        where = f"{repo}@{tag}" if tag else repo
        super().__init__(f"Unable to find release for {where}")


class AssetNotFoundError(RelpullError):
    def __init__(self, package: str, version: str, os_name: str, arch: str):
        self.package = package
        self.version = version
        self.os_name = os_name
        self.arch = arch
        super().__init__(
            f"Unable to find asset for {package}@{version} for OS: {os_name}; Arch: {arch}"
        )


class AmbiguousAssetError(InstallStepError):
    """More than one asset matched and no one is around to choose."""

    def __init__(self, candidates: list[str]):
        self.candidates = candidates
        super().__init__(
            f"{len(candidates)} assets match, cannot choose non-interactively: "
            + ", ".join(candidates)
        )


# ── Download / unpack ───────────────────────────────────────────


class DownloadError(InstallStepError):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download '{url}': {reason}")


class InvalidFileTypeError(InstallStepError):
    def __init__(self, path: Path, media_type: str):
        self.path = path
        self.media_type = media_type
        super().__init__(
            f"Downloaded file isn't an archive or executable: '{path.name}': {media_type}"
        )


class ExtractionError(InstallStepError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to extract '{path.name}': {reason}")


class UnableToFindBinaryError(InstallStepError):
    def __init__(self, binary_name: str):
        self.binary_name = binary_name
        super().__init__(f"Unable to find binary '{binary_name}' in the release archive")


# ── Store operations ────────────────────────────────────────────


class NoUpdateNeeded(RelpullError):
    """Control signal: the installed version already matches."""

    def __init__(self, alias: str, version: str):
        self.alias = alias
        self.version = version
        super().__init__(f"{alias} is already up to date ({version})")


class PackageNotFoundError(RelpullError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Package '{name}' not found in config.")


class EmptyPackageListError(RelpullError):
    def __init__(self) -> None:
        super().__init__("The config list does not contain any packages!")


class FileDeleteError(RelpullError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to delete file '{path}': {reason}")


class AliasConflictError(RelpullError):
    def __init__(self, alias: str, existing_repo: str, requested_repo: str):
        self.alias = alias
        self.existing_repo = existing_repo
        self.requested_repo = requested_repo
        super().__init__(
            f"Alias '{alias}' is already used by {existing_repo}; "
            f"choose another --alias for {requested_repo}"
        )


class AlreadyInstalledError(RelpullError):
    """The repository is already installed under a different alias."""

    def __init__(self, repo: str, alias: str):
        self.repo = repo
        self.alias = alias
        super().__init__(f"{repo} is already installed as '{alias}'; use `relpull update {alias}`")
