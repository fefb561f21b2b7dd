"""
Version identifiers — what the user asked for, or what a release is tagged.

A small closed set of kinds:

    Latest, Stable, Lts, PreRelease   named channels, resolved via the gateway
    SemVer                            strict semantic version (semver.org 2.0.0)
    Opaque                            any other tag, kept verbatim

``parse_version`` never fails; anything it cannot classify becomes
``Opaque``.  ``as_tag`` is the canonical string form.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

# "v1.2.3" → "1.2.3", but "vim-9" stays as is
_V_PREFIX_RE = re.compile(r"^v(?=\d)")


@dataclass(frozen=True)
class VersionIdentifier:
    """Base for every version kind."""

    @property
    def is_channel(self) -> bool:
        """True for the named kinds that need a release lookup to pin down."""
        return False

    def as_tag(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.as_tag()


@dataclass(frozen=True)
class Latest(VersionIdentifier):
    @property
    def is_channel(self) -> bool:
        return True

    def as_tag(self) -> str:
        return "latest"


@dataclass(frozen=True)
class Stable(VersionIdentifier):
    @property
    def is_channel(self) -> bool:
        return True

    def as_tag(self) -> str:
        return "stable"


@dataclass(frozen=True)
class Lts(VersionIdentifier):
    @property
    def is_channel(self) -> bool:
        return True

    def as_tag(self) -> str:
        return "lts"


@dataclass(frozen=True)
class PreRelease(VersionIdentifier):
    @property
    def is_channel(self) -> bool:
        return True

    def as_tag(self) -> str:
        return "pre-release"


@dataclass(frozen=True)
class SemVer(VersionIdentifier):
    major: int
    minor: int
    patch: int
    pre: str = ""
    build: str = ""

    def as_tag(self) -> str:
        tag = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            tag += f"-{self.pre}"
        if self.build:
            tag += f"+{self.build}"
        return tag


@dataclass(frozen=True)
class Opaque(VersionIdentifier):
    text: str

    def as_tag(self) -> str:
        return self.text


_NAMED = {
    "latest": Latest(),
    "stable": Stable(),
    "lts": Lts(),
    "prerelease": PreRelease(),
    "pre-release": PreRelease(),
}


def parse_version(text: str) -> VersionIdentifier:
    """Parse a user- or API-supplied version string.

    Named channels are matched case-insensitively.  Otherwise a leading
    ``v`` in front of a digit is dropped and strict SemVer is tried,
    falling back to ``Opaque``.
    """
    text = text.strip()
    named = _NAMED.get(text.lower())
    if named is not None:
        return named

    stripped = _V_PREFIX_RE.sub("", text, count=1)
    logger.debug("Parsing version: %s", stripped)

    m = _SEMVER_RE.match(stripped)
    if m:
        return SemVer(
            major=int(m.group(1)),
            minor=int(m.group(2)),
            patch=int(m.group(3)),
            pre=m.group(4) or "",
            build=m.group(5) or "",
        )
    return Opaque(stripped)


def same_version(recorded: str, version: VersionIdentifier) -> bool:
    """Compare a stored tag string with a resolved version, post-normalisation."""
    return parse_version(recorded).as_tag() == version.as_tag()
