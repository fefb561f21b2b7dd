"""
Platform model — the OS / CPU pair we are installing for.

Built once from the running interpreter.  Each value carries the
regular expression used to recognise it inside release asset names.
"""

from __future__ import annotations

import logging
import platform as _platform
import re
from dataclasses import dataclass
from enum import Enum

from relpull.core.errors import UnsupportedPlatformError

logger = logging.getLogger(__name__)


class OperatingSystem(str, Enum):
    LINUX = "linux"
    DARWIN = "darwin"

    @property
    def pattern(self) -> str:
        """Alternation matched against asset names."""
        return _OS_PATTERNS[self]

    @property
    def display_name(self) -> str:
        return "Linux" if self is OperatingSystem.LINUX else "macOS"


class Architecture(str, Enum):
    AMD64 = "amd64"
    ARM64 = "arm64"

    @property
    def pattern(self) -> str:
        return _ARCH_PATTERNS[self]

    @property
    def display_name(self) -> str:
        return "x86_64" if self is Architecture.AMD64 else "arm64"


_OS_PATTERNS = {
    OperatingSystem.LINUX: "linux|unknown-linux-gnu",
    OperatingSystem.DARWIN: "mac|macos|darwin",
}

_ARCH_PATTERNS = {
    Architecture.AMD64: "amd64|x86_64",
    Architecture.ARM64: "arm64|aarch64",
}

# platform.system() / platform.machine() → our enums
_SYSTEM_MAP = {
    "linux": OperatingSystem.LINUX,
    "darwin": OperatingSystem.DARWIN,
}

_MACHINE_MAP = {
    "x86_64": Architecture.AMD64,
    "amd64": Architecture.AMD64,
    "aarch64": Architecture.ARM64,
    "arm64": Architecture.ARM64,
}


@dataclass(frozen=True)
class PlatformDescriptor:
    """Immutable OS + architecture descriptor with name predicates."""

    os: OperatingSystem
    arch: Architecture

    @classmethod
    def detect(cls, system: str | None = None, machine: str | None = None) -> PlatformDescriptor:
        """Describe the running machine.

        Args:
            system: Override for ``platform.system()`` (tests).
            machine: Override for ``platform.machine()`` (tests).

        Raises:
            UnsupportedPlatformError: If either value is unrecognised.
        """
        system = system if system is not None else _platform.system()
        machine = machine if machine is not None else _platform.machine()

        os_value = _SYSTEM_MAP.get(system.lower())
        arch_value = _MACHINE_MAP.get(machine.lower())
        if os_value is None or arch_value is None:
            raise UnsupportedPlatformError(system, machine)

        descriptor = cls(os=os_value, arch=arch_value)
        logger.debug("Detected platform %s", descriptor)
        return descriptor

    @property
    def os_pattern(self) -> str:
        """Case-insensitive group usable inside a larger regex."""
        return f"(?i:{self.os.pattern})"

    @property
    def arch_pattern(self) -> str:
        return f"(?i:{self.arch.pattern})"

    def is_os_match(self, name: str) -> bool:
        matched = re.search(self.os_pattern, name) is not None
        logger.debug("OS regex [%s] against %s → %s", self.os.pattern, name, matched)
        return matched

    def is_arch_match(self, name: str) -> bool:
        matched = re.search(self.arch_pattern, name) is not None
        logger.debug("Arch regex [%s] against %s → %s", self.arch.pattern, name, matched)
        return matched

    def is_match(self, name: str) -> bool:
        return self.is_os_match(name) and self.is_arch_match(name)

    def __str__(self) -> str:
        return f"{self.os.display_name}/{self.arch.display_name}"
