"""
Release asset builders for tests.

Assets are real files written under the test's tmp dir and served
through ``file://`` URLs, so the whole pipeline runs without network
access.
"""

import gzip
import io
import tarfile
import zipfile
from pathlib import Path

# Enough of an ELF header for content sniffing
ELF_BYTES = b"\x7fELF\x02\x01\x01\x00" + b"\x00" * 56 + b"fake elf body"
SCRIPT_BYTES = b"#!/bin/sh\necho hello\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class ArtifactFactory:
    """Builds release assets on disk."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def raw(self, name: str, data: bytes) -> Path:
        path = self.root / name
        path.write_bytes(data)
        return path

    def elf(self, name: str) -> Path:
        return self.raw(name, ELF_BYTES)

    def tar_gz(self, name: str, members: dict[str, bytes]) -> Path:
        path = self.root / name
        with tarfile.open(path, "w:gz") as tar:
            for member, data in members.items():
                info = tarfile.TarInfo(member)
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
        return path

    def zip(self, name: str, members: dict[str, bytes]) -> Path:
        path = self.root / name
        with zipfile.ZipFile(path, "w") as zf:
            for member, data in members.items():
                zf.writestr(member, data)
        return path

    def gzip(self, name: str, payload: bytes) -> Path:
        path = self.root / name
        with gzip.open(path, "wb") as f:
            f.write(payload)
        return path

    @staticmethod
    def url(path: Path) -> str:
        return path.as_uri()
