"""
L4 Execution — Classify and unpack a downloaded asset.

Classification is by content (magic bytes), never by file name: a
renamed binary without an extension must still be recognised.

    archive     tar (plain/gz/bz2/xz), zip, or a compressed single file
    executable  ELF, Mach-O
    script      anything starting with a ``#!`` line

Anything else is rejected with the detected media type, or "unknown".
Extraction goes into a fresh staging directory that is removed again
if anything fails, so callers never see a half-extracted tree.
"""

from __future__ import annotations

import bz2
import gzip
import logging
import lzma
import shutil
import tarfile
import tempfile
import zipfile
import zlib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from relpull.core.errors import ExtractionError, InvalidFileTypeError

logger = logging.getLogger(__name__)

UNKNOWN_MEDIA_TYPE = "unknown"

_SNIFF_BYTES = 512


class FileKind(str, Enum):
    ARCHIVE = "archive"
    EXECUTABLE = "executable"
    SCRIPT = "script"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Sniffed:
    kind: FileKind
    media_type: str


# (offset, magic, media type, kind); first match wins
_SIGNATURES: tuple[tuple[int, bytes, str, FileKind], ...] = (
    # Archives
    (0, b"\x1f\x8b", "application/gzip", FileKind.ARCHIVE),
    (0, b"BZh", "application/x-bzip2", FileKind.ARCHIVE),
    (0, b"\xfd7zXZ\x00", "application/x-xz", FileKind.ARCHIVE),
    (0, b"PK\x03\x04", "application/zip", FileKind.ARCHIVE),
    (0, b"PK\x05\x06", "application/zip", FileKind.ARCHIVE),
    (257, b"ustar", "application/x-tar", FileKind.ARCHIVE),
    # Native executables
    (0, b"\x7fELF", "application/x-executable", FileKind.EXECUTABLE),
    (0, b"\xfe\xed\xfa\xce", "application/x-mach-binary", FileKind.EXECUTABLE),
    (0, b"\xfe\xed\xfa\xcf", "application/x-mach-binary", FileKind.EXECUTABLE),
    (0, b"\xce\xfa\xed\xfe", "application/x-mach-binary", FileKind.EXECUTABLE),
    (0, b"\xcf\xfa\xed\xfe", "application/x-mach-binary", FileKind.EXECUTABLE),
    (0, b"\xca\xfe\xba\xbe", "application/x-mach-binary", FileKind.EXECUTABLE),
    # Scripts
    (0, b"#!", "text/x-shellscript", FileKind.SCRIPT),
    # Recognised, but nothing we can install
    (0, b"MZ", "application/vnd.microsoft.portable-executable", FileKind.UNSUPPORTED),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed", FileKind.UNSUPPORTED),
    (0, b"\x28\xb5\x2f\xfd", "application/zstd", FileKind.UNSUPPORTED),
    (0, b"Rar!\x1a\x07", "application/vnd.rar", FileKind.UNSUPPORTED),
    (0, b"!<arch>\ndebian", "application/vnd.debian.binary-package", FileKind.UNSUPPORTED),
    (0, b"\xed\xab\xee\xdb", "application/x-rpm", FileKind.UNSUPPORTED),
    (0, b"%PDF", "application/pdf", FileKind.UNSUPPORTED),
    (0, b"\x89PNG\r\n\x1a\n", "image/png", FileKind.UNSUPPORTED),
    (0, b"\xff\xd8\xff", "image/jpeg", FileKind.UNSUPPORTED),
    (0, b"GIF8", "image/gif", FileKind.UNSUPPORTED),
    (0, b"\x00asm", "application/wasm", FileKind.UNSUPPORTED),
)

_DECOMPRESSORS = {
    "application/gzip": (gzip.open, (".gz", ".gzip")),
    "application/x-bzip2": (bz2.open, (".bz2",)),
    "application/x-xz": (lzma.open, (".xz",)),
}

_EXTRACT_ERRORS = (
    tarfile.TarError,
    zipfile.BadZipFile,
    lzma.LZMAError,
    zlib.error,
    EOFError,
    OSError,
    NotImplementedError,
    RuntimeError,
)


@dataclass(frozen=True)
class Standalone:
    """The artifact itself is the binary."""

    path: Path


@dataclass(frozen=True)
class Extracted:
    """An archive was unpacked below ``root``."""

    root: Path


def sniff_bytes(header: bytes) -> Sniffed | None:
    """Classify a file header.  None if nothing matched."""
    for offset, magic, media_type, kind in _SIGNATURES:
        if header[offset:offset + len(magic)] == magic:
            return Sniffed(kind=kind, media_type=media_type)
    return None


def sniff_file(path: Path) -> Sniffed | None:
    with open(path, "rb") as f:
        return sniff_bytes(f.read(_SNIFF_BYTES))


def classify(path: Path) -> Sniffed:
    """Classify ``path`` or raise InvalidFileTypeError."""
    sniffed = sniff_file(path)
    if sniffed is None:
        raise InvalidFileTypeError(path, UNKNOWN_MEDIA_TYPE)
    if sniffed.kind is FileKind.UNSUPPORTED:
        raise InvalidFileTypeError(path, sniffed.media_type)
    logger.debug("Classified %s as %s (%s)", path.name, sniffed.kind.value, sniffed.media_type)
    return sniffed


def _decompressed_name(path: Path, suffixes: tuple[str, ...]) -> str:
    lower = path.name.lower()
    for suffix in suffixes:
        if lower.endswith(suffix) and len(path.name) > len(suffix):
            return path.name[: -len(suffix)]
    return path.name


def _decompress_single(path: Path, staging: Path, media_type: str) -> Path:
    opener, suffixes = _DECOMPRESSORS[media_type]
    target = staging / _decompressed_name(path, suffixes)
    with opener(path, "rb") as src, open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    return target


def _unpack_into(path: Path, staging: Path, sniffed: Sniffed) -> Standalone | Extracted:
    if sniffed.media_type == "application/zip":
        with zipfile.ZipFile(path) as zf:
            zf.extractall(staging)
        return Extracted(staging)

    try:
        with tarfile.open(path, "r:*") as tar:
            tar.extractall(staging, filter="data")
        return Extracted(staging)
    except tarfile.ReadError:
        if sniffed.media_type not in _DECOMPRESSORS:
            raise

    # A compressed single file, not a tarball
    payload = _decompress_single(path, staging, sniffed.media_type)
    inner = classify(payload)
    if inner.kind is FileKind.ARCHIVE:
        raise InvalidFileTypeError(payload, inner.media_type)
    logger.info("Decompressed single file '%s'", payload.name)
    return Standalone(payload)


def classify_and_extract(path: Path, work_dir: Path) -> Standalone | Extracted:
    """Turn a downloaded asset into something we can look for a binary in.

    Args:
        path: Downloaded file.
        work_dir: Scratch directory; a staging directory is created inside.

    Returns:
        ``Standalone`` when the file (or its decompressed payload) is
        the binary, ``Extracted`` with the unpacked tree otherwise.

    Raises:
        InvalidFileTypeError: Content is neither archive nor executable.
        ExtractionError: The archive could not be unpacked.
    """
    sniffed = classify(path)
    if sniffed.kind is not FileKind.ARCHIVE:
        return Standalone(path)

    staging = Path(tempfile.mkdtemp(prefix="extract-", dir=work_dir))
    try:
        result = _unpack_into(path, staging, sniffed)
    except InvalidFileTypeError:
        shutil.rmtree(staging, ignore_errors=True)
        raise
    except _EXTRACT_ERRORS as e:
        shutil.rmtree(staging, ignore_errors=True)
        raise ExtractionError(path, str(e)) from e

    logger.info("Successfully extracted '%s'.", path.name)
    return result
