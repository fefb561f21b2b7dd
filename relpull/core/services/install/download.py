"""
L4 Execution — Download.

Streams a release asset to disk chunk by chunk so large artifacts
never have to fit in memory.
"""

from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path

from relpull import __version__
from relpull.core.errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def filename_from_url(url: str) -> str:
    """Last non-empty path segment of ``url``, percent-decoded.

    Raises:
        DownloadError: If the URL has no usable path segment.
    """
    path = urllib.parse.urlparse(url).path
    segments = [s for s in path.split("/") if s]
    if not segments:
        raise DownloadError(url, "URL has no file name")
    name = urllib.parse.unquote(segments[-1])
    if name in (".", "..") or "/" in name:
        raise DownloadError(url, f"unusable file name {name!r}")
    return name


def download(
    url: str,
    dest_dir: Path,
    *,
    timeout: int = 60,
    chunk_size: int = CHUNK_SIZE,
    token: str | None = None,
) -> Path:
    """Download ``url`` into ``dest_dir``.

    Args:
        url: Asset download URL.
        dest_dir: Directory to write into; created if missing.
        timeout: Socket timeout in seconds.
        chunk_size: Bytes read per iteration.
        token: Optional bearer token for private assets.

    Returns:
        Path of the written file.

    Raises:
        DownloadError: On any transport, HTTP or I/O failure.
    """
    filename = filename_from_url(url)
    destination = dest_dir / filename

    logger.debug("Creating destination directory %s", dest_dir)
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DownloadError(url, f"cannot create {dest_dir}: {e}") from e

    headers = {
        "Accept": "application/octet-stream",
        "User-Agent": f"relpull/{__version__}",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    req = urllib.request.Request(url, headers=headers)

    logger.info("Downloading %s ...", filename)
    written = 0
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp, open(destination, "wb") as f:
            status = getattr(resp, "status", None)
            if status is not None and not 200 <= status < 300:
                raise DownloadError(url, f"HTTP {status}")
            while chunk := resp.read(chunk_size):
                f.write(chunk)
                written += len(chunk)
            expected = resp.headers.get("Content-Length", "")
            if expected.isdigit() and written != int(expected):
                raise DownloadError(url, f"incomplete read: received {written} of {expected} bytes")
    except DownloadError:
        destination.unlink(missing_ok=True)
        raise
    except urllib.error.HTTPError as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(url, f"HTTP {e.code} {e.reason}") from e
    except urllib.error.URLError as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(url, str(e.reason)) from e
    except (OSError, http.client.HTTPException) as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(url, f"{type(e).__name__}: {e}") from e

    logger.info("Downloaded %s (%s)", filename, _fmt_size(written))
    return destination
