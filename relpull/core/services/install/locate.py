"""
L4 Execution — Find the binary inside an unpacked archive.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def find_binary(root: Path, target_name: str) -> Path | None:
    """First regular file under ``root`` named exactly ``target_name``.

    Traversal order is whatever ``os.walk`` yields; archives are
    expected to hold a single match.
    """
    for dirpath, _dirnames, filenames in os.walk(root):
        if target_name in filenames:
            candidate = Path(dirpath) / target_name
            if candidate.is_file():
                logger.debug("Found binary %s", candidate)
                return candidate
    return None
