"""
State file persistence — atomic read/write for installed records.

Installed records are stored as JSON in installed.json, one entry per
alias.  The file is rewritten in full on every save; writes are atomic
(write to temp file, then rename) so a crash mid-write never leaves a
truncated file behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from relpull.core.errors import ConfigError
from relpull.core.models.package import InstalledRecord

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(dict[str, InstalledRecord])


def write_atomic(path: Path, content: str, *, prefix: str = ".relpull_") -> None:
    """Write ``content`` to ``path`` via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)

    _fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=prefix, suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(_fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def load_installed(path: Path) -> dict[str, InstalledRecord]:
    """Load installed records keyed by alias.

    Args:
        path: Path to installed.json.

    Returns:
        Mapping of alias to record. Empty if the file doesn't exist.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    if not path.is_file():
        logger.info("No state file at %s, nothing installed yet", path)
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Unable to read file '{path}': {e}") from e

    try:
        data = json.loads(raw) if raw.strip() else {}
        records = _RECORDS.validate_python(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Failed to deserialize file: {path}, using JSON. {e}") from e

    logger.debug("Loaded %d installed record(s) from %s", len(records), path)
    return records


def save_installed(records: dict[str, InstalledRecord], path: Path) -> None:
    """Save installed records (atomic write, full rewrite).

    Args:
        records: Mapping of alias to record.
        path: Target path for installed.json.
    """
    data = _RECORDS.dump_python(dict(sorted(records.items())), mode="json")
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    try:
        write_atomic(path, content, prefix=".installed_")
        logger.debug("State saved to %s", path)
    except OSError as e:
        logger.error("Failed to save state to %s: %s", path, e)
        raise ConfigError(f"Failed to write state file '{path}': {e}") from e
