# File access helpers: existence-checked reads, atomic writes, JSON side files
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, cast

logger = logging.getLogger(__name__)


def read_text_if_exists(path: Path) -> str | None:
    """Read a UTF-8 text file, or return None if it isn't there.

    ABOUTME: Missing file and missing parent directory both count as absent
    ABOUTME: Other OS errors (permissions, etc.) propagate
    """
    try:
        return path.read_text(encoding="utf-8-sig")
    except (FileNotFoundError, NotADirectoryError):
        return None


def atomic_write_text(path: Path, content: str) -> None:
    """Write text so readers never observe a partial file.

    ABOUTME: Writes a temp file in the same directory, then os.replace()s it
    ABOUTME: Creates parent directories if needed
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug(f"Wrote {path}")


def read_json_file(path: Path) -> dict[str, Any]:
    """Read JSON file with error handling.

    ABOUTME: Returns empty dict if file doesn't exist
    ABOUTME: Raises ValueError for invalid JSON or a non-object top level
    """
    raw = read_text_if_exists(path)
    if raw is None:
        return {}

    try:
        result = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(result).__name__}")
    return cast(dict[str, Any], result)


def write_json_file(path: Path, data: dict[str, Any]) -> None:
    """Write JSON file atomically.

    ABOUTME: Uses 2-space indentation and a trailing newline
    """
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
