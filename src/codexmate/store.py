# Read/write access to config.toml, credentials.json and auth.json
import logging
from pathlib import Path
from typing import Any

import tomli

from codexmate.config import CodexPaths, ensure_dirs, get_paths
from codexmate.models import OperationResult
from codexmate.utils.backup import create_backup
from codexmate.utils.fs import (
    atomic_write_text,
    read_json_file,
    read_text_if_exists,
    write_json_file,
)
from codexmate.utils.toml_reader import parse_toml
from codexmate.utils.toml_writer import serialize_toml

logger = logging.getLogger(__name__)


class ConfigStore:
    """File access for one Codex directory.

    ABOUTME: Holds no document state - every read goes back to disk
    ABOUTME: Every operation is one read-modify-write cycle on fresh data
    ABOUTME: No cross-process locking; concurrent external writers can race
    """

    def __init__(self, paths: CodexPaths | None = None, backups: bool = True) -> None:
        """Initialize store with optional custom paths.

        ABOUTME: Defaults to $CODEX_HOME or ~/.codex if not provided
        ABOUTME: backups=False skips the copy taken before each overwrite
        """
        self.paths = paths if paths else get_paths()
        self.backups = backups

    def read_config(self) -> dict[str, Any]:
        """Parse config.toml, or return {} if it doesn't exist."""
        raw = read_text_if_exists(self.paths.config_toml)
        if not raw:
            return {}
        return parse_toml(raw)

    def write_config(self, document: dict[str, Any]) -> None:
        """Serialize the whole document and replace config.toml."""
        self.write_config_raw(serialize_toml(document))

    def read_config_raw(self) -> str:
        return read_text_if_exists(self.paths.config_toml) or ""

    def write_config_raw(self, text: str) -> None:
        """Replace config.toml with text as-is (newline-terminated).

        ABOUTME: Backs up the previous file first when backups are enabled
        """
        ensure_dirs(self.paths)
        self._backup(self.paths.config_toml)
        atomic_write_text(self.paths.config_toml, text if text.endswith("\n") else text + "\n")

    def read_credentials(self) -> dict[str, Any]:
        """Provider name -> credential fields, {} if the file doesn't exist."""
        return read_json_file(self.paths.credentials_json)

    def write_credentials(self, credentials: dict[str, Any]) -> None:
        ensure_dirs(self.paths)
        write_json_file(self.paths.credentials_json, credentials)

    def read_auth(self) -> dict[str, Any]:
        return read_json_file(self.paths.auth_json)

    def write_auth(self, auth: dict[str, Any]) -> None:
        ensure_dirs(self.paths)
        self._backup(self.paths.auth_json)
        write_json_file(self.paths.auth_json, auth)

    def _backup(self, path: Path) -> None:
        if self.backups and path.exists():
            create_backup(path, self.paths.backup_dir)


def get_config_raw(store: ConfigStore) -> str:
    """Return config.toml exactly as stored ("" if missing)."""
    return store.read_config_raw()


def set_config_raw(store: ConfigStore, text: str) -> OperationResult:
    """Persist hand-edited config.toml text verbatim after validating it.

    ABOUTME: Validates with tomli (strict); the tolerant reader never rejects input
    ABOUTME: Invalid text is refused and nothing is written
    ABOUTME: Valid text is written byte-for-byte, unlike structured writes

    Args:
        store: Target store
        text: Full replacement contents of config.toml

    Returns:
        OperationResult with the parser's message on failure
    """
    try:
        tomli.loads(text)
    except tomli.TOMLDecodeError as e:
        return OperationResult(ok=False, error=f"Invalid TOML: {e}")

    store.write_config_raw(text)
    logger.debug(f"Saved raw config to {store.paths.config_toml}")
    return OperationResult(ok=True)
