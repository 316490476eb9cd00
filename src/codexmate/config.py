# File locations for codexmate
import os
from dataclasses import dataclass
from pathlib import Path

# ABOUTME: Environment variable the Codex CLI itself honours for its home directory
CODEX_HOME_ENV = "CODEX_HOME"

# ABOUTME: Default Codex directory in user's home
DEFAULT_CODEX_DIR = Path.home() / ".codex"

CONFIG_FILE_NAME = "config.toml"
AUTH_FILE_NAME = "auth.json"
MATE_DIR_NAME = "codex-mate"
CREDENTIALS_FILE_NAME = "credentials.json"
BACKUP_DIR_NAME = "backups"


@dataclass(frozen=True)
class CodexPaths:
    """Every file codexmate reads or writes, rooted at one Codex directory.

    ABOUTME: Frozen so a store can't be repointed mid-operation
    ABOUTME: Tests build one on tmp_path instead of touching ~/.codex
    """
    codex_dir: Path

    @property
    def config_toml(self) -> Path:
        return self.codex_dir / CONFIG_FILE_NAME

    @property
    def auth_json(self) -> Path:
        return self.codex_dir / AUTH_FILE_NAME

    @property
    def mate_dir(self) -> Path:
        return self.codex_dir / MATE_DIR_NAME

    @property
    def credentials_json(self) -> Path:
        return self.mate_dir / CREDENTIALS_FILE_NAME

    @property
    def backup_dir(self) -> Path:
        return self.mate_dir / BACKUP_DIR_NAME


def get_codex_dir() -> Path:
    """Return the Codex home directory.

    ABOUTME: $CODEX_HOME if set and non-empty, else ~/.codex
    ABOUTME: Directory may not exist yet - use ensure_dirs() first

    Returns:
        Path to the Codex directory
    """
    override = os.environ.get(CODEX_HOME_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CODEX_DIR


def get_paths(codex_dir: Path | None = None) -> CodexPaths:
    """Build CodexPaths for an explicit directory or the default one."""
    return CodexPaths(codex_dir=codex_dir if codex_dir else get_codex_dir())


def ensure_dirs(paths: CodexPaths) -> Path:
    """Create the Codex and codex-mate directories if they don't exist.

    Returns:
        Path to the codex-mate directory (guaranteed to exist)
    """
    paths.mate_dir.mkdir(parents=True, exist_ok=True)
    return paths.mate_dir
