# ABOUTME: Backup utilities for Codex config files.
# ABOUTME: Timestamped copies taken before each overwrite, newest 5 kept per file.
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_BACKUPS_PER_FILE = 5

# ABOUTME: Matches {stem}_{YYYYMMDD}_{HHMMSS}{suffix}, e.g. config_20261019_143022.toml
BACKUP_PATTERN = re.compile(r"^(.+?)_(\d{8}_\d{6})(\..+)?$")


def create_backup(source_path: Path, backup_dir: Path) -> Path:
    """Create a timestamped backup of a file.

    ABOUTME: Backup format: {stem}_{YYYYMMDD}_{HHMMSS}{suffix}
    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: Creates backup_dir if it doesn't exist

    Args:
        source_path: Path to file to backup
        backup_dir: Directory where backup should be created

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist

    Examples:
        >>> create_backup(Path("~/.codex/config.toml").expanduser(), backup_dir).name
        'config_20261019_143022.toml'
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = backup_dir / f"{source_path.stem}_{timestamp}{source_path.suffix}"

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(backup_dir)

    return backup_path


def cleanup_old_backups(backup_dir: Path, max_backups_per_file: int = MAX_BACKUPS_PER_FILE) -> list[Path]:
    """Remove old backup files, keeping only the most recent per source file.

    ABOUTME: Groups backups by stem + suffix, so config.toml and auth.json rotate separately
    ABOUTME: Logs warnings on errors but does not raise exceptions

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    if not backup_dir.exists():
        return deleted_files

    backups_by_source: dict[tuple[str, str], list[tuple[str, Path]]] = {}

    for file_path in backup_dir.iterdir():
        if not file_path.is_file():
            continue

        match = BACKUP_PATTERN.match(file_path.name)
        if not match:
            continue

        source_key = (match.group(1), match.group(3) or "")
        backups_by_source.setdefault(source_key, []).append((match.group(2), file_path))

    for backups in backups_by_source.values():
        # Newest first
        backups.sort(key=lambda x: x[0], reverse=True)

        for _timestamp, file_path in backups[max_backups_per_file:]:
            try:
                file_path.unlink()
                deleted_files.append(file_path)
                logger.debug(f"Deleted old backup: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files
