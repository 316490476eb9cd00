# ABOUTME: Utility modules for codexmate
# ABOUTME: Exports the TOML reader/writer, file helpers, backup and validation functions

from codexmate.utils.backup import cleanup_old_backups, create_backup
from codexmate.utils.fs import (
    atomic_write_text,
    read_json_file,
    read_text_if_exists,
    write_json_file,
)
from codexmate.utils.toml_reader import parse_toml, parse_value
from codexmate.utils.toml_writer import serialize_toml
from codexmate.utils.validation import (
    ValidationError,
    validate_command_exists,
    validate_project_path,
    validate_required,
    validate_url,
)

__all__ = [
    "parse_toml",
    "parse_value",
    "serialize_toml",
    "atomic_write_text",
    "read_json_file",
    "read_text_if_exists",
    "write_json_file",
    "create_backup",
    "cleanup_old_backups",
    "ValidationError",
    "validate_command_exists",
    "validate_project_path",
    "validate_required",
    "validate_url",
]
