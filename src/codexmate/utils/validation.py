# ABOUTME: Validation utilities for providers, MCP servers and project paths
# ABOUTME: Errors block a write; warnings are only reported
import os
import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse


@dataclass(frozen=True)
class ValidationError:
    """Represents a validation error or warning.

    ABOUTME: Uses frozen dataclass for immutability
    ABOUTME: Severity level distinguishes between blocking errors and warnings
    """
    field: str
    message: str
    severity: str  # 'error' or 'warning'


def validate_required(fields: Mapping[str, Any], required: Iterable[str]) -> ValidationError | None:
    """Return an error for the first required field that is missing or blank.

    Examples:
        >>> validate_required({"name": "acme", "base_url": " "}, ["name", "base_url"])
        ValidationError(field='base_url', message='base_url is required', severity='error')
    """
    for name in required:
        value = fields.get(name)
        if not value or (isinstance(value, str) and not value.strip()):
            return ValidationError(field=name, message=f"{name} is required", severity="error")
    return None


def validate_url(url: str) -> ValidationError | None:
    """Validate that a URL is properly formatted.

    ABOUTME: Uses urllib.parse for URL parsing
    ABOUTME: Requires HTTP or HTTPS scheme and a host

    Args:
        url: URL string to validate

    Returns:
        ValidationError (severity 'warning') if URL looks wrong, None otherwise
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return ValidationError(
            field="base_url",
            message=f"Invalid URL format '{url}': {e}",
            severity="warning"
        )
    if parsed.scheme not in ("http", "https"):
        return ValidationError(
            field="base_url",
            message=f"URL should use HTTP or HTTPS scheme: {url}",
            severity="warning"
        )
    if not parsed.netloc:
        return ValidationError(
            field="base_url",
            message=f"URL missing host/domain: {url}",
            severity="warning"
        )
    return None


def validate_command_exists(command: str) -> ValidationError | None:
    """Warn when an MCP command is not on this shell's PATH.

    ABOUTME: Uses shutil.which() for cross-platform command lookup
    ABOUTME: Only a warning - Codex may launch servers with a different PATH
    """
    if shutil.which(command) is None:
        return ValidationError(
            field="command",
            message=f"Command not found: {command}",
            severity="warning"
        )
    return None


def validate_project_path(path: str) -> ValidationError | None:
    """Project keys must be absolute paths (start with a path separator)."""
    if not path.startswith(("/", os.sep)):
        return ValidationError(
            field="path",
            message="project path must be absolute",
            severity="error"
        )
    return None
