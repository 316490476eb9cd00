# codexmate - configuration manager for the Codex CLI
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and paths
from codexmate.config import CodexPaths, ensure_dirs, get_codex_dir, get_paths
from codexmate.models import (
    CliCheckResult,
    McpServer,
    NodeInfo,
    NodeRemoval,
    OperationResult,
    ProjectTrust,
    Provider,
)
from codexmate.store import ConfigStore

# ABOUTME: Export the TOML reader/writer
from codexmate.utils import parse_toml, serialize_toml

__all__ = [
    "__version__",
    "CliCheckResult",
    "CodexPaths",
    "ConfigStore",
    "McpServer",
    "NodeInfo",
    "NodeRemoval",
    "OperationResult",
    "ProjectTrust",
    "Provider",
    "ensure_dirs",
    "get_codex_dir",
    "get_paths",
    "parse_toml",
    "serialize_toml",
]
