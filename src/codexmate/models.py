# Core data models for codexmate
from dataclasses import dataclass, field
from typing import Any

# ABOUTME: Conventional values; both fields accept any string
WIRE_API_RESPONSES = "responses"
WIRE_API_CHAT = "chat"
TRUST_TRUSTED = "trusted"
TRUST_UNTRUSTED = "untrusted"

# ABOUTME: The credential field copied into auth.json when switching providers
API_KEY_FIELD = "OPENAI_API_KEY"


@dataclass(frozen=True)
class Provider:
    """A [model_providers.<name>] entry.

    ABOUTME: Known fields are typed, everything else rides along in extra
    ABOUTME: extra keeps file order so writes stay deterministic
    """
    name: str
    base_url: str | None = None
    wire_api: str | None = None
    requires_openai_auth: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class McpServer:
    """A [mcp_servers.<name>] entry (stdio subprocess)."""
    name: str
    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectTrust:
    """A [projects."<absolute path>"] entry."""
    path: str
    trust_level: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NodeInfo:
    """One row of the provider listing.

    ABOUTME: provider is None when only a credential exists for the name
    """
    name: str
    is_active: bool
    provider: Provider | None
    has_credential: bool


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a CRUD operation.

    ABOUTME: Validation failures come back here instead of as exceptions
    ABOUTME: warnings carry non-blocking validation messages
    """
    ok: bool
    error: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NodeRemoval:
    """Outcome of delete_node; was_active tells the caller to pick a new provider."""
    ok: bool
    was_active: bool


@dataclass(frozen=True)
class CliCheckResult:
    """Whether the codex binary is installed, and its version or the failure reason."""
    installed: bool
    version: str | None = None
    error: str | None = None
