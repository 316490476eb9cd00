# Conversions between config.toml tables and typed records
from typing import Any

from codexmate.models import McpServer, ProjectTrust, Provider

PROVIDER_FIELDS = ("name", "base_url", "wire_api", "requires_openai_auth")
MCP_SERVER_FIELDS = ("command", "args", "env")
PROJECT_FIELDS = ("trust_level",)


def _extra(data: dict[str, Any], known: tuple[str, ...]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key not in known}


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def dict_to_provider(name: str, data: dict[str, Any]) -> Provider:
    """Convert a model_providers table to a Provider.

    ABOUTME: The map key wins over any name field in the table
    ABOUTME: Non-bool requires_openai_auth values are treated as unset
    """
    requires_auth = data.get("requires_openai_auth")
    return Provider(
        name=name,
        base_url=_optional_str(data.get("base_url")),
        wire_api=_optional_str(data.get("wire_api")),
        requires_openai_auth=requires_auth if isinstance(requires_auth, bool) else None,
        extra=_extra(data, PROVIDER_FIELDS),
    )


def provider_to_dict(provider: Provider) -> dict[str, Any]:
    """Convert a Provider to its table, known fields first.

    ABOUTME: Omits unset optional fields for cleaner output
    """
    result: dict[str, Any] = {"name": provider.name}
    if provider.base_url is not None:
        result["base_url"] = provider.base_url
    if provider.wire_api is not None:
        result["wire_api"] = provider.wire_api
    if provider.requires_openai_auth is not None:
        result["requires_openai_auth"] = provider.requires_openai_auth
    for key, value in provider.extra.items():
        if key not in PROVIDER_FIELDS:
            result[key] = value
    return result


def dict_to_server(name: str, data: dict[str, Any]) -> McpServer:
    """Convert an mcp_servers table to an McpServer.

    ABOUTME: Handles missing args/env gracefully
    ABOUTME: Hand-edited files may hold a bare string for args - wrapped in a list
    """
    args = data.get("args", [])
    if not isinstance(args, list):
        args = [args]
    env = data.get("env", {})
    if not isinstance(env, dict):
        env = {}

    return McpServer(
        name=name,
        command=_optional_str(data.get("command")) or "",
        args=[str(arg) for arg in args],
        env={str(key): str(value) for key, value in env.items()},
        extra=_extra(data, MCP_SERVER_FIELDS),
    )


def server_to_dict(server: McpServer) -> dict[str, Any]:
    """Convert McpServer to its table.

    ABOUTME: Omits empty env dict for cleaner output
    ABOUTME: The name is the table key, so it is not written as a field
    """
    result: dict[str, Any] = {
        "command": server.command,
        "args": list(server.args),
    }
    if server.env:
        result["env"] = dict(server.env)
    for key, value in server.extra.items():
        if key not in MCP_SERVER_FIELDS:
            result[key] = value
    return result


def dict_to_project(path: str, data: dict[str, Any]) -> ProjectTrust:
    """Convert a projects table to a ProjectTrust."""
    return ProjectTrust(
        path=path,
        trust_level=_optional_str(data.get("trust_level")),
        extra=_extra(data, PROJECT_FIELDS),
    )
