# MCP server management: list, add, edit, delete
from typing import Any

from codexmate.models import McpServer, OperationResult
from codexmate.records import dict_to_server, server_to_dict
from codexmate.store import ConfigStore
from codexmate.utils.toml_writer import MCP_SERVERS_KEY
from codexmate.utils.validation import validate_command_exists

# ABOUTME: Preset offered as a one-step install
CONTEXT7_SERVER = McpServer(name="context7", command="npx", args=["-y", "@upstash/context7-mcp"])


def _find(document: dict[str, Any], name: str) -> dict[str, Any] | None:
    servers = document.get(MCP_SERVERS_KEY)
    if not isinstance(servers, dict):
        return None
    server = servers.get(name)
    return server if isinstance(server, dict) else None


def list_mcp_servers(store: ConfigStore) -> dict[str, McpServer]:
    """Return configured MCP servers keyed by name, in file order."""
    servers = store.read_config().get(MCP_SERVERS_KEY)
    if not isinstance(servers, dict):
        return {}
    return {
        name: dict_to_server(name, data)
        for name, data in servers.items()
        if isinstance(data, dict)
    }


def add_mcp_server(store: ConfigStore, server: McpServer) -> OperationResult:
    """Add an MCP server.

    ABOUTME: Refuses an empty name or a name that is already taken
    ABOUTME: A command missing from PATH is reported as a warning only
    """
    if not server.name:
        return OperationResult(ok=False, error="name is required")

    document = store.read_config()
    servers = document.get(MCP_SERVERS_KEY)
    if not isinstance(servers, dict):
        servers = {}
        document[MCP_SERVERS_KEY] = servers
    if server.name in servers:
        return OperationResult(ok=False, error="mcp server already exists")

    servers[server.name] = server_to_dict(server)
    store.write_config(document)

    warning = validate_command_exists(server.command) if server.command else None
    return OperationResult(ok=True, warnings=[warning.message] if warning else [])


def edit_mcp_server(store: ConfigStore, name: str, updates: dict[str, Any]) -> OperationResult:
    """Shallow-merge updates into an existing MCP server.

    ABOUTME: Replaces whole fields (args/env are not merged element-wise)
    ABOUTME: A None value in updates removes that field
    """
    document = store.read_config()
    server = _find(document, name)
    if server is None:
        return OperationResult(ok=False, error="mcp server not found")

    for key, value in updates.items():
        if value is None:
            server.pop(key, None)
        else:
            server[key] = value
    store.write_config(document)
    return OperationResult(ok=True)


def delete_mcp_server(store: ConfigStore, name: str) -> OperationResult:
    document = store.read_config()
    if _find(document, name) is None:
        return OperationResult(ok=False, error="mcp server not found")

    del document[MCP_SERVERS_KEY][name]
    store.write_config(document)
    return OperationResult(ok=True)


def quick_add_context7(store: ConfigStore) -> OperationResult:
    """Add the Context7 docs server (npx -y @upstash/context7-mcp)."""
    return add_mcp_server(store, CONTEXT7_SERVER)
