# CLI interface for codexmate
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

from codexmate import __version__
from codexmate.config import get_paths
from codexmate.mcp import (
    add_mcp_server,
    delete_mcp_server,
    edit_mcp_server,
    list_mcp_servers,
    quick_add_context7,
)
from codexmate.models import McpServer, OperationResult
from codexmate.nodes import add_node, delete_node, edit_node, list_nodes, switch_node
from codexmate.probe import check_cli
from codexmate.projects import delete_project, list_project_trust, set_project_trust
from codexmate.store import ConfigStore, get_config_raw, set_config_raw
from codexmate.utils.toml_reader import parse_value

# ABOUTME: Exit codes
# 0 = success, 2 = validation/config error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3


def _split_list(value: str | None) -> list[str]:
    """Comma-separated string to list, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _split_pairs(value: str | None) -> dict[str, str]:
    """Comma-separated KEY=VALUE pairs to dict."""
    pairs: dict[str, str] = {}
    for item in _split_list(value):
        if "=" in item:
            key, val = item.split("=", 1)
            pairs[key.strip()] = val.strip()
    return pairs


def _extra_fields(assignments: list[str] | None) -> dict[str, Any]:
    """Parse repeated --set KEY=VALUE options.

    ABOUTME: Values go through the TOML value parser, so 5 -> int, true -> bool
    """
    fields: dict[str, Any] = {}
    for assignment in assignments or []:
        if "=" not in assignment:
            raise ValueError(f"Expected KEY=VALUE, got '{assignment}'")
        key, raw = assignment.split("=", 1)
        fields[key.strip()] = parse_value(raw)
    return fields


def _report(result: OperationResult, success: str) -> int:
    for warning in result.warnings:
        print(f"  Warning: {warning}")
    if not result.ok:
        print(f"Error: {result.error}")
        return EXIT_CONFIG_ERROR
    print(success)
    return EXIT_SUCCESS


def cmd_check(args: argparse.Namespace, store: ConfigStore) -> int:
    """Report whether the codex binary is installed."""
    result = check_cli()
    if result.installed:
        print(f"codex installed: {result.version}")
        return EXIT_SUCCESS
    print(f"codex not installed: {result.error}")
    return EXIT_CONFIG_ERROR


def cmd_nodes(args: argparse.Namespace, store: ConfigStore) -> int:
    """Execute a nodes subcommand.

    ABOUTME: list/add/edit/switch/remove for [model_providers.*]
    """
    if args.action in ("add", "edit"):
        try:
            extra = _extra_fields(args.set)
        except ValueError as e:
            print(f"Error: {e}")
            return EXIT_CONFIG_ERROR

    if args.action == "list":
        nodes = list_nodes(store)
        if not nodes:
            print("No providers configured.")
            return EXIT_SUCCESS
        for node in nodes:
            marker = "*" if node.is_active else " "
            print(f"{marker} {node.name}")
            if node.provider is None:
                print("    (credential only, no provider entry)")
            else:
                print(f"    base_url: {node.provider.base_url or '-'}")
                print(f"    wire_api: {node.provider.wire_api or '-'}")
            print(f"    credential: {'yes' if node.has_credential else 'no'}")
        return EXIT_SUCCESS

    if args.action == "add":
        result = add_node(
            store,
            args.name,
            args.base_url,
            wire_api=args.wire_api,
            requires_openai_auth=args.requires_openai_auth,
            extra=extra,
            credential_key=args.key,
        )
        return _report(result, f"Provider '{args.name}' added.")

    if args.action == "edit":
        updates: dict[str, Any] = extra
        if args.base_url is not None:
            updates["base_url"] = args.base_url
        if args.wire_api is not None:
            updates["wire_api"] = args.wire_api
        if args.requires_openai_auth is not None:
            updates["requires_openai_auth"] = args.requires_openai_auth
        for key in args.unset or []:
            updates[key] = None
        result = edit_node(store, args.name, updates, credential_key=args.key)
        return _report(result, f"Provider '{args.name}' updated.")

    if args.action == "switch":
        result = switch_node(store, args.name)
        return _report(result, f"Active provider is now '{args.name}'.")

    # remove
    removal = delete_node(store, args.name)
    print(f"Provider '{args.name}' removed.")
    if removal.was_active:
        print("  Warning: it was the active provider; run 'codexmate nodes switch <name>'.")
    return EXIT_SUCCESS


def cmd_mcp(args: argparse.Namespace, store: ConfigStore) -> int:
    """Execute an mcp subcommand.

    ABOUTME: list/add/edit/remove/add-context7 for [mcp_servers.*]
    """
    if args.action == "list":
        servers = list_mcp_servers(store)
        for server_name, server in servers.items():
            print(f"  {server_name}")
            print(f"    command: {server.command}")
            if server.args:
                print(f"    args: {' '.join(server.args)}")
            if server.env:
                env_str = ", ".join(f"{k}={v}" for k, v in server.env.items())
                print(f"    env: {env_str}")
        print(f"Total: {len(servers)} server(s)")
        return EXIT_SUCCESS

    if args.action == "add":
        server = McpServer(
            name=args.name,
            command=args.command,
            args=_split_list(args.args),
            env=_split_pairs(args.env),
        )
        return _report(add_mcp_server(store, server), f"MCP server '{args.name}' added.")

    if args.action == "edit":
        updates: dict[str, Any] = {}
        if args.command is not None:
            updates["command"] = args.command
        if args.args is not None:
            updates["args"] = _split_list(args.args)
        if args.env is not None:
            updates["env"] = _split_pairs(args.env)
        return _report(edit_mcp_server(store, args.name, updates), f"MCP server '{args.name}' updated.")

    if args.action == "add-context7":
        return _report(quick_add_context7(store), "MCP server 'context7' added.")

    # remove
    return _report(delete_mcp_server(store, args.name), f"MCP server '{args.name}' removed.")


def cmd_projects(args: argparse.Namespace, store: ConfigStore) -> int:
    """Execute a projects subcommand."""
    if args.action == "list":
        projects = list_project_trust(store)
        for path, project in projects.items():
            print(f"  {path}: {project.trust_level or '-'}")
        print(f"Total: {len(projects)} project(s)")
        return EXIT_SUCCESS

    path = os.path.abspath(os.path.expanduser(args.path))
    if args.action == "trust":
        return _report(set_project_trust(store, path, args.level), f"{path}: {args.level}")

    return _report(delete_project(store, path), f"Project '{path}' removed.")


def cmd_config(args: argparse.Namespace, store: ConfigStore) -> int:
    """Show config.toml, or replace it with validated raw text.

    ABOUTME: 'edit -' reads the new contents from stdin
    """
    if args.action == "show":
        print(get_config_raw(store), end="")
        return EXIT_SUCCESS

    text = sys.stdin.read() if args.file == "-" else Path(args.file).read_text(encoding="utf-8")
    return _report(set_config_raw(store, text), f"Saved {store.paths.config_toml}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codexmate",
        description="Manage Codex CLI providers, MCP servers and project trust"
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"codexmate v{__version__}"
    )
    parser.add_argument(
        "--codex-home",
        type=Path,
        help="Codex directory (default: $CODEX_HOME or ~/.codex)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Don't back up files before overwriting them"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("check", help="Check that the codex CLI is installed")

    # nodes
    nodes = subparsers.add_parser("nodes", help="Manage model providers")
    node_actions = nodes.add_subparsers(dest="action", required=True)
    node_actions.add_parser("list", help="List providers")
    for action in ("add", "edit"):
        sub = node_actions.add_parser(action, help=f"{action.capitalize()} a provider")
        sub.add_argument("name", help="Provider name")
        sub.add_argument("--base-url", required=action == "add", help="API endpoint")
        sub.add_argument(
            "--wire-api",
            default="responses" if action == "add" else None,
            help="Wire protocol (responses or chat)"
        )
        sub.add_argument(
            "--requires-openai-auth",
            action=argparse.BooleanOptionalAction,
            default=None,
            help="Whether Codex should send the OpenAI auth header"
        )
        sub.add_argument("--key", help="API key stored in credentials.json")
        sub.add_argument(
            "--set",
            action="append",
            metavar="KEY=VALUE",
            help="Extra provider field (repeatable)"
        )
        if action == "edit":
            sub.add_argument("--unset", action="append", metavar="KEY", help="Remove a field (repeatable)")
    for action in ("switch", "remove"):
        sub = node_actions.add_parser(action, help=f"{action.capitalize()} a provider")
        sub.add_argument("name", help="Provider name")

    # mcp
    mcp = subparsers.add_parser("mcp", help="Manage MCP servers")
    mcp_actions = mcp.add_subparsers(dest="action", required=True)
    mcp_actions.add_parser("list", help="List MCP servers")
    mcp_actions.add_parser("add-context7", help="Add the Context7 MCP server")
    for action in ("add", "edit"):
        sub = mcp_actions.add_parser(action, help=f"{action.capitalize()} an MCP server")
        sub.add_argument("name", help="MCP server name")
        sub.add_argument("--command", required=action == "add", help="Command to run")
        sub.add_argument("--args", help="Comma-separated arguments")
        sub.add_argument("--env", help="Comma-separated KEY=VALUE environment variables")
    sub = mcp_actions.add_parser("remove", help="Remove an MCP server")
    sub.add_argument("name", help="MCP server name")

    # projects
    projects = subparsers.add_parser("projects", help="Manage project trust")
    project_actions = projects.add_subparsers(dest="action", required=True)
    project_actions.add_parser("list", help="List project trust entries")
    sub = project_actions.add_parser("trust", help="Set a project's trust level")
    sub.add_argument("path", help="Project directory")
    sub.add_argument("--level", default="trusted", help="Trust level (default: trusted)")
    sub = project_actions.add_parser("remove", help="Remove a project entry")
    sub.add_argument("path", help="Project directory")

    # config
    config = subparsers.add_parser("config", help="Show or replace config.toml")
    config_actions = config.add_subparsers(dest="action", required=True)
    config_actions.add_parser("show", help="Print config.toml")
    sub = config_actions.add_parser("edit", help="Replace config.toml after validating it")
    sub.add_argument("file", help="File with the new contents ('-' for stdin)")

    return parser


COMMANDS = {
    "check": cmd_check,
    "nodes": cmd_nodes,
    "mcp": cmd_mcp,
    "projects": cmd_projects,
    "config": cmd_config,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args and dispatches to appropriate command
    ABOUTME: Returns exit code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s"
        )

    handler = COMMANDS.get(args.command)
    if handler is None:
        # No command specified, show help
        parser.print_help()
        return EXIT_SUCCESS

    store = ConfigStore(get_paths(args.codex_home), backups=not args.no_backup)
    try:
        return handler(args, store)
    except (ValueError, OSError) as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
