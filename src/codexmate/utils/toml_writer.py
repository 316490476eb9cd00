# Minimal TOML writer for codexmate
import json
import math
import re
from decimal import Decimal
from typing import Any

# ABOUTME: Top-level tables that get one block per named entry
PROVIDERS_KEY = "model_providers"
MCP_SERVERS_KEY = "mcp_servers"
PROJECTS_KEY = "projects"
RESERVED_KEYS = (PROVIDERS_KEY, MCP_SERVERS_KEY, PROJECTS_KEY)

BARE_KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def serialize_toml(document: dict[str, Any]) -> str:
    """Render a configuration document as config.toml text.

    ABOUTME: Top-level scalars first, then providers, MCP servers, projects
    ABOUTME: Any other top-level table follows so structured writes don't drop it
    ABOUTME: Insertion order is kept, so output is deterministic per document

    Args:
        document: Nested dict as returned by parse_toml

    Returns:
        TOML text ending in exactly one newline

    Example output:
        model_provider = "acme"

        [model_providers.acme]
        name = "acme"
        base_url = "https://api.acme.dev/v1"
        wire_api = "responses"

        [mcp_servers.context7]
        command = "npx"
        args = ["-y", "@upstash/context7-mcp"]

        [projects."/home/u/app"]
        trust_level = "trusted"
    """
    lines: list[str] = []

    for key, value in document.items():
        if value is None or isinstance(value, dict):
            continue
        lines.append(f"{_format_key(key)} = {_format_value(value)}")

    if lines:
        lines.append("")

    _write_collection(lines, document.get(PROVIDERS_KEY), PROVIDERS_KEY, inject_name=True)
    _write_collection(lines, document.get(MCP_SERVERS_KEY), MCP_SERVERS_KEY)
    _write_collection(lines, document.get(PROJECTS_KEY), PROJECTS_KEY, always_quote=True)

    for key, value in document.items():
        if key in RESERVED_KEYS or not isinstance(value, dict):
            continue
        _write_table(lines, _format_key(key), value)

    return "\n".join(lines).strip() + "\n"


def _write_collection(
    lines: list[str],
    collection: Any,
    key: str,
    inject_name: bool = False,
    always_quote: bool = False,
) -> None:
    """Write one [key.<entry>] block per named entry.

    ABOUTME: inject_name enforces provider name == map key on the way out
    ABOUTME: always_quote is for project paths, which must survive the header split
    """
    if not isinstance(collection, dict):
        return

    loose = {k: v for k, v in collection.items() if not isinstance(v, dict)}
    if loose:
        _write_table(lines, key, loose)

    for name, record in collection.items():
        if not isinstance(record, dict):
            continue
        if inject_name and not record.get("name"):
            record = {"name": name, **{k: v for k, v in record.items() if k != "name"}}
        segment = _quote(name) if always_quote else _format_key(name)
        _write_table(lines, f"{key}.{segment}", record)


def _write_table(lines: list[str], header: str, data: dict[str, Any]) -> None:
    """Write a [header] block, then a nested block per dict-valued field.

    ABOUTME: Plain fields go first so re-parsing keeps them in this table
    """
    lines.append(f"[{header}]")

    nested: list[tuple[str, dict[str, Any]]] = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            nested.append((key, value))
            continue
        lines.append(f"{_format_key(key)} = {_format_value(value)}")

    lines.append("")

    for key, value in nested:
        _write_table(lines, f"{header}.{_format_key(key)}", value)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _format_key(key: str) -> str:
    """Bare key if possible, otherwise a quoted one."""
    if BARE_KEY_PATTERN.fullmatch(key):
        return key
    return _quote(key)


def _format_value(value: Any) -> str:
    """Format a scalar, list or dict as a TOML value.

    ABOUTME: bool is checked before int (bool is an int subclass)
    ABOUTME: Strings use JSON escaping, which is valid TOML basic-string escaping
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, int):
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (list, tuple)):
        return _format_array(value)
    if isinstance(value, dict):
        return _format_inline_table(value)
    return _quote(str(value))


def _format_float(value: float) -> str:
    """Positional decimal with a fraction, e.g. 0.00001 -> "0.00001", 1e16 -> "10000000000000000.0".

    ABOUTME: Never exponent notation; the reader only accepts [+-]digits[.digits]
    ABOUTME: nan/inf have no decimal form; they are written as TOML's nan, inf, -inf
    """
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    return text if "." in text else text + ".0"


def _format_array(items: list[Any] | tuple[Any, ...]) -> str:
    """Format list as TOML array.

    ABOUTME: Converts Python list to ["item1", "item2"] format
    ABOUTME: None elements are dropped, nested lists recurse
    """
    if not items:
        return "[]"
    return "[" + ", ".join(_format_value(item) for item in items if item is not None) + "]"


def _format_inline_table(data: dict[str, Any]) -> str:
    """Format dict as TOML inline table.

    ABOUTME: Converts {"KEY": "value"} to { KEY = "value" } format
    ABOUTME: Only reached for dicts inside arrays; table fields get their own block
    """
    pairs = [f"{_format_key(k)} = {_format_value(v)}" for k, v in data.items() if v is not None]
    if not pairs:
        return "{}"
    return "{ " + ", ".join(pairs) + " }"
