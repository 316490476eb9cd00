# Minimal TOML reader for codexmate
import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# ABOUTME: Integer or decimal, optional sign. Exponents and underscores are not supported
NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+(?:\.[0-9]+)?")


class LineKind(Enum):
    """Classification of one physical line of config.toml."""

    BLANK = "blank"
    HEADER = "header"
    ASSIGNMENT = "assignment"
    ARRAY_OPEN = "array_open"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedLine:
    """A line after comment stripping.

    ABOUTME: key/value are only set for ASSIGNMENT and ARRAY_OPEN lines
    """
    kind: LineKind
    content: str = ""
    key: str = ""
    value: str = ""


def _unquote(text: str) -> str:
    """Strip surrounding double quotes and decode escapes.

    ABOUTME: Decodes JSON-style escapes, the same ones toml_writer emits
    ABOUTME: Tokens that are not valid JSON strings only get \\" unescaped
    """
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        try:
            return json.loads(text, strict=False)
        except ValueError:
            return text[1:-1].replace('\\"', '"')
    return text


def _split_top_level(body: str) -> list[str]:
    """Split on commas that are outside quotes and outside nested brackets/braces.

    ABOUTME: Empty items (trailing commas, blank arrays) are dropped
    """
    items: list[str] = []
    buf: list[str] = []
    depth = 0
    in_quotes = False
    escaped = False

    for ch in body:
        if ch == '"' and not escaped:
            in_quotes = not in_quotes
        elif not in_quotes:
            if ch in "[{":
                depth += 1
            elif ch in "]}":
                depth -= 1
            elif ch == "," and depth == 0:
                items.append("".join(buf))
                buf = []
                escaped = False
                continue
        buf.append(ch)
        escaped = not escaped and ch == "\\"

    items.append("".join(buf))
    return [item.strip() for item in items if item.strip()]


def _parse_inline_table(body: str) -> dict[str, Any]:
    table: dict[str, Any] = {}
    for pair in _split_top_level(body):
        key, sep, raw = pair.partition("=")
        key = _unquote(key.strip())
        if not sep or not key:
            logger.debug(f"Skipping malformed inline table entry: {pair!r}")
            continue
        table[key] = parse_value(raw)
    return table


def parse_value(raw: str) -> Any:
    """Convert a literal substring into a Python value.

    ABOUTME: Never raises - anything unrecognised comes back as the raw text
    ABOUTME: Quoted strings decode JSON-style escapes (\\", \\\\, \\n, \\uXXXX)

    Args:
        raw: Literal text from the right-hand side of an assignment

    Returns:
        list, dict, str, bool, int or float

    Examples:
        >>> parse_value('["a", "b"]')
        ['a', 'b']
        >>> parse_value("1.5")
        1.5
        >>> parse_value("bare")
        'bare'
    """
    text = raw.strip()

    if text.startswith("[") and text.endswith("]"):
        return [parse_value(item) for item in _split_top_level(text[1:-1])]

    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return _unquote(text)

    if text.startswith("{") and text.endswith("}"):
        return _parse_inline_table(text[1:-1])

    if text == "true":
        return True
    if text == "false":
        return False

    if NUMBER_PATTERN.fullmatch(text):
        return float(text) if "." in text else int(text)

    return text


def parse_table_path(header: str) -> list[str]:
    """Resolve a table header into its key segments.

    ABOUTME: Dots inside double-quoted segments do not split
    ABOUTME: Used for project paths like [projects."/home/u/my.project"]

    Examples:
        >>> parse_table_path('[projects."/home/u/my.project"]')
        ['projects', '/home/u/my.project']
        >>> parse_table_path("[]")
        []
    """
    inner = header.strip()[1:-1].strip()
    segments: list[str] = []
    buf: list[str] = []
    in_quotes = False
    escaped = False

    for ch in inner:
        if ch == '"' and not escaped:
            in_quotes = not in_quotes
        elif ch == "." and not in_quotes:
            segments.append("".join(buf))
            buf = []
            escaped = False
            continue
        buf.append(ch)
        escaped = not escaped and ch == "\\"

    if buf:
        segments.append("".join(buf))

    return [_unquote(segment.strip()) for segment in segments]


def strip_comment(line: str) -> str:
    """Drop a trailing # comment that is not inside a quoted string."""
    in_quotes = False
    escaped = False
    for index, ch in enumerate(line):
        if ch == '"' and not escaped:
            in_quotes = not in_quotes
        elif ch == "#" and not in_quotes:
            return line[:index].rstrip()
        escaped = not escaped and ch == "\\"
    return line


def classify_line(line: str) -> ClassifiedLine:
    """Classify one newline-stripped line.

    ABOUTME: Strips comments first, then decides header/assignment/blank
    ABOUTME: An assignment opening "[" without a closing "]" starts a multi-line array
    ABOUTME: Lines that are neither are UNKNOWN and get ignored by the builder
    """
    content = strip_comment(line.strip()).strip()
    if not content:
        return ClassifiedLine(LineKind.BLANK)

    if content.startswith("[") and content.endswith("]"):
        return ClassifiedLine(LineKind.HEADER, content)

    key, sep, value = content.partition("=")
    key = _unquote(key.strip())
    value = value.strip()
    if not sep or not key:
        return ClassifiedLine(LineKind.UNKNOWN, content)

    if value.startswith("[") and "]" not in value:
        return ClassifiedLine(LineKind.ARRAY_OPEN, content, key, value)

    return ClassifiedLine(LineKind.ASSIGNMENT, content, key, value)


def _ensure_table(root: dict[str, Any], path: list[str]) -> dict[str, Any]:
    node = root
    for segment in path:
        child = node.get(segment)
        if not isinstance(child, dict):
            if segment in node:
                logger.debug(f"Replacing non-table value at '{segment}' with a table")
            child = {}
            node[segment] = child
        node = child
    return node


def parse_toml(text: str) -> dict[str, Any]:
    """Parse config.toml text into a nested dict.

    ABOUTME: Single pass over lines, tracking the current table path
    ABOUTME: Multi-line arrays are buffered until a line containing "]"
    ABOUTME: Tolerant - unrecognised lines are skipped, never raises

    Args:
        text: Full file contents

    Returns:
        Configuration document (empty dict for empty input)

    Example input:
        model_provider = "acme"

        [model_providers.acme]
        name = "acme"
        base_url = "https://api.acme.dev/v1"

        [projects."/home/u/my.project"]
        trust_level = "trusted"
    """
    document: dict[str, Any] = {}
    current_path: list[str] = []
    pending_key: str | None = None
    fragments: list[str] = []

    for raw_line in text.splitlines():
        if pending_key is not None:
            fragment = strip_comment(raw_line.strip()).strip()
            if not fragment:
                continue
            fragments.append(fragment)
            if "]" in fragment:
                _ensure_table(document, current_path)[pending_key] = parse_value(" ".join(fragments))
                pending_key = None
                fragments = []
            continue

        line = classify_line(raw_line)

        if line.kind is LineKind.BLANK:
            continue

        if line.kind is LineKind.HEADER:
            current_path = parse_table_path(line.content)
            _ensure_table(document, current_path)
        elif line.kind is LineKind.ARRAY_OPEN:
            pending_key = line.key
            fragments = [line.value]
        elif line.kind is LineKind.ASSIGNMENT:
            _ensure_table(document, current_path)[line.key] = parse_value(line.value)
        else:
            logger.debug(f"Skipping unrecognised line: {line.content!r}")

    if pending_key is not None:
        logger.debug(f"Dropping unterminated array for key '{pending_key}'")

    return document
