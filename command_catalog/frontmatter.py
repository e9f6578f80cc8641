from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import re
import yaml

# Leading "---" block; the closing delimiter must sit on its own line.
FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)", re.S | re.M
)


@dataclass(frozen=True)
class ParsedDocument:
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


def parse_yaml_strict(raw: str) -> dict[str, Any]:
    """Decode the metadata block as YAML.

    Raises ``yaml.YAMLError`` on bad syntax, and other errors on input the
    constructor chokes on (``2024-13-45``, ``!!bool maybe``, deep nesting).
    """
    data = yaml.safe_load(raw)
    if not isinstance(data, dict):
        return {}
    return data


def parse_yaml_lenient(raw: str) -> dict[str, Any]:
    """Line-oriented recovery for hand-written metadata that YAML rejects.

    Understands ``key: value`` lines, ``- item`` lines under an open key and
    free continuation lines. Never raises.
    """
    result: dict[str, Any] = {}
    current_key: str | None = None
    current_value = ""

    def flush() -> None:
        if current_key is not None and not isinstance(result.get(current_key), list):
            result[current_key] = current_value.strip()

    for line in raw.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        colon = trimmed.find(":")
        if 0 < colon < len(trimmed) - 1:
            flush()
            current_key = trimmed[:colon].strip()
            current_value = trimmed[colon + 1:].strip()
        elif current_key is not None and trimmed.startswith("-"):
            items = result.get(current_key)
            if not isinstance(items, list):
                items = result[current_key] = []
            items.append(trimmed[1:].strip())
        elif current_key is not None:
            current_value += " " + trimmed

    flush()
    return result


def parse_metadata(raw: str) -> dict[str, Any]:
    try:
        return parse_yaml_strict(raw)
    except Exception:
        # PyYAML also raises KeyError (`!!bool maybe`) and RecursionError
        return parse_yaml_lenient(raw)


def parse_document(text: str) -> ParsedDocument:
    """Split a command document into its metadata mapping and body."""
    m = FRONTMATTER_RE.search(text)
    if not m:
        return ParsedDocument(metadata={}, body=text)
    return ParsedDocument(metadata=parse_metadata(m.group(1)), body=text[m.end():])


def extract_command_fields(metadata: dict[str, Any]) -> tuple[str, str | None]:
    """Return ``(description, argument_hint)``; other keys are ignored."""
    description = metadata.get("description")
    hint = metadata.get("argument-hint")
    return (
        description if isinstance(description, str) else "",
        hint if isinstance(hint, str) else None,
    )
