"""Sphinx config file parser.

Reads the block format used by sphinx.conf:

    source main
    {
        sql_query = SELECT id, title \\
            FROM documents
    }

    index main : base
    {
        path = /var/data/main
    }

    searchd
    {
        listen   = 9312
        listen   = 9306:mysql41
        pid_file = /var/run/searchd.pid
    }

Sections are keyed by their full header ("searchd", "index main"). A
section declared with ": parent" starts as a copy of its parent's settings.
Keys that repeat within a section collect into a list.
"""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from sphinx_manager.ports.config import SettingValue

logger = logging.getLogger(__name__)

SECTION_TYPES = ("source", "index", "indexer", "searchd", "common")

_COMMENT_RE = re.compile(r"(?<!\\)#.*$")
_HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z_]+)(?:\s+(?P<name>[\w.-]+))?"
    r"(?:\s*:\s*(?P<parent>[\w.-]+))?\s*(?P<brace>\{)?$"
)
_SETTING_RE = re.compile(r"^(?P<key>[A-Za-z_][\w]*)\s*=\s*(?P<value>.*)$")


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line number, line) with comments stripped and continuations joined."""
    buffer = ""
    start = 0
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = _COMMENT_RE.sub("", raw).replace("\\#", "#").rstrip()
        if buffer:
            line = line.lstrip()
        else:
            start = lineno
        if line.endswith("\\"):
            buffer += line[:-1].rstrip() + " "
            continue
        yield start, (buffer + line).strip()
        buffer = ""
    if buffer.strip():
        yield start, buffer.strip()


def _add_setting(settings: dict[str, SettingValue], key: str, value: str) -> None:
    existing = settings.get(key)
    if existing is None:
        settings[key] = value
    elif isinstance(existing, list):
        existing.append(value)
    else:
        settings[key] = [existing, value]


def _copy_settings(settings: dict[str, SettingValue]) -> dict[str, SettingValue]:
    return {k: list(v) if isinstance(v, list) else v for k, v in settings.items()}


def parse_config_text(
    text: str, source: str = "<string>"
) -> dict[str, dict[str, SettingValue]]:
    """Parse sphinx.conf content.

    Args:
        text: Config file content
        source: Name used in error messages

    Returns:
        Mapping of section header to settings

    Raises:
        ValueError: If the content is malformed
    """
    sections: dict[str, dict[str, SettingValue]] = {}
    pending: str | None = None  # header seen, waiting for "{"
    current: dict[str, SettingValue] | None = None

    for lineno, line in _logical_lines(text):
        if not line:
            continue

        if current is not None:
            if line == "}":
                current = None
                continue
            match = _SETTING_RE.match(line)
            if match is None:
                raise ValueError(f"{source}:{lineno}: expected 'key = value', got {line!r}")
            _add_setting(current, match["key"], match["value"].strip())
            continue

        if line == "{":
            if pending is None:
                raise ValueError(f"{source}:{lineno}: '{{' without a section header")
            current = sections[pending]
            pending = None
            continue

        if pending is not None:
            raise ValueError(f"{source}:{lineno}: expected '{{' after section {pending!r}")

        match = _HEADER_RE.match(line)
        if match is None or match["type"] not in SECTION_TYPES:
            raise ValueError(f"{source}:{lineno}: unexpected {line!r}")

        header = match["type"] if match["name"] is None else f"{match['type']} {match['name']}"
        settings: dict[str, SettingValue] = {}
        if match["parent"]:
            parent = f"{match['type']} {match['parent']}"
            if parent not in sections:
                raise ValueError(f"{source}:{lineno}: unknown parent section {parent!r}")
            settings = _copy_settings(sections[parent])
        sections[header] = settings

        if match["brace"]:
            current = settings
        else:
            pending = header

    if current is not None or pending is not None:
        raise ValueError(f"{source}: unexpected end of file inside a section")
    return sections


class SphinxConfigParser:
    """ConfigLookup implementation for sphinx.conf files."""

    def parse(self, config_file: Path) -> dict[str, dict[str, SettingValue]]:
        """Parse a sphinx.conf file.

        Args:
            config_file: Path to the config file

        Returns:
            Mapping of section header to settings

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is malformed
        """
        text = Path(config_file).read_text(encoding="utf-8")
        sections = parse_config_text(text, source=str(config_file))
        logger.debug("Parsed %d sections from %s", len(sections), config_file)
        return sections
