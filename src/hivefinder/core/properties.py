"""Reading flat ``key=value`` job properties."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

_COMMENT_PREFIXES = ("#", "!")


def _split_line(line: str) -> tuple[str, str]:
    """Split on the first ``=`` or ``:``, whichever comes first."""
    positions = [i for i in (line.find("="), line.find(":")) if i >= 0]
    if not positions:
        return line.strip(), ""
    i = min(positions)
    return line[:i].strip(), line[i + 1 :].strip()


def parse_properties(lines: Iterable[str]) -> dict[str, str]:
    """
    Parse Java-style properties lines.

    Blank lines and lines starting with ``#`` or ``!`` are ignored. Later
    keys override earlier ones.
    """
    props: dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        key, value = _split_line(line)
        if key:
            props[key] = value
    return props


def load_properties(path: str | Path) -> dict[str, str]:
    """Load a properties file from disk."""
    return parse_properties(Path(path).read_text(encoding="utf-8").splitlines())


def parse_assignment(value: str) -> tuple[str, str]:
    """Parse a single ``key=value`` override."""
    if "=" not in value:
        raise ValueError(f"Invalid property override: '{value}' (expected key=value)")
    key, val = value.split("=", 1)
    if not key.strip():
        raise ValueError(f"Invalid property override: '{value}' (empty key)")
    return key.strip(), val.strip()
