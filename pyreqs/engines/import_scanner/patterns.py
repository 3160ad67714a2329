"""Line-level extraction of top-level module names from import statements."""

from __future__ import annotations

import re
from collections.abc import Iterator

_IMPORT_RE = re.compile(r"^\s*import (.+)$")
_FROM_RE = re.compile(r"^\s*from (.*?) import (?:.*)$")
_TOKEN_RE = re.compile(r"^\S*")


def _statements(line: str) -> list[str]:
    """Split a physical line into its ``;``-separated statements, comment dropped."""
    return line.split("#", 1)[0].split(";")


def _top_level(token: str) -> str | None:
    """``a.b.c`` -> ``a``; ``None`` when the head is not an identifier."""
    head = token.split(".", 1)[0]
    return head if head.isidentifier() else None


def names_from_import(line: str) -> list[str]:
    """Names from ``import a, b.c as bc`` style lines.

    Each comma-separated entry contributes its first whitespace-delimited
    token, cut at the first dot, so ``as`` aliases are dropped.
    """
    names = []
    for stmt in _statements(line):
        m = _IMPORT_RE.match(stmt)
        if not m:
            continue
        for word in m.group(1).split(","):
            token = _TOKEN_RE.match(word.strip()).group(0)
            name = _top_level(token)
            if name:
                names.append(name)
    return names


def names_from_from_import(line: str) -> list[str]:
    """Name from ``from pkg.sub import x`` style lines.

    Relative imports (``from . import x``, ``from ..pkg import y``,
    ``from .sub import z``) point back into the scanned project and yield
    nothing.
    """
    names = []
    for stmt in _statements(line):
        m = _FROM_RE.match(stmt)
        if not m:
            continue
        parts = m.group(1).split()
        if not parts or parts[0].startswith("."):
            continue
        name = _top_level(parts[0])
        if name:
            names.append(name)
    return names


def extract_imports(content: str) -> Iterator[str]:
    """Yield raw top-level names, in source order, duplicates included."""
    for line in content.splitlines():
        for stmt in _statements(line):
            yield from names_from_import(stmt)
            yield from names_from_from_import(stmt)
