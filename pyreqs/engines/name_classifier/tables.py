"""Read-only lookup tables: standard-library names and import-name aliases."""

from __future__ import annotations

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import structlog

log = structlog.get_logger("pyreqs.classifier")

DATA_DIR = Path(__file__).parent / "data"
BUNDLED_STDLIB = DATA_DIR / "stdlib"
BUNDLED_MAPPING = DATA_DIR / "mapping"


def _read_table(path: Path, table: str) -> str:
    """Return the file's text, or an empty string if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        log.warning("tables.unavailable", table=table, path=str(path), error=str(exc))
        return ""


def parse_stdlib(content: str) -> frozenset[str]:
    """Parse a newline-separated module list, skipping blanks and ``#`` comments."""
    names = set()
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if line and not line.startswith("#"):
            names.add(line)
    return frozenset(names)


def parse_mapping(content: str) -> dict[str, str]:
    """Parse ``import_name:distribution_name`` lines.

    Lines that do not split into exactly two non-empty fields are ignored.
    """
    aliases: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        parts = [p.strip() for p in line.split(":")]
        if len(parts) == 2 and all(parts):
            aliases[parts[0]] = parts[1]
    return aliases


@dataclass(frozen=True)
class LookupTables:
    """Stdlib membership set plus alias mapping, loaded once and injected."""

    stdlib: frozenset[str] = frozenset()
    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "stdlib", frozenset(self.stdlib))
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))

    @classmethod
    def load(
        cls,
        stdlib_path: Path | None = None,
        mapping_path: Path | None = None,
    ) -> LookupTables:
        """Load both tables from disk; a missing file yields an empty table."""
        stdlib_path = stdlib_path or BUNDLED_STDLIB
        mapping_path = mapping_path or BUNDLED_MAPPING
        tables = cls(
            stdlib=parse_stdlib(_read_table(stdlib_path, "stdlib")),
            aliases=parse_mapping(_read_table(mapping_path, "mapping")),
        )
        log.debug(
            "tables.loaded",
            stdlib_count=len(tables.stdlib),
            alias_count=len(tables.aliases),
        )
        return tables

    @staticmethod
    @functools.lru_cache(maxsize=1)
    def bundled() -> LookupTables:
        """Tables shipped with the package, loaded once per process."""
        return LookupTables.load(BUNDLED_STDLIB, BUNDLED_MAPPING)
