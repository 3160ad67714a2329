"""Data models for the import scanner engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ScanResult:
    """Outcome of scanning one source tree."""

    candidates: list[str]
    raw_imports: list[str] = field(default_factory=list)
    local_names: set[str] = field(default_factory=set)
    files_scanned: int = 0
