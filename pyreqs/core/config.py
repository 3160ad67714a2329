"""Runtime settings, read from ``PYREQS_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_INDEX_URL = "https://pypi.org/pypi"
DEFAULT_LOOKUP_TIMEOUT = 2.0
DEFAULT_MAX_CONCURRENCY = 20
DEFAULT_OVERRIDES = "tensorflow:tensorflow-gpu"


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def _env_int(key: str, default: int) -> int:
    return int(os.environ.get(key, default))


def _env_bool(key: str, default: bool = False) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_path(key: str) -> Path | None:
    raw = os.environ.get(key)
    return Path(raw) if raw else None


def parse_overrides(raw: str) -> dict[str, str]:
    """Parse ``"name:dist,name2:dist2"`` into an ordered mapping.

    Entries without a colon or with an empty side are ignored.
    """
    rules: dict[str, str] = {}
    for entry in raw.split(","):
        name, sep, dist = entry.strip().partition(":")
        name, dist = name.strip(), dist.strip()
        if sep and name and dist:
            rules[name] = dist
    return rules


@dataclass(frozen=True)
class Settings:
    """Immutable pipeline configuration."""

    index_url: str = DEFAULT_INDEX_URL
    lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    stdlib_file: Path | None = None
    mapping_file: Path | None = None
    overrides: dict[str, str] = field(
        default_factory=lambda: parse_overrides(DEFAULT_OVERRIDES)
    )
    skip_unreadable: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the environment, falling back to defaults."""
        return cls(
            index_url=os.environ.get("PYREQS_INDEX_URL", DEFAULT_INDEX_URL).rstrip("/"),
            lookup_timeout=_env_float("PYREQS_LOOKUP_TIMEOUT", DEFAULT_LOOKUP_TIMEOUT),
            max_concurrency=_env_int("PYREQS_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
            stdlib_file=_env_path("PYREQS_STDLIB_FILE"),
            mapping_file=_env_path("PYREQS_MAPPING_FILE"),
            overrides=parse_overrides(os.environ.get("PYREQS_OVERRIDES", DEFAULT_OVERRIDES)),
            skip_unreadable=_env_bool("PYREQS_SKIP_UNREADABLE"),
        )
