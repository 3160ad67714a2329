"""Shared fixtures for pyreqs tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from pyreqs.engines.name_classifier import LookupTables, NameClassifier

STDLIB = {"os", "sys", "json", "re", "typing", "collections", "logging", "pathlib"}


@pytest.fixture(autouse=True)
def captured_logs():
    """Route structlog output into a list instead of stdout."""
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def tables() -> LookupTables:
    return LookupTables(stdlib=frozenset(STDLIB), aliases={"PIL": "Pillow", "yaml": "PyYAML"})


@pytest.fixture
def classifier(tables) -> NameClassifier:
    return NameClassifier(tables)


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a ``{relative_path: content}`` mapping under a project root."""

    def _make(files: dict[str, str], root_name: str = "project") -> Path:
        root = tmp_path / root_name
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root

    return _make
