"""Tests for lookup tables and the name classifier."""

from __future__ import annotations

import pytest

from pyreqs.engines.name_classifier import LookupTables, NameClassifier, NameKind
from pyreqs.engines.name_classifier.tables import parse_mapping, parse_stdlib


class TestTables:
    def test_parse_stdlib_skips_blanks_and_comments(self):
        assert parse_stdlib("os\n\n# comment\n  sys  \n") == frozenset({"os", "sys"})

    def test_parse_mapping(self):
        content = "PIL:Pillow\n\nbad line\na:b:c\n:empty\nyaml : PyYAML\n"
        assert parse_mapping(content) == {"PIL": "Pillow", "yaml": "PyYAML"}

    def test_load_from_files(self, tmp_path):
        stdlib = tmp_path / "stdlib"
        mapping = tmp_path / "mapping"
        stdlib.write_text("os\nsys\n")
        mapping.write_text("cv2:opencv-python\n")
        tables = LookupTables.load(stdlib, mapping)
        assert tables.stdlib == frozenset({"os", "sys"})
        assert tables.aliases == {"cv2": "opencv-python"}

    def test_missing_files_degrade_to_empty(self, tmp_path, captured_logs):
        tables = LookupTables.load(tmp_path / "nope", tmp_path / "missing")
        assert tables.stdlib == frozenset()
        assert dict(tables.aliases) == {}
        events = [e["event"] for e in captured_logs]
        assert events.count("tables.unavailable") == 2

    def test_tables_are_read_only(self, tables):
        with pytest.raises(TypeError):
            tables.aliases["x"] = "y"  # type: ignore[index]

    def test_bundled_tables(self):
        tables = LookupTables.bundled()
        assert {"os", "sys", "asyncio", "json"} <= tables.stdlib
        assert tables.aliases["PIL"] == "Pillow"
        assert tables.aliases["yaml"] == "PyYAML"
        assert LookupTables.bundled() is tables


class TestClassifier:
    def test_stdlib(self, classifier):
        assert classifier.classify("os") is NameKind.STDLIB

    def test_local(self, classifier):
        assert classifier.classify("helpers", {"helpers"}) is NameKind.LOCAL

    def test_local_shadows_stdlib(self, classifier):
        assert classifier.classify("logging", {"logging"}) is NameKind.LOCAL

    def test_candidate(self, classifier):
        assert classifier.classify("requests", {"helpers"}) is NameKind.CANDIDATE

    def test_alias(self, classifier):
        assert classifier.canonical_name("PIL") == "Pillow"

    def test_passthrough(self, classifier):
        assert classifier.canonical_name("requests") == "requests"

    def test_tensorflow_gpu_override(self, classifier):
        assert classifier.canonical_name("tensorflow") == "tensorflow-gpu"

    def test_override_beats_alias_table(self):
        tables = LookupTables(aliases={"tensorflow": "tensorflow-cpu"})
        assert NameClassifier(tables).canonical_name("tensorflow") == "tensorflow-gpu"

    def test_custom_overrides(self, tables):
        clf = NameClassifier(tables, overrides={"torch": "torch-nightly"})
        assert clf.canonical_name("torch") == "torch-nightly"
        assert clf.canonical_name("tensorflow") == "tensorflow"

    def test_overrides_disabled(self, tables):
        assert NameClassifier(tables, overrides={}).canonical_name("tensorflow") == "tensorflow"

    def test_empty_tables_still_apply_override(self):
        clf = NameClassifier(LookupTables())
        assert clf.canonical_name("tensorflow") == "tensorflow-gpu"
        assert clf.canonical_name("PIL") == "PIL"

    def test_canonical_names_dedup_keeps_order(self):
        tables = LookupTables(aliases={"win32api": "pywin32", "win32con": "pywin32"})
        clf = NameClassifier(tables)
        assert clf.canonical_names(["win32api", "requests", "win32con"]) == [
            "pywin32",
            "requests",
        ]
