"""ImportScanner: walk a source tree and collect third-party import candidates."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

import structlog

from pyreqs.engines.import_scanner.models import ScanResult
from pyreqs.engines.import_scanner.patterns import extract_imports
from pyreqs.engines.name_classifier import LookupTables, NameClassifier, NameKind
from pyreqs.exceptions import FileReadError, TraversalError

log = structlog.get_logger("pyreqs.scanner")

DEFAULT_IGNORE_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".mypy_cache",
        ".pytest_cache",
        ".tox",
        ".nox",
        "__pycache__",
        "env",
        "venv",
        ".venv",
    }
)

SOURCE_SUFFIX = ".py"
PACKAGE_MARKER = "__init__.py"


def build_ignore_set(extra_ignore_dirs: Iterable[str] = ()) -> frozenset[str]:
    """Default ignore names plus the lowercased base names of *extra_ignore_dirs*."""
    extras = {os.path.basename(os.path.normpath(d)).lower() for d in extra_ignore_dirs if d}
    return DEFAULT_IGNORE_DIRS | extras


class ImportScanner:
    """Extracts candidate distribution names from a local source tree."""

    def __init__(
        self,
        classifier: NameClassifier | None = None,
        *,
        extra_ignore_dirs: Iterable[str] = (),
        skip_unreadable: bool = False,
    ) -> None:
        self._classifier = classifier or NameClassifier()
        self._ignore = build_ignore_set(extra_ignore_dirs)
        self._skip_unreadable = skip_unreadable

    @property
    def ignore_dirs(self) -> frozenset[str]:
        return self._ignore

    def scan(self, root: str | Path) -> ScanResult:
        """Scan *root* and return the filtered, alias-mapped candidates.

        Raises :class:`TraversalError` if the tree cannot be walked and
        :class:`FileReadError` on an unreadable file (unless the scanner was
        built with ``skip_unreadable=True``).
        """
        root_path = Path(root)
        files, local_names = self._walk(root_path)

        raw_imports: list[str] = []
        scanned = 0
        for file_path in files:
            content = self._read(file_path)
            if content is None:
                continue
            raw_imports.extend(extract_imports(content))
            scanned += 1

        seen = list(dict.fromkeys(raw_imports))
        externals = [
            name
            for name in seen
            if self._classifier.classify(name, local_names) is NameKind.CANDIDATE
        ]
        candidates = self._classifier.canonical_names(externals)

        log.info(
            "scanner.done",
            root=str(root_path),
            files=scanned,
            raw=len(seen),
            candidates=len(candidates),
        )
        return ScanResult(
            candidates=candidates,
            raw_imports=seen,
            local_names=local_names,
            files_scanned=scanned,
        )

    # ── internal ───────────────────────────────────────────────────────────

    def _walk(self, root: Path) -> tuple[list[Path], set[str]]:
        """Collect source files to scan and names defined by the project itself."""
        if not root.is_dir():
            raise TraversalError(str(root), "not a directory or does not exist")

        def _on_error(exc: OSError) -> None:
            raise TraversalError(exc.filename or str(root), exc.strerror or str(exc)) from exc

        files: list[Path] = []
        local_names: set[str] = {root.resolve().name}

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            dirnames[:] = sorted(d for d in dirnames if d.lower() not in self._ignore)
            local_names.update(dirnames)

            for filename in sorted(filenames):
                if not filename.endswith(SOURCE_SUFFIX):
                    continue
                local_names.add(filename[: -len(SOURCE_SUFFIX)])
                if filename == PACKAGE_MARKER:
                    continue
                files.append(Path(dirpath) / filename)

        return files, local_names

    def _read(self, file_path: Path) -> str | None:
        try:
            return file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            if not self._skip_unreadable:
                raise FileReadError(str(file_path), exc.strerror or str(exc)) from exc
            log.warning("scanner.file_skipped", path=str(file_path), error=str(exc))
            return None


def scan_imports(
    root: str | Path,
    extra_ignore_dirs: Iterable[str] = (),
    *,
    tables: LookupTables | None = None,
) -> list[str]:
    """Scan a local tree and return candidate distribution names (no network)."""
    scanner = ImportScanner(NameClassifier(tables), extra_ignore_dirs=extra_ignore_dirs)
    return scanner.scan(root).candidates
