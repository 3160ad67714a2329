"""Pipeline controller: scan, resolve, and persist a requirements manifest."""

from __future__ import annotations

import tempfile
from collections.abc import Iterable
from pathlib import Path

import structlog

from pyreqs.core.config import Settings
from pyreqs.engines.import_scanner import ImportScanner
from pyreqs.engines.name_classifier import LookupTables, NameClassifier
from pyreqs.engines.version_resolver import ResolveReport, VersionResolver
from pyreqs.repo import clone_repo

log = structlog.get_logger("pyreqs.pipeline")


class RequirementsPipeline:
    """Local mode: scan -> resolve. Remote mode: clone -> scan -> resolve -> cleanup.

    Lookup tables are loaded once here and shared by every scan the
    pipeline runs.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        tables: LookupTables | None = None,
        resolver: VersionResolver | None = None,
    ) -> None:
        self._settings = settings or Settings.from_env()
        if tables is None:
            if self._settings.stdlib_file or self._settings.mapping_file:
                tables = LookupTables.load(self._settings.stdlib_file, self._settings.mapping_file)
            else:
                tables = LookupTables.bundled()
        self._classifier = NameClassifier(tables, self._settings.overrides)
        self._resolver = resolver or VersionResolver(
            self._settings.index_url,
            timeout=self._settings.lookup_timeout,
            max_concurrency=self._settings.max_concurrency,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def classifier(self) -> NameClassifier:
        return self._classifier

    def scan(self, root: str | Path, extra_ignore_dirs: Iterable[str] = ()) -> list[str]:
        scanner = ImportScanner(
            self._classifier,
            extra_ignore_dirs=extra_ignore_dirs,
            skip_unreadable=self._settings.skip_unreadable,
        )
        return scanner.scan(root).candidates

    async def resolve_report(
        self, root: str | Path, extra_ignore_dirs: Iterable[str] = ()
    ) -> ResolveReport:
        candidates = self.scan(root, extra_ignore_dirs)
        return await self._resolver.resolve(candidates)

    async def resolve_local(
        self, root: str | Path, extra_ignore_dirs: Iterable[str] = ()
    ) -> list[str]:
        """Requirements for a local tree, in lookup completion order."""
        report = await self.resolve_report(root, extra_ignore_dirs)
        return report.lines

    async def resolve_remote(
        self,
        repo_url: str,
        access_token: str | None,
        extra_ignore_dirs: Iterable[str] = (),
        *,
        ref: str | None = None,
    ) -> list[str]:
        """Clone *repo_url*, resolve its requirements, and remove the clone.

        The scratch directory is deleted even if scanning fails. Clone
        failures raise :class:`~pyreqs.exceptions.CloneError` before any scan.
        """
        with tempfile.TemporaryDirectory(prefix="pyreqs-remote-") as tmpdir:
            repo_path = await clone_repo(repo_url, access_token, Path(tmpdir), ref=ref)
            candidates = self.scan(repo_path, extra_ignore_dirs)
        log.debug("pipeline.clone_removed", repo_url=repo_url)
        report = await self._resolver.resolve(candidates)
        return report.lines


def scan_local(
    root: str | Path,
    extra_ignore_dirs: Iterable[str] = (),
    *,
    tables: LookupTables | None = None,
    settings: Settings | None = None,
) -> list[str]:
    """Candidate distribution names for a local tree (no network access)."""
    return RequirementsPipeline(settings, tables=tables).scan(root, extra_ignore_dirs)


async def resolve_local(
    root: str | Path,
    extra_ignore_dirs: Iterable[str] = (),
    *,
    settings: Settings | None = None,
    tables: LookupTables | None = None,
) -> list[str]:
    pipeline = RequirementsPipeline(settings, tables=tables)
    return await pipeline.resolve_local(root, extra_ignore_dirs)


async def resolve_remote(
    repo_url: str,
    access_token: str | None,
    extra_ignore_dirs: Iterable[str] = (),
    *,
    ref: str | None = None,
    settings: Settings | None = None,
    tables: LookupTables | None = None,
) -> list[str]:
    pipeline = RequirementsPipeline(settings, tables=tables)
    return await pipeline.resolve_remote(repo_url, access_token, extra_ignore_dirs, ref=ref)


def sort_requirements(requirements: Iterable[str]) -> list[str]:
    """Case-insensitive sort by distribution name, ties broken by the full line."""
    return sorted(requirements, key=lambda r: (r.split("==", 1)[0].lower(), r))


def write_manifest(
    requirements: Iterable[str],
    path: str | Path,
    *,
    sort: bool = True,
) -> Path:
    """Write one requirement per line to *path* and return it.

    With ``sort=False`` the lines keep their given (completion) order.
    """
    lines = sort_requirements(requirements) if sort else list(requirements)
    out = Path(path)
    out.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    log.info("pipeline.manifest_written", path=str(out), requirements=len(lines))
    return out
