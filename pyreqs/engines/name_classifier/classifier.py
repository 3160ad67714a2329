"""NameClassifier: stdlib/local/candidate decisions and distribution-name mapping."""

from __future__ import annotations

import enum
from collections.abc import Collection, Iterable, Mapping

from pyreqs.core.config import DEFAULT_OVERRIDES, parse_overrides
from pyreqs.engines.name_classifier.tables import LookupTables

DEFAULT_OVERRIDE_RULES: Mapping[str, str] = parse_overrides(DEFAULT_OVERRIDES)


class NameKind(str, enum.Enum):
    STDLIB = "stdlib"
    LOCAL = "local"
    CANDIDATE = "candidate"


class NameClassifier:
    """Decides what an imported top-level name refers to.

    Override rules take precedence over the alias table, so e.g. ``tensorflow``
    resolves to ``tensorflow-gpu`` whatever the alias table says.
    """

    def __init__(
        self,
        tables: LookupTables | None = None,
        overrides: Mapping[str, str] | None = None,
    ) -> None:
        self._tables = tables if tables is not None else LookupTables.bundled()
        self._overrides = dict(DEFAULT_OVERRIDE_RULES if overrides is None else overrides)

    @property
    def tables(self) -> LookupTables:
        return self._tables

    @property
    def overrides(self) -> Mapping[str, str]:
        return dict(self._overrides)

    def is_stdlib(self, name: str) -> bool:
        return name in self._tables.stdlib

    def classify(self, name: str, local_names: Collection[str] = ()) -> NameKind:
        """Classify *name*; a local module shadows a stdlib one of the same name."""
        if name in local_names:
            return NameKind.LOCAL
        if self.is_stdlib(name):
            return NameKind.STDLIB
        return NameKind.CANDIDATE

    def canonical_name(self, name: str) -> str:
        """Return the published distribution name for an import name."""
        if name in self._overrides:
            return self._overrides[name]
        return self._tables.aliases.get(name, name)

    def canonical_names(self, names: Iterable[str]) -> list[str]:
        """Map names to distributions, dropping duplicates but keeping first-seen order."""
        return list(dict.fromkeys(self.canonical_name(n) for n in names))
