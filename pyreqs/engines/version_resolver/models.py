"""Data models for the version resolver engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class FailureReason(str, enum.Enum):
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    TRANSPORT_ERROR = "transport_error"
    INVALID_RESPONSE = "invalid_response"
    INVALID_NAME = "invalid_name"


@dataclass(frozen=True)
class ResolvedRequirement:
    """A distribution confirmed by the index, pinned to its current version."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}=={self.version}"


@dataclass(frozen=True)
class LookupFailure:
    """A soft, per-name resolution failure. Logged, never raised."""

    name: str
    reason: FailureReason
    detail: str = ""


@dataclass
class ResolveReport:
    """Outcome of one resolver batch; requirements are in completion order."""

    requirements: list[ResolvedRequirement] = field(default_factory=list)
    failures: list[LookupFailure] = field(default_factory=list)

    @property
    def lines(self) -> list[str]:
        return [str(r) for r in self.requirements]

    @property
    def total(self) -> int:
        return len(self.requirements) + len(self.failures)
