"""Version resolver engine: pin candidates to their published versions."""

from pyreqs.engines.version_resolver.models import (
    FailureReason,
    LookupFailure,
    ResolvedRequirement,
    ResolveReport,
)
from pyreqs.engines.version_resolver.resolver import VersionResolver, resolve_versions

__all__ = [
    "FailureReason",
    "LookupFailure",
    "ResolveReport",
    "ResolvedRequirement",
    "VersionResolver",
    "resolve_versions",
]
