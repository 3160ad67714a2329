"""pyreqs: infer a requirements manifest from a project's import statements."""

from pyreqs.pipeline import (
    RequirementsPipeline,
    resolve_local,
    resolve_remote,
    scan_local,
    write_manifest,
)

__version__ = "0.1.0"

__all__ = [
    "RequirementsPipeline",
    "resolve_local",
    "resolve_remote",
    "scan_local",
    "write_manifest",
]
