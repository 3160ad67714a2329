"""Custom exceptions for pyreqs."""

from __future__ import annotations


class PyReqsError(Exception):
    """Base exception for all pyreqs errors."""


class TraversalError(PyReqsError):
    """Raised when the source tree cannot be walked (missing path, permissions)."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot walk directory {path!r}: {reason}")


class FileReadError(PyReqsError):
    """Raised when a source file cannot be read during a scan."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read source file {path!r}: {reason}")


class CloneError(PyReqsError):
    """Raised when a remote repository cannot be fetched."""

    def __init__(self, repo_url: str, reason: str):
        self.repo_url = repo_url
        self.reason = reason
        super().__init__(f"cannot clone {repo_url!r}: {reason}")
