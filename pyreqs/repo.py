"""Git clone helper for remote-mode resolution."""

from __future__ import annotations

import asyncio
import os
import uuid
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

import structlog

from pyreqs.exceptions import CloneError

log = structlog.get_logger("pyreqs.repo")

# Username is ignored by token-authenticated git hosts; only the password matters.
TOKEN_USERNAME = "x-access-token"


def is_remote(target: str) -> bool:
    return target.startswith(("https://", "http://", "git@", "ssh://"))


def authenticated_url(repo_url: str, access_token: str | None) -> str:
    """Embed *access_token* as basic-auth credentials in an HTTP(S) URL.

    SSH URLs and empty tokens are returned unchanged.
    """
    if not access_token:
        return repo_url
    parts = urlsplit(repo_url)
    if parts.scheme not in ("http", "https"):
        return repo_url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{TOKEN_USERNAME}:{quote(access_token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def _redact(text: str, secret: str | None) -> str:
    if not secret:
        return text
    return text.replace(quote(secret, safe=""), "***").replace(secret, "***")


async def clone_repo(
    repo_url: str,
    access_token: str | None,
    workdir: Path,
    *,
    ref: str | None = None,
) -> Path:
    """Clone *repo_url* into a fresh directory under *workdir* and return it.

    *ref* can be a branch, tag, or commit SHA; the remote default branch is
    used when it is None. The caller owns *workdir* and its cleanup.

    Raises :class:`CloneError` on any git failure.
    """
    target = workdir / f"repo-{uuid.uuid4().hex[:8]}"
    url = authenticated_url(repo_url, access_token)

    log.info("repo.clone_started", repo_url=repo_url, ref=ref)
    await _run_git(["git", "clone", "--", url, str(target)], repo_url, access_token)
    if ref:
        await _run_git(["git", "-C", str(target), "checkout", ref], repo_url, access_token)
    log.info("repo.clone_finished", repo_url=repo_url, path=str(target))
    return target


async def _run_git(cmd: list[str], repo_url: str, access_token: str | None) -> None:
    """Run a git command, raising CloneError on failure."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
        )
    except OSError as exc:
        raise CloneError(repo_url, f"cannot run git: {exc}") from exc

    _, stderr = await proc.communicate()
    if proc.returncode != 0:
        message = _redact(stderr.decode(errors="replace").strip(), access_token)
        raise CloneError(repo_url, f"git exited with {proc.returncode}: {message}")
