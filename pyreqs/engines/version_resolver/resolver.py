"""VersionResolver: concurrent package-index lookups with soft failures."""

from __future__ import annotations

import asyncio
import contextlib
import re
from collections.abc import AsyncIterator, Iterable
from urllib.parse import quote

import httpx
import structlog

from pyreqs.core.config import (
    DEFAULT_INDEX_URL,
    DEFAULT_LOOKUP_TIMEOUT,
    DEFAULT_MAX_CONCURRENCY,
)
from pyreqs.engines.version_resolver.models import (
    FailureReason,
    LookupFailure,
    ResolvedRequirement,
    ResolveReport,
)

log = structlog.get_logger("pyreqs.resolver")

_Outcome = ResolvedRequirement | LookupFailure

# PEP 508 distribution name
_DIST_NAME_RE = re.compile(r"[A-Z0-9]|[A-Z0-9][A-Z0-9._-]*[A-Z0-9]", re.IGNORECASE)


def _extract_version(resp: httpx.Response) -> str | None:
    """Pull ``info.version`` out of a PyPI JSON API body."""
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    info = data.get("info")
    if not isinstance(info, dict):
        return None
    version = info.get("version")
    if not version:
        return None
    return str(version).strip() or None


class VersionResolver:
    """Looks up the currently published version of many names at once.

    Every name gets its own request, bounded by *timeout*. A name that is
    unknown to the index, or whose lookup errors out, is recorded as a
    :class:`LookupFailure` and never aborts the batch.

    A caller-supplied *client* is used as-is and left open; otherwise a
    private ``httpx.AsyncClient`` is created per :meth:`resolve` call.
    """

    def __init__(
        self,
        index_url: str = DEFAULT_INDEX_URL,
        *,
        timeout: float = DEFAULT_LOOKUP_TIMEOUT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._index_url = index_url.rstrip("/")
        self._timeout = timeout
        self._max_concurrency = max_concurrency
        self._client = client

    @property
    def index_url(self) -> str:
        return self._index_url

    async def resolve(self, names: Iterable[str]) -> ResolveReport:
        """Resolve every distinct name; returns once all lookups have settled."""
        unique = list(dict.fromkeys(n for n in names if n))
        report = ResolveReport()
        if not unique:
            return report

        sem = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency > 0 else None

        async with self._client_session() as client:
            tasks = [asyncio.ensure_future(self._lookup(client, name, sem)) for name in unique]
            try:
                for next_done in asyncio.as_completed(tasks):
                    outcome = await next_done
                    if isinstance(outcome, LookupFailure):
                        report.failures.append(outcome)
                        log.warning(
                            "resolver.lookup_failed",
                            package=outcome.name,
                            reason=outcome.reason.value,
                            detail=outcome.detail,
                        )
                    else:
                        report.requirements.append(outcome)
                        log.debug("resolver.resolved", requirement=str(outcome))
            finally:
                for task in tasks:
                    task.cancel()

        log.info(
            "resolver.done",
            index=self._index_url,
            requested=len(unique),
            resolved=len(report.requirements),
            failed=len(report.failures),
        )
        return report

    # ── internal ───────────────────────────────────────────────────────────

    @contextlib.asynccontextmanager
    async def _client_session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            yield client

    async def _lookup(
        self,
        client: httpx.AsyncClient,
        name: str,
        sem: asyncio.Semaphore | None,
    ) -> _Outcome:
        if sem is None:
            return await self._fetch(client, name)
        async with sem:
            return await self._fetch(client, name)

    async def _fetch(self, client: httpx.AsyncClient, name: str) -> _Outcome:
        if not _DIST_NAME_RE.fullmatch(name):
            return LookupFailure(name, FailureReason.INVALID_NAME, "not a valid distribution name")
        url = f"{self._index_url}/{quote(name, safe='')}/json"
        try:
            resp = await asyncio.wait_for(client.get(url), timeout=self._timeout)
        except asyncio.TimeoutError:
            return LookupFailure(
                name, FailureReason.TRANSPORT_ERROR, f"no response within {self._timeout}s"
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return LookupFailure(
                name, FailureReason.TRANSPORT_ERROR, f"{type(exc).__name__}: {exc}"
            )

        if resp.status_code == 404:
            return LookupFailure(name, FailureReason.NOT_FOUND, "package does not exist")
        if resp.status_code != 200:
            return LookupFailure(
                name, FailureReason.SERVER_ERROR, f"index returned HTTP {resp.status_code}"
            )

        version = _extract_version(resp)
        if version is None:
            return LookupFailure(
                name, FailureReason.INVALID_RESPONSE, "response has no info.version"
            )
        return ResolvedRequirement(name=name, version=version)


async def resolve_versions(
    names: Iterable[str],
    index_url: str = DEFAULT_INDEX_URL,
    *,
    timeout: float = DEFAULT_LOOKUP_TIMEOUT,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    client: httpx.AsyncClient | None = None,
) -> list[str]:
    """Return ``name==version`` lines for every name the index confirms."""
    resolver = VersionResolver(
        index_url, timeout=timeout, max_concurrency=max_concurrency, client=client
    )
    report = await resolver.resolve(names)
    return report.lines
