"""CLI entry point: pyreqs.

Subcommands:
    pyreqs scan /path/to/project                       # candidate names only, no network
    pyreqs resolve /path/to/project -o requirements.txt
    pyreqs resolve https://github.com/org/repo --token $GITHUB_TOKEN -o -
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from pyreqs.core.config import Settings
from pyreqs.core.logging import setup_logging
from pyreqs.exceptions import PyReqsError
from pyreqs.pipeline import RequirementsPipeline, sort_requirements, write_manifest
from pyreqs.repo import is_remote


def _default_token() -> str | None:
    return os.environ.get("PYREQS_TOKEN") or os.environ.get("GITHUB_TOKEN")


def _build_settings(
    index_url: str | None,
    timeout: float | None,
    skip_unreadable: bool,
) -> Settings:
    settings = Settings.from_env()
    changes: dict[str, object] = {}
    if index_url:
        changes["index_url"] = index_url.rstrip("/")
    if timeout is not None:
        changes["lookup_timeout"] = timeout
    if skip_unreadable:
        changes["skip_unreadable"] = True
    return dataclasses.replace(settings, **changes) if changes else settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer (default: $PYREQS_LOG_FORMAT or console)",
)
def main(verbose: bool, log_format: str | None) -> None:
    """pyreqs: infer requirements.txt from a project's imports."""
    load_dotenv()
    setup_logging(level="DEBUG" if verbose else None, fmt=log_format)


@main.command("scan")
@click.argument("path", type=click.Path(file_okay=False, path_type=Path))
@click.option("--ignore-dir", "ignore_dirs", multiple=True, help="Extra directory name to skip")
@click.option("--skip-unreadable", is_flag=True, help="Log and skip unreadable files")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan_cmd(path: Path, ignore_dirs: tuple[str, ...], skip_unreadable: bool, as_json: bool) -> None:
    """List third-party distribution names imported under PATH."""
    settings = _build_settings(None, None, skip_unreadable)
    try:
        candidates = RequirementsPipeline(settings).scan(path, ignore_dirs)
    except PyReqsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(candidates, indent=2))
        return
    if not candidates:
        click.echo("No third-party imports found.", err=True)
        return
    for name in candidates:
        click.echo(name)


@main.command("resolve")
@click.argument("target")
@click.option("--ignore-dir", "ignore_dirs", multiple=True, help="Extra directory name to skip")
@click.option("--token", default=None, help="Access token for cloning (default: $PYREQS_TOKEN)")
@click.option("--ref", default=None, help="Branch, tag or commit to check out after cloning")
@click.option(
    "-o", "--output", default="requirements.txt", show_default=True, help="Manifest path, '-' for stdout"
)
@click.option("--index-url", default=None, help="Package index JSON API base URL")
@click.option("--timeout", type=float, default=None, help="Per-lookup timeout in seconds")
@click.option("--no-sort", is_flag=True, help="Keep lookup completion order")
@click.option("--skip-unreadable", is_flag=True, help="Log and skip unreadable files")
def resolve_cmd(
    target: str,
    ignore_dirs: tuple[str, ...],
    token: str | None,
    ref: str | None,
    output: str,
    index_url: str | None,
    timeout: float | None,
    no_sort: bool,
    skip_unreadable: bool,
) -> None:
    """Resolve TARGET (local path or git URL) into a pinned requirements manifest."""
    settings = _build_settings(index_url, timeout, skip_unreadable)
    pipeline = RequirementsPipeline(settings)

    try:
        if is_remote(target):
            requirements = asyncio.run(
                pipeline.resolve_remote(target, token or _default_token(), ignore_dirs, ref=ref)
            )
        else:
            requirements = asyncio.run(pipeline.resolve_local(target, ignore_dirs))
    except PyReqsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output == "-":
        lines = requirements if no_sort else sort_requirements(requirements)
        for line in lines:
            click.echo(line)
        return

    out = write_manifest(requirements, output, sort=not no_sort)
    click.echo(f"Wrote {len(requirements)} requirement(s) to {out}", err=True)


if __name__ == "__main__":
    main()
