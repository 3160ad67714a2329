"""Tests for CLI commands: network and git are mocked."""

from __future__ import annotations

import json
import os
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from pyreqs.cli import main
from pyreqs.engines.version_resolver import ResolvedRequirement, ResolveReport
from pyreqs.exceptions import CloneError


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("pyreqs.cli.setup_logging"), patch("pyreqs.cli.load_dotenv"):
        yield


@pytest.fixture
def runner():
    return CliRunner()


def _report(*pairs: tuple[str, str]) -> ResolveReport:
    return ResolveReport(requirements=[ResolvedRequirement(n, v) for n, v in pairs])


class TestScan:
    def test_lists_candidates(self, runner, make_tree):
        root = make_tree({"app.py": "import os\nimport requests\nfrom PIL import Image\n"})
        result = runner.invoke(main, ["scan", str(root)])
        assert result.exit_code == 0, result.output
        assert "requests" in result.output
        assert "Pillow" in result.output
        assert "os" not in result.output.split()

    def test_json_output(self, runner, make_tree):
        root = make_tree({"app.py": "import requests\n"})
        result = runner.invoke(main, ["scan", str(root), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == ["requests"]

    def test_ignore_dir(self, runner, make_tree):
        root = make_tree({"app.py": "import requests\n", "tools/t.py": "import click\n"})
        result = runner.invoke(main, ["scan", str(root), "--ignore-dir", "tools", "--json"])
        assert json.loads(result.stdout) == ["requests"]

    def test_missing_path_fails(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestResolve:
    def test_writes_sorted_manifest(self, runner, make_tree, tmp_path):
        root = make_tree({"app.py": "import requests\nimport flask\n"})
        out = tmp_path / "requirements.txt"
        report = _report(("requests", "2.32.3"), ("flask", "3.0.3"))
        with patch(
            "pyreqs.pipeline.VersionResolver.resolve", AsyncMock(return_value=report)
        ) as resolve:
            result = runner.invoke(main, ["resolve", str(root), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert out.read_text() == "flask==3.0.3\nrequests==2.32.3\n"
        assert resolve.call_args.args[0] == ["requests", "flask"]

    def test_stdout_no_sort(self, runner, make_tree):
        root = make_tree({"app.py": "import b\nimport a\n"})
        report = _report(("b", "1"), ("a", "2"))
        with patch("pyreqs.pipeline.VersionResolver.resolve", AsyncMock(return_value=report)):
            result = runner.invoke(main, ["resolve", str(root), "-o", "-", "--no-sort"])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["b==1", "a==2"]

    def test_remote_uses_env_token(self, runner):
        resolve_remote = AsyncMock(return_value=["requests==2.0"])
        with patch.dict(os.environ, {"PYREQS_TOKEN": "envtok"}), patch(
            "pyreqs.cli.RequirementsPipeline.resolve_remote", resolve_remote
        ):
            result = runner.invoke(
                main, ["resolve", "https://github.com/o/r", "-o", "-", "--ref", "main"]
            )
        assert result.exit_code == 0, result.output
        assert "requests==2.0" in result.stdout
        args, kwargs = resolve_remote.call_args
        assert args[:2] == ("https://github.com/o/r", "envtok")
        assert kwargs == {"ref": "main"}

    def test_clone_failure_exit_code(self, runner):
        failing = AsyncMock(side_effect=CloneError("https://github.com/o/r", "denied"))
        with patch("pyreqs.cli.RequirementsPipeline.resolve_remote", failing):
            result = runner.invoke(main, ["resolve", "https://github.com/o/r", "--token", "t"])
        assert result.exit_code == 1
        assert "denied" in result.output

    def test_index_url_and_timeout_options(self, runner, make_tree):
        root = make_tree({"app.py": "import requests\n"})
        captured = {}

        def fake_init(self, settings=None, **kwargs):
            captured["settings"] = settings
            raise SystemExit(0)

        with patch("pyreqs.cli.RequirementsPipeline.__init__", fake_init):
            runner.invoke(
                main,
                ["resolve", str(root), "--index-url", "https://mirror/pypi/", "--timeout", "5"],
            )
        assert captured["settings"].index_url == "https://mirror/pypi"
        assert captured["settings"].lookup_timeout == 5.0
