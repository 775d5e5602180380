"""Tests for the click entry point."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from conftest import FakeBundler
from treeshake_check import cli

CLEAN = "import './index.js';\n"
DIRTY = "setup();\n"


@pytest.fixture
def use_bundlers(monkeypatch):
    def install(*bundlers):
        seen = {}

        def fake_make_bundlers(names=None, **kwargs):
            seen["names"] = names
            seen.update(kwargs)
            return list(bundlers)

        monkeypatch.setattr(cli, "make_bundlers", fake_make_bundlers)
        return seen
    return install


def test_success_message(use_bundlers, module_file):
    use_bundlers(FakeBundler("Rollup", CLEAN), FakeBundler("Webpack", CLEAN))
    result = CliRunner().invoke(cli.main, [str(module_file)])
    assert result.exit_code == 0
    assert f'Successfully tree-shaken "{module_file}" with Rollup and Webpack!' in result.output


def test_failure_prints_listing_and_diagnostics(use_bundlers, module_file):
    use_bundlers(FakeBundler("Rollup", CLEAN), FakeBundler("Webpack", DIRTY))
    result = CliRunner().invoke(cli.main, [str(module_file)])
    assert result.exit_code == 1
    assert "> | setup()" in result.output
    assert '1:1  Top-level function invocation "setup" must be assigned a value and annotated' in result.output
    assert '2:22 Top-level function invocation "createStore" must be annotated' in result.output
    assert f'Couldn\'t tree-shake "{module_file}" with Webpack!' in result.output


def test_compilation_error_reported_verbatim(use_bundlers, module_file):
    use_bundlers(FakeBundler("Rollup", error="[!] RollupError: Unexpected token"))
    result = CliRunner().invoke(cli.main, [str(module_file)])
    assert result.exit_code == 1
    assert "[!] RollupError: Unexpected token" in result.output
    assert "Top-level" not in result.output


def test_json_output(use_bundlers, module_file):
    use_bundlers(FakeBundler("Rollup", CLEAN), FakeBundler("Webpack", DIRTY))
    result = CliRunner().invoke(cli.main, [str(module_file), "--format", "json"])
    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["passed"] is False
    assert [b["backend"] for b in data["backends"]] == ["Rollup", "Webpack"]
    webpack = data["backends"][1]
    assert webpack["analysis"]["diagnostics"][0]["category"] == "unassigned_invocation"


def test_options_forwarded(use_bundlers, module_file):
    seen = use_bundlers(FakeBundler("Rollup", CLEAN))
    result = CliRunner().invoke(
        cli.main, [str(module_file), "-b", "rollup", "--timeout", "7", "--npx", "/opt/npx"],
    )
    assert result.exit_code == 0
    assert list(seen["names"]) == ["Rollup"]
    assert seen["timeout"] == 7.0
    assert seen["npx"] == "/opt/npx"


def test_env_vars(use_bundlers, module_file):
    seen = use_bundlers(FakeBundler("Rollup", CLEAN))
    result = CliRunner().invoke(
        cli.main, [str(module_file)],
        env={"TREESHAKE_CHECK_TIMEOUT": "3", "TREESHAKE_CHECK_NPX": "pnpx"},
    )
    assert result.exit_code == 0
    assert seen["names"] is None
    assert seen["timeout"] == 3.0
    assert seen["npx"] == "pnpx"


def test_missing_path():
    result = CliRunner().invoke(cli.main, ["does/not/exist.js"])
    assert result.exit_code == 2
