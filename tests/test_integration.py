"""Integration test: analyze the example modules end to end."""

from __future__ import annotations

from conftest import EXAMPLES, FakeBundler
from treeshake_check.analyzer import analyze_source
from treeshake_check.analyzer.models import Category
from treeshake_check.checker import check

PURE_MODULE = EXAMPLES / "pure_module" / "index.js"
IMPURE_MODULE = EXAMPLES / "impure_module" / "index.js"


def test_pure_module_has_no_diagnostics():
    assert PURE_MODULE.exists(), f"Example not found at {PURE_MODULE}"
    result = analyze_source(PURE_MODULE.read_text())
    assert result.diagnostics == []
    assert ">" not in [line.split(" | ")[0].strip() for line in result.listing.splitlines()]


def test_impure_module_diagnostics():
    assert IMPURE_MODULE.exists(), f"Example not found at {IMPURE_MODULE}"
    result = analyze_source(IMPURE_MODULE.read_text())

    found = [(d.line, d.column, d.category) for d in result.diagnostics]
    assert found == [
        (3, 1, Category.UNASSIGNED_INVOCATION),
        (4, 22, Category.UNANNOTATED_INVOCATION),
        (5, 22, Category.RISKY_MEMBER_ACCESS),
        (6, 1, Category.UNASSIGNED_INVOCATION),
    ]
    assert "class" in result.diagnostics[3].message

    flagged = [
        line.split(" | ")[0].strip()
        for line in result.listing.splitlines()
    ]
    assert flagged[2:6] == [">", ">", ">", ">"]
    assert flagged[0] == "1"

    assert result.messages[0] == '3:1  Top-level function invocation "setup" must be assigned a value and annotated'


def test_impure_module_fails_check():
    result = check(IMPURE_MODULE, [FakeBundler("Rollup", "setup();\n")], input_name="index.js")
    assert not result.passed
    assert len(result.first_failure.analysis.diagnostics) == 4
