"""Decide whether a bundler's output is nothing but import declarations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from treeshake_check.analyzer.effects import analyze_source
from treeshake_check.analyzer.frontend import check_syntax, parse_tree
from treeshake_check.analyzer.models import AnalysisResult

log = logging.getLogger(__name__)

# Top-level nodes that are not statements at all.
_IGNORED = frozenset({"comment", "hash_bang_line"})


@dataclass
class ResidualResult:
    tree_shaken: bool
    residual_lines: list[int] = field(default_factory=list)  # 1-based, in the bundle output
    analysis: AnalysisResult | None = None                    # of the original module


def detect_residual(code: str, original_source: str | None = None) -> ResidualResult:
    """Check a bundle for code other than imports.

    An empty bundle is tree-shaken. When residual code is found and
    ``original_source`` is given, the original module is analyzed to explain why.

    Raises:
        ModuleParseError: ``code`` is not a valid JavaScript module.
    """
    tree = parse_tree(code)
    check_syntax(tree, code.encode("utf-8"))

    residual_lines = [
        node.start_point[0] + 1
        for node in tree.root_node.named_children
        if node.type not in _IGNORED and node.type != "import_statement"
    ]
    if not residual_lines:
        return ResidualResult(tree_shaken=True)

    log.info("Residual code in bundle at line(s) %s", ", ".join(map(str, residual_lines[:10])))
    analysis = analyze_source(original_source) if original_source is not None else None
    return ResidualResult(tree_shaken=False, residual_lines=residual_lines, analysis=analysis)
