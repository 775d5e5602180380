"""Annotated source listings and aligned diagnostic lines."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from treeshake_check.utils import source_lines

if TYPE_CHECKING:
    from treeshake_check.analyzer.models import Diagnostic

# Replaces the line number on lines that carry at least one diagnostic.
MARKER = ">"
_SEPARATOR = " | "


def render_listing(source: str, diagnostics: Sequence[Diagnostic]) -> str:
    """Number every source line; flagged lines get MARKER in the gutter instead.

    The gutter is right-aligned to the widest line number.
    """
    lines = source_lines(source)
    if not lines:
        return ""
    flagged = {d.line for d in diagnostics}
    width = max(len(str(len(lines))), len(MARKER))

    out: list[str] = []
    for lineno, text in enumerate(lines, start=1):
        gutter = MARKER if lineno in flagged else str(lineno)
        out.append(f"{gutter:>{width}}{_SEPARATOR}{text}".rstrip())
    return "\n".join(out)


def format_messages(diagnostics: Sequence[Diagnostic]) -> list[str]:
    """One ``"{line}:{column} {message}"`` string per diagnostic.

    Line numbers are right-aligned and columns left-aligned so that every
    message in the batch starts at the same offset.
    """
    if not diagnostics:
        return []
    line_width = max(len(str(d.line)) for d in diagnostics)
    column_width = max(len(str(d.column)) for d in diagnostics)
    return [
        f"{d.line:>{line_width}}:{d.column:<{column_width}} {d.message}"
        for d in diagnostics
    ]
