"""Shared utilities for treeshake-check."""

from __future__ import annotations

from collections.abc import Sequence


def format_conjunction(items: Sequence[str]) -> str:
    """Join names as an English list: "A", "A and B", "A, B, and C"."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def source_lines(source: str) -> list[str]:
    r"""Split ``source`` into lines the way the parser numbers them.

    Only "\n" ends a line. A trailing "\r" is dropped from each line, and a
    final newline does not start an extra empty line. Unlike ``str.splitlines``,
    U+2028, U+2029, form feeds and lone carriage returns stay inside their line.
    """
    if not source:
        return []
    lines = source.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def snippet(source: str, lineno: int, max_len: int = 160) -> str:
    """Return the source line at lineno (1-based), stripped and truncated."""
    lines = source_lines(source)
    if 0 < lineno <= len(lines):
        return lines[lineno - 1].strip()[:max_len]
    return ""
