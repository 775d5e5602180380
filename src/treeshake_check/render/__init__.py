"""Render purity diagnostics for terminal output."""

from __future__ import annotations

from treeshake_check.render.listing import format_messages, render_listing

__all__ = ["format_messages", "render_listing"]
