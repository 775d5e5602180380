"""Rollup backend: bundles a virtual entry that imports the module for its side effects."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from treeshake_check.bundlers.base import Bundler

ENTRY_NAME = "entry.mjs"


def entry_source(path: Path) -> str:
    return f"import {json.dumps(str(path))};\n"


class RollupBundler(Bundler):
    name = "Rollup"

    async def compile(self, path: Path) -> str:
        with tempfile.TemporaryDirectory(prefix="treeshake-rollup-") as tmp:
            entry = Path(tmp) / ENTRY_NAME
            entry.write_text(entry_source(path))
            return await self.run_tool(
                ["rollup", str(entry), "--format", "es", "--silent"],
                cwd=path.parent,
            )
