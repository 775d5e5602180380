"""Webpack backend: production build with ES module output, read back from disk."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from treeshake_check.bundlers.base import Bundler
from treeshake_check.errors import BackendCompilationError

OUTPUT_NAME = "output.js"


class WebpackBundler(Bundler):
    name = "Webpack"

    def command(self, path: Path, output_dir: Path) -> list[str]:
        return [
            "webpack",
            "--mode", "production",
            "--entry", str(path),
            "--output-path", str(output_dir),
            "--output-filename", OUTPUT_NAME,
            "--experiments-output-module",
            "--output-module",
            "--stats", "errors-only",
        ]

    async def compile(self, path: Path) -> str:
        with tempfile.TemporaryDirectory(prefix="treeshake-webpack-") as tmp:
            output_dir = Path(tmp)
            await self.run_tool(self.command(path, output_dir), cwd=path.parent)
            output = output_dir / OUTPUT_NAME
            try:
                return await asyncio.to_thread(output.read_text, encoding="utf-8")
            except FileNotFoundError as exc:
                raise BackendCompilationError(
                    self.name, f"{self.name} produced no {OUTPUT_NAME}",
                ) from exc
