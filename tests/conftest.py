"""Shared fixtures: fake bundlers standing in for the Node toolchain."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from treeshake_check.bundlers import Bundler
from treeshake_check.errors import BackendCompilationError

EXAMPLES = Path(__file__).parent.parent / "examples"


class FakeBundler(Bundler):
    def __init__(self, name: str, output: str = "", error: str | None = None, delay: float = 0.0):
        super().__init__()
        self.name = name
        self.output = output
        self.error = error
        self.delay = delay
        self.compiled: list[Path] = []

    async def compile(self, path: Path) -> str:
        await asyncio.sleep(self.delay)
        self.compiled.append(path)
        if self.error is not None:
            raise BackendCompilationError(self.name, self.error)
        return self.output


@pytest.fixture
def module_file(tmp_path: Path) -> Path:
    f = tmp_path / "index.js"
    f.write_text("setup()\nexport const store = createStore()\n")
    return f
