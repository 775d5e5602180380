"""Bundler interface and the subprocess plumbing shared by the Node-based backends."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from treeshake_check.errors import BackendCompilationError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class Bundler:
    """One tree-shaking backend.

    ``compile`` returns the module text the bundler emits when ``path`` is
    imported only for its side effects.
    """

    name: str = "bundler"

    def __init__(self, *, npx: str = "npx", timeout: float = DEFAULT_TIMEOUT) -> None:
        self.npx = npx
        self.timeout = timeout

    async def compile(self, path: Path) -> str:
        raise NotImplementedError

    async def run_tool(self, args: list[str], cwd: Path) -> str:
        """Run ``npx --no-install <args>`` and return its stdout.

        Raises:
            BackendCompilationError: the tool cannot be started, times out or exits non-zero.
        """
        cmd = [self.npx, "--no-install", *args]
        log.debug("%s: running %s in %s", self.name, " ".join(cmd), cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise BackendCompilationError(self.name, f"could not run {self.npx}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise BackendCompilationError(
                self.name, f"{self.name} timed out after {self.timeout:g}s",
            ) from exc

        out = stdout.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            err = stderr.decode("utf-8", errors="replace").strip() or out.strip()
            raise BackendCompilationError(
                self.name, err or f"{self.name} exited with status {proc.returncode}",
            )
        return out
