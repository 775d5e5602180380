"""Run every backend on one module and reduce the results to a single verdict.

Usage:
    from pathlib import Path
    from treeshake_check.checker import check

    result = check(Path("src/index.js"))
    result.passed          # all backends left only imports behind
    result.first_failure   # BackendReport of the first failing backend, or None
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from treeshake_check.analyzer import detect_residual
from treeshake_check.analyzer.models import BackendReport
from treeshake_check.bundlers import Bundler, make_bundlers
from treeshake_check.errors import (
    BackendCompilationError,
    ModuleParseError,
    TreeShakeViolation,
)
from treeshake_check.utils import snippet

log = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Per-backend reports, in backend declaration order."""
    input_name: str       # as given by the user
    path: Path
    reports: list[BackendReport] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return bool(self.reports) and all(r.passed for r in self.reports)

    @property
    def backend_names(self) -> list[str]:
        return [r.backend for r in self.reports]

    @property
    def first_failure(self) -> BackendReport | None:
        return next((r for r in self.reports if not r.passed), None)

    def raise_for_failure(self) -> None:
        """Raise the error behind the first failing backend, if any."""
        report = self.first_failure
        if report is None:
            return
        if report.error is not None:
            raise BackendCompilationError(report.backend, report.error)
        raise TreeShakeViolation(self.input_name, report.backend)


async def check_backend(bundler: Bundler, path: Path, source: str) -> BackendReport:
    """Compile ``path`` with one backend and inspect what survived."""
    try:
        code = await bundler.compile(path)
    except BackendCompilationError as exc:
        log.warning("%s failed to compile %s", bundler.name, path)
        return BackendReport(backend=bundler.name, passed=False, error=exc.message)

    log.debug("%s output:\n%s", bundler.name, code)

    try:
        residual = detect_residual(code, source)
    except ModuleParseError as exc:
        return BackendReport(
            backend=bundler.name, passed=False, residual=code,
            error=f"{bundler.name} emitted an unparseable bundle: {exc}",
        )

    if residual.tree_shaken:
        log.info("%s: tree-shaken", bundler.name)
        return BackendReport(backend=bundler.name, passed=True, residual=code)

    first = residual.residual_lines[0]
    log.info("%s: residual code, first at line %d: %s", bundler.name, first, snippet(code, first))
    return BackendReport(
        backend=bundler.name, passed=False, residual=code, analysis=residual.analysis,
    )


async def check_async(
    path: Path,
    bundlers: Sequence[Bundler],
    *,
    input_name: str | None = None,
) -> CheckResult:
    """Run all backends concurrently.

    A failing backend does not cancel the others. Reports come back in the
    order of ``bundlers``, whatever order the backends finish in.
    """
    path = path.resolve()
    source = await asyncio.to_thread(path.read_text, encoding="utf-8")
    log.info("Checking %s with %d backend(s)", path, len(bundlers))

    reports = await asyncio.gather(*(check_backend(b, path, source) for b in bundlers))
    return CheckResult(
        input_name=input_name if input_name is not None else str(path),
        path=path,
        reports=list(reports),
    )


def check(
    path: Path,
    bundlers: Sequence[Bundler] | None = None,
    *,
    input_name: str | None = None,
) -> CheckResult:
    """Synchronous entry point. Uses every registered backend when ``bundlers`` is None."""
    if bundlers is None:
        bundlers = make_bundlers()
    return asyncio.run(check_async(path, bundlers, input_name=input_name))
