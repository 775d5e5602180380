"""Tree-shaking backends, in the order their results are reported."""

from __future__ import annotations

from collections.abc import Iterable

from treeshake_check.bundlers.base import DEFAULT_TIMEOUT, Bundler
from treeshake_check.bundlers.rollup import RollupBundler
from treeshake_check.bundlers.webpack import WebpackBundler

BUNDLERS: dict[str, type[Bundler]] = {
    RollupBundler.name: RollupBundler,
    WebpackBundler.name: WebpackBundler,
}


def make_bundlers(
    names: Iterable[str] | None = None,
    *,
    npx: str = "npx",
    timeout: float = DEFAULT_TIMEOUT,
) -> list[Bundler]:
    """Instantiate the named backends (all of them by default), in declaration order.

    Names are matched case-insensitively.

    Raises:
        KeyError: an unknown backend name.
    """
    if names is None:
        wanted = list(BUNDLERS)
    else:
        by_lower = {n.lower(): n for n in BUNDLERS}
        requested = set()
        for name in names:
            if name.lower() not in by_lower:
                raise KeyError(name)
            requested.add(by_lower[name.lower()])
        wanted = [n for n in BUNDLERS if n in requested]
    return [BUNDLERS[n](npx=npx, timeout=timeout) for n in wanted]


__all__ = ["BUNDLERS", "Bundler", "RollupBundler", "WebpackBundler", "make_bundlers"]
