"""CLI entry point for treeshake-check."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from treeshake_check import __version__
from treeshake_check.bundlers import BUNDLERS, make_bundlers
from treeshake_check.bundlers.base import DEFAULT_TIMEOUT
from treeshake_check.checker import CheckResult, check
from treeshake_check.errors import BackendCompilationError, TreeShakeViolation
from treeshake_check.utils import format_conjunction


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-b", "--backend", "backends",
    multiple=True,
    type=click.Choice(list(BUNDLERS), case_sensitive=False),
    help="Backend to run (repeatable). Defaults to all of them.",
)
@click.option(
    "-f", "--format", "fmt",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    envvar="TREESHAKE_CHECK_TIMEOUT",
    help="Seconds to wait for each bundler.",
)
@click.option(
    "--npx",
    default="npx",
    show_default=True,
    envvar="TREESHAKE_CHECK_NPX",
    help="npx executable used to launch the bundlers.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
@click.version_option(version=__version__)
def main(
    path: str,
    backends: tuple[str, ...],
    fmt: str,
    timeout: float,
    npx: str,
    verbose: bool,
) -> None:
    """Check that PATH is fully tree-shaken by every bundler."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    bundlers = make_bundlers(backends or None, npx=npx, timeout=timeout)
    result = check(Path(path), bundlers, input_name=path)

    if fmt == "json":
        _output_json(result)
    else:
        _output_text(result)

    if not result.passed:
        sys.exit(1)


def _output_text(result: CheckResult) -> None:
    if result.passed:
        targets = format_conjunction(result.backend_names)
        click.echo(f'Successfully tree-shaken "{result.input_name}" with {targets}!')
        return

    report = result.first_failure
    if report is None:
        click.echo("No backends were run.", err=True)
        return
    if report.analysis is not None:
        click.echo(report.analysis.listing)
        for line in report.analysis.messages:
            click.echo(line, err=True)
    try:
        result.raise_for_failure()
    except (BackendCompilationError, TreeShakeViolation) as exc:
        click.echo(str(exc), err=True)


def _output_json(result: CheckResult) -> None:
    data = {
        "input": result.input_name,
        "passed": result.passed,
        "backends": [r.model_dump(mode="json") for r in result.reports],
    }
    click.echo(json.dumps(data, indent=2))


if __name__ == "__main__":
    main()
