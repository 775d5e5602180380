"""Exception types for treeshake-check.

Purity diagnostics are never raised; they travel as data on AnalysisResult.
"""

from __future__ import annotations


class TreeshakeCheckError(Exception):
    """Base class for all errors raised by treeshake-check."""


class ModuleParseError(TreeshakeCheckError):
    """JavaScript text could not be parsed as a module."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        self.line = line
        self.column = column
        if line:
            message = f"{message} ({line}:{column})"
        super().__init__(message)


class BackendCompilationError(TreeshakeCheckError):
    """A bundler failed to produce output. Fatal for that backend only."""

    def __init__(self, backend: str, message: str) -> None:
        self.backend = backend
        self.message = message
        super().__init__(message)


class TreeShakeViolation(TreeshakeCheckError):
    """A bundler left non-import code behind."""

    def __init__(self, input_name: str, backend: str) -> None:
        self.input_name = input_name
        self.backend = backend
        super().__init__(f'Couldn\'t tree-shake "{input_name}" with {backend}!')
