"""Pydantic models for purity analysis and per-backend reports."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    UNANNOTATED_INVOCATION = "unannotated_invocation"      # bound call, no annotation
    UNANNOTATED_CONSTRUCTION = "unannotated_construction"  # bound `new`, no annotation
    UNASSIGNED_INVOCATION = "unassigned_invocation"        # result discarded or transient
    RISKY_MEMBER_ACCESS = "risky_member_access"            # getter/setter may run


class Diagnostic(BaseModel):
    line: int            # 1-based
    column: int          # 1-based, in characters
    category: Category
    message: str


class AnalysisResult(BaseModel):
    diagnostics: list[Diagnostic] = Field(default_factory=list)  # position-ordered
    listing: str = ""                                             # annotated source
    messages: list[str] = Field(default_factory=list)             # "{line}:{column} {message}"

    @property
    def clean(self) -> bool:
        return not self.diagnostics


class BackendReport(BaseModel):
    backend: str
    passed: bool
    residual: str = ""                    # bundler output as emitted
    analysis: AnalysisResult | None = None
    error: str | None = None              # BackendCompilationError text, verbatim
