"""Purity analysis for JavaScript modules.

Provides:
    analyze_source(source) -> AnalysisResult
    detect_residual(code, original_source) -> ResidualResult
"""

from __future__ import annotations

from treeshake_check.analyzer.effects import EffectAnalyzer, analyze_source
from treeshake_check.analyzer.models import AnalysisResult, Category, Diagnostic
from treeshake_check.analyzer.residual import ResidualResult, detect_residual

__all__ = [
    "AnalysisResult",
    "Category",
    "Diagnostic",
    "EffectAnalyzer",
    "ResidualResult",
    "analyze_source",
    "detect_residual",
]
