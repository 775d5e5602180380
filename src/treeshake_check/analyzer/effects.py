"""Classify every top-level invocation, construction and member access.

One downward walk over the module body. The walk stops at any body that does
not run at module evaluation time (functions, methods, arrows, instance field
initializers). For each invocation found, checked in order:

  1. annotated with a purity comment immediately before it -> pure
  2. callee is a known-pure builtin                         -> pure
  3. result has a destination (bound or retained)          -> must be annotated
  4. otherwise (discarded, transient, anonymous callee)    -> must be assigned and annotated

A member access outside callee position may trigger a getter and is always reported.
"""

from __future__ import annotations

import logging

from treeshake_check.analyzer.builtins import is_pure_builtin
from treeshake_check.analyzer.frontend import ParsedModule, parse_module
from treeshake_check.analyzer.models import AnalysisResult, Category, Diagnostic
from treeshake_check.analyzer.nodes import (
    AssignmentExpression,
    ClassFieldInit,
    ConstructionExpression,
    ExpressionStatement,
    FunctionLike,
    Identifier,
    InvocationExpression,
    MemberAccessExpression,
    NodeVisitor,
    ScopeContext,
    SyntaxNode,
    VariableDeclarator,
)
from treeshake_check.render.listing import format_messages, render_listing

log = logging.getLogger(__name__)


def dotted_name(node: SyntaxNode | None) -> str | None:
    """Reconstruct ``a`` / ``a.b`` / ``a.b.c`` from identifiers and dot access.

    Returns None for anything else (calls, computed access, function expressions).
    """
    if isinstance(node, Identifier):
        return node.name
    if (
        isinstance(node, MemberAccessExpression)
        and not node.computed
        and isinstance(node.property, Identifier)
    ):
        base = dotted_name(node.object)
        if base is not None:
            return f"{base}.{node.property.name}"
    return None


class EffectAnalyzer(NodeVisitor):
    """Collect purity diagnostics for one parsed module."""

    def __init__(self, module: ParsedModule) -> None:
        self.module = module
        self.diagnostics: list[Diagnostic] = []
        self._claimed: set[int] = set()  # record indices of consumed annotations

    def run(self) -> list[Diagnostic]:
        self.diagnostics = []
        self._claimed = set()
        self.visit(self.module.program, ScopeContext())
        return sorted(self.diagnostics, key=lambda d: (d.line, d.column))

    def visit(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        if not ctx.top_level:
            return
        super().visit(node, ctx)

    # ── Destinations ────────────────────────────────────────────────────

    def visit_expression_statement(self, node: ExpressionStatement, ctx: ScopeContext) -> None:
        if node.expression is not None:
            self.visit(node.expression, ctx.enter(node, has_destination=False))

    def visit_variable_declarator(self, node: VariableDeclarator, ctx: ScopeContext) -> None:
        inner = ctx.enter(node, has_destination=True)
        for child in node.children():
            self.visit(child, inner)

    def visit_assignment_expression(self, node: AssignmentExpression, ctx: ScopeContext) -> None:
        if node.target is not None:
            self.visit(node.target, ctx.enter(node))
        if node.value is not None:
            self.visit(node.value, ctx.enter(node, has_destination=True))

    # ── Scope cutoff ────────────────────────────────────────────────────

    def visit_function_like(self, node: FunctionLike, ctx: ScopeContext) -> None:
        if node.key is not None:
            self.visit(node.key, ctx.enter(node))
        self.generic_visit(node, ctx.deferred(node))

    def visit_class_field_init(self, node: ClassFieldInit, ctx: ScopeContext) -> None:
        if node.key is not None:
            self.visit(node.key, ctx.enter(node))
        if node.value is None:
            return
        if node.static:
            # runs once, when the class is defined; the class keeps the value
            self.visit(node.value, ctx.enter(node, has_destination=True))
        else:
            self.generic_visit(node, ctx.deferred(node))

    # ── Effects ─────────────────────────────────────────────────────────

    def visit_invocation(self, node: InvocationExpression, ctx: ScopeContext) -> None:
        self._classify(node, ctx)
        if node.callee is not None:
            self.visit(node.callee, ctx.enter(node, callee=True))
        inner = ctx.enter(node)
        for arg in node.arguments:
            self.visit(arg, inner)

    visit_construction = visit_invocation

    def visit_member_access(self, node: MemberAccessExpression, ctx: ScopeContext) -> None:
        if not ctx.callee:
            name = dotted_name(node)
            label = f' "{name}"' if name else ""
            self._report(
                node, ctx, Category.RISKY_MEMBER_ACCESS,
                f"Top-level member access{label} may call expressive code; prefer destructuring",
            )
        self.generic_visit(node, ctx)

    def _classify(self, node: InvocationExpression, ctx: ScopeContext) -> None:
        if self._annotated(node):
            return

        name = dotted_name(node.callee)
        if is_pure_builtin(name):
            return

        construction = isinstance(node, ConstructionExpression)
        subject = "class" if construction else "function"
        label = f' "{name}"' if name else ""

        if name is not None and ctx.has_destination:
            category = (
                Category.UNANNOTATED_CONSTRUCTION if construction
                else Category.UNANNOTATED_INVOCATION
            )
            self._report(node, ctx, category, f"Top-level {subject} invocation{label} must be annotated")
        else:
            self._report(
                node, ctx, Category.UNASSIGNED_INVOCATION,
                f"Top-level {subject} invocation{label} must be assigned a value and annotated",
            )

    def _annotated(self, node: SyntaxNode) -> bool:
        """True if an unclaimed purity annotation is the record right before ``node``.

        The first (outermost) expression starting at that token claims it.
        """
        found = self.module.preceding_record(node)
        if found is None:
            return False
        index, record = found
        if not record.is_pure or index in self._claimed:
            return False
        self._claimed.add(index)
        return True

    def _report(
        self, node: SyntaxNode, ctx: ScopeContext, category: Category, message: str,
    ) -> None:
        log.debug(
            "%d:%d %s in %s", node.span.line, node.span.column, category.value,
            " > ".join(ctx.ancestors + (node.kind,)),
        )
        self.diagnostics.append(Diagnostic(
            line=node.span.line,
            column=node.span.column,
            category=category,
            message=message,
        ))


def analyze_source(source: str) -> AnalysisResult:
    """Classify the top-level code of ``source`` and render the findings.

    Args:
        source: Original module text (not bundler output).

    Returns:
        AnalysisResult with position-ordered diagnostics, the annotated
        listing and one formatted message per diagnostic.
    """
    module = parse_module(source)
    diagnostics = EffectAnalyzer(module).run()
    log.info("Purity analysis: %d diagnostics", len(diagnostics))
    return AnalysisResult(
        diagnostics=diagnostics,
        listing=render_listing(source, diagnostics),
        messages=format_messages(diagnostics),
    )
