"""SyntaxNode variants, traversal context and the kind-dispatching visitor.

Nodes are pure data built fresh per parse. Every variant carries a ``kind`` tag;
``NodeVisitor`` dispatches on it the way ``ast.NodeVisitor`` dispatches on class name.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar


@dataclass(frozen=True)
class Span:
    line: int     # 1-based
    column: int   # 1-based, characters
    start: int    # byte offset
    end: int      # byte offset, exclusive


@dataclass
class SyntaxNode:
    kind: ClassVar[str] = "node"
    span: Span

    def children(self) -> Iterator[SyntaxNode]:
        return iter(())


def _present(*nodes: SyntaxNode | None) -> Iterator[SyntaxNode]:
    return (n for n in nodes if n is not None)


@dataclass
class Comment(SyntaxNode):
    kind: ClassVar[str] = "comment"
    text: str = ""


@dataclass
class Program(SyntaxNode):
    kind: ClassVar[str] = "program"
    body: list[SyntaxNode] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.body)


@dataclass
class ImportDeclaration(SyntaxNode):
    kind: ClassVar[str] = "import_declaration"
    source: str | None = None


@dataclass
class ExpressionStatement(SyntaxNode):
    kind: ClassVar[str] = "expression_statement"
    expression: SyntaxNode | None = None

    def children(self) -> Iterator[SyntaxNode]:
        return _present(self.expression)


@dataclass
class VariableDeclarator(SyntaxNode):
    kind: ClassVar[str] = "variable_declarator"
    target: SyntaxNode | None = None   # None for `export default <expr>`
    init: SyntaxNode | None = None

    def children(self) -> Iterator[SyntaxNode]:
        return _present(self.target, self.init)


@dataclass
class VariableDeclaration(SyntaxNode):
    kind: ClassVar[str] = "variable_declaration"
    declarators: list[VariableDeclarator] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.declarators)


@dataclass
class AssignmentExpression(SyntaxNode):
    kind: ClassVar[str] = "assignment_expression"
    target: SyntaxNode | None = None
    value: SyntaxNode | None = None

    def children(self) -> Iterator[SyntaxNode]:
        return _present(self.target, self.value)


@dataclass
class BinaryExpression(SyntaxNode):
    kind: ClassVar[str] = "binary_expression"
    operator: str = ""
    left: SyntaxNode | None = None
    right: SyntaxNode | None = None

    def children(self) -> Iterator[SyntaxNode]:
        return _present(self.left, self.right)


@dataclass
class PropertyEntry(SyntaxNode):
    kind: ClassVar[str] = "property_entry"
    key: SyntaxNode | None = None
    value: SyntaxNode | None = None    # None for shorthand `{ a }`
    computed: bool = False

    def children(self) -> Iterator[SyntaxNode]:
        if self.computed:
            return _present(self.key, self.value)
        return _present(self.value)


@dataclass
class ObjectLiteral(SyntaxNode):
    kind: ClassVar[str] = "object_literal"
    entries: list[SyntaxNode] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.entries)


@dataclass
class ArrayLiteral(SyntaxNode):
    kind: ClassVar[str] = "array_literal"
    elements: list[SyntaxNode] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.elements)


@dataclass
class Identifier(SyntaxNode):
    kind: ClassVar[str] = "identifier"
    name: str = ""


@dataclass
class MemberAccessExpression(SyntaxNode):
    kind: ClassVar[str] = "member_access"
    object: SyntaxNode | None = None
    property: SyntaxNode | None = None
    computed: bool = False             # a[b] as opposed to a.b

    def children(self) -> Iterator[SyntaxNode]:
        if self.computed:
            return _present(self.object, self.property)
        return _present(self.object)


@dataclass
class InvocationExpression(SyntaxNode):
    kind: ClassVar[str] = "invocation"
    callee: SyntaxNode | None = None
    arguments: list[SyntaxNode] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        yield from _present(self.callee)
        yield from self.arguments


@dataclass
class ConstructionExpression(InvocationExpression):
    kind: ClassVar[str] = "construction"


@dataclass
class FunctionLike(SyntaxNode):
    """Function declaration/expression, arrow, generator or method."""

    kind: ClassVar[str] = "function_like"
    name: str | None = None
    key: SyntaxNode | None = None      # computed method key, evaluated at definition
    body: list[SyntaxNode] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.body)


@dataclass
class ClassFieldInit(SyntaxNode):
    kind: ClassVar[str] = "class_field_init"
    static: bool = False
    key: SyntaxNode | None = None      # only set when computed
    value: SyntaxNode | None = None

    def children(self) -> Iterator[SyntaxNode]:
        return _present(self.value)


@dataclass
class Other(SyntaxNode):
    """Any grammar construct without a dedicated variant (if, for, class, ...)."""

    kind: ClassVar[str] = "other"
    type: str = ""
    nodes: list[SyntaxNode] = field(default_factory=list)

    def children(self) -> Iterator[SyntaxNode]:
        return iter(self.nodes)


# ── Traversal ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScopeContext:
    ancestors: tuple[str, ...] = ()
    top_level: bool = True         # cleared inside deferred bodies, never set again
    has_destination: bool = False  # value is bound or otherwise retained
    callee: bool = False           # node is the callee of an invocation

    def enter(self, node: SyntaxNode, **changes: Any) -> ScopeContext:
        changes.setdefault("callee", False)
        return replace(self, ancestors=self.ancestors + (node.kind,), **changes)

    def deferred(self, node: SyntaxNode) -> ScopeContext:
        """Context for a body that does not run at module evaluation time."""
        return self.enter(node, top_level=False)


class NodeVisitor:
    """Dispatch ``visit(node, ctx)`` to ``visit_<kind>``; default walks children."""

    def visit(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        method = getattr(self, f"visit_{node.kind}", self.generic_visit)
        method(node, ctx)

    def generic_visit(self, node: SyntaxNode, ctx: ScopeContext) -> None:
        if not ctx.top_level:
            return
        inner = ctx.enter(node)
        for child in node.children():
            self.visit(child, inner)
