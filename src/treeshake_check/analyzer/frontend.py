"""tree-sitter front end: JavaScript module text -> SyntaxNode tree + token records.

The record sequence merges comments with every other leaf token in source order,
leaving out the parentheses of parenthesized expressions. Purity annotations are
matched against it by index, so "adjacent" means no token sits between the
comment and the expression; `/* @__PURE__ */ (f())` still annotates `f()`.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_left
from collections.abc import Callable
from dataclasses import dataclass, field

import tree_sitter_javascript as tsjs
from tree_sitter import Language, Node, Parser, Tree

from treeshake_check.analyzer.nodes import (
    ArrayLiteral,
    AssignmentExpression,
    BinaryExpression,
    ClassFieldInit,
    Comment,
    ConstructionExpression,
    ExpressionStatement,
    FunctionLike,
    Identifier,
    ImportDeclaration,
    InvocationExpression,
    MemberAccessExpression,
    ObjectLiteral,
    Other,
    Program,
    PropertyEntry,
    Span,
    SyntaxNode,
    VariableDeclaration,
    VariableDeclarator,
)
from treeshake_check.errors import ModuleParseError

log = logging.getLogger(__name__)

JS_LANG = Language(tsjs.language())

# `/* @__PURE__ */` or `/* #__PURE__ */`, in block or line comments
PURE_ANNOTATION_RE = re.compile(r"[@#]__PURE__")

_FUNCTION_TYPES = frozenset({
    "function_declaration", "function_expression", "function",
    "generator_function_declaration", "generator_function",
    "arrow_function", "method_definition",
})

_IDENTIFIER_TYPES = frozenset({
    "identifier", "property_identifier", "shorthand_property_identifier",
    "private_property_identifier",
})

_PARENS = frozenset({"(", ")"})


@dataclass(frozen=True)
class Record:
    """One leaf token or comment, in source order."""
    start: int
    end: int
    is_comment: bool = False
    is_pure: bool = False


@dataclass
class ParsedModule:
    source: str
    program: Program
    records: list[Record] = field(default_factory=list)
    _starts: list[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self._starts = [rec.start for rec in self.records]

    def preceding_record(self, node: SyntaxNode) -> tuple[int, Record] | None:
        """Return (index, record) immediately before the first token of ``node``.

        A node may open with a parenthesis that is not a record; its first
        record is then the first one after its start.
        """
        idx = bisect_left(self._starts, node.span.start)
        if idx == 0:
            return None
        return idx - 1, self.records[idx - 1]


def parse_tree(source: str) -> Tree:
    parser = Parser(JS_LANG)
    return parser.parse(source.encode("utf-8"))


def first_error(root: Node) -> Node | None:
    """Depth-first search for the first ERROR or MISSING node."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def check_syntax(tree: Tree, source_bytes: bytes) -> None:
    """Raise ModuleParseError at the first syntax error in ``tree``."""
    if not tree.root_node.has_error:
        return
    bad = first_error(tree.root_node)
    if bad is None:
        raise ModuleParseError("Invalid JavaScript module")
    line, column = _position(source_bytes, bad)
    what = f"missing {bad.type}" if bad.is_missing else "unexpected token"
    raise ModuleParseError(f"Invalid JavaScript module: {what}", line, column)


def parse_module(source: str, *, strict: bool = False) -> ParsedModule:
    """Parse JavaScript module text into a SyntaxNode tree.

    Args:
        source: Module source text.
        strict: Raise ModuleParseError on syntax errors instead of
                analyzing whatever tree-sitter recovered.
    """
    data = source.encode("utf-8")
    tree = parse_tree(source)
    if strict:
        check_syntax(tree, data)
    elif tree.root_node.has_error:
        log.warning("Module has syntax errors; analyzing the recovered tree")

    builder = _Builder(data)
    program = builder.program(tree.root_node)
    return ParsedModule(source=source, program=program, records=_collect_records(tree.root_node))


def _collect_records(root: Node) -> list[Record]:
    records: list[Record] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "comment":
            text = node.text.decode("utf-8", errors="replace")
            records.append(Record(
                node.start_byte, node.end_byte, is_comment=True,
                is_pure=bool(PURE_ANNOTATION_RE.search(text)),
            ))
        elif node.child_count == 0:
            if not node.is_missing and node.end_byte > node.start_byte:
                records.append(Record(node.start_byte, node.end_byte))
        else:
            children = node.children
            if node.type == "parenthesized_expression":
                children = [c for c in children if c.type not in _PARENS]
            stack.extend(reversed(children))
    records.sort(key=lambda r: r.start)
    return records


def _position(data: bytes, node: Node) -> tuple[int, int]:
    """1-based (line, column) of ``node``; column counts characters."""
    row, byte_col = node.start_point[0], node.start_point[1]
    line_start = node.start_byte - byte_col
    column = len(data[line_start:node.start_byte].decode("utf-8", errors="replace"))
    return row + 1, column + 1


class _Builder:
    """Converts tree-sitter nodes into SyntaxNode variants."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.comments: list[Comment] = []
        self._converters: dict[str, Callable[[Node], SyntaxNode]] = {
            "import_statement": self._import,
            "expression_statement": self._expression_statement,
            "lexical_declaration": self._declaration,
            "variable_declaration": self._declaration,
            "variable_declarator": self._declarator,
            "assignment_expression": self._assignment,
            "augmented_assignment_expression": self._assignment,
            "binary_expression": self._binary,
            "object": self._object,
            "object_pattern": self._object,
            "pair": self._pair,
            "pair_pattern": self._pair,
            "shorthand_property_identifier": self._shorthand,
            "array": self._array,
            "call_expression": self._call,
            "new_expression": self._new,
            "member_expression": self._member,
            "subscript_expression": self._subscript,
            "field_definition": self._field,
            "parenthesized_expression": self._parenthesized,
            "export_statement": self._export,
        }

    def span(self, node: Node) -> Span:
        line, column = _position(self.data, node)
        return Span(line, column, node.start_byte, node.end_byte)

    def text(self, node: Node) -> str:
        return node.text.decode("utf-8", errors="replace")

    def program(self, root: Node) -> Program:
        body = self.convert_all(root.children)
        comments = sorted(self.comments, key=lambda c: c.span.start)
        return Program(self.span(root), body=body, comments=comments)

    def convert(self, node: Node | None) -> SyntaxNode | None:
        if node is None:
            return None
        if node.type in _FUNCTION_TYPES:
            return self._function(node)
        if node.type in _IDENTIFIER_TYPES:
            return Identifier(self.span(node), name=self.text(node))
        converter = self._converters.get(node.type)
        if converter is not None:
            return converter(node)
        return Other(self.span(node), type=node.type, nodes=self.convert_all(node.children))

    def convert_all(self, nodes: list[Node]) -> list[SyntaxNode]:
        out: list[SyntaxNode] = []
        for child in nodes:
            if child.type == "comment":
                self.comments.append(Comment(self.span(child), text=self.text(child)))
                continue
            if not child.is_named:
                continue
            converted = self.convert(child)
            if converted is not None:
                out.append(converted)
        return out

    # ── Statements ──────────────────────────────────────────────────────

    def _import(self, node: Node) -> SyntaxNode:
        src = node.child_by_field_name("source")
        source = self.text(src).strip("'\"") if src is not None else None
        self.convert_all(node.children)  # collect comments only
        return ImportDeclaration(self.span(node), source=source)

    def _expression_statement(self, node: Node) -> SyntaxNode:
        inner = self.convert_all(node.children)
        expression = inner[0] if len(inner) == 1 else None
        if expression is None and inner:
            expression = Other(self.span(node), type="sequence", nodes=inner)
        return ExpressionStatement(self.span(node), expression=expression)

    def _declaration(self, node: Node) -> SyntaxNode:
        declarators = [c for c in self.convert_all(node.children) if isinstance(c, VariableDeclarator)]
        return VariableDeclaration(self.span(node), declarators=declarators)

    def _declarator(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        return VariableDeclarator(
            self.span(node),
            target=self.convert(node.child_by_field_name("name")),
            init=self.convert(node.child_by_field_name("value")),
        )

    def _export(self, node: Node) -> SyntaxNode:
        value = node.child_by_field_name("value")
        if value is not None:
            # export default <expression>: binds the module's default export
            self._comments_between(node)
            return VariableDeclarator(self.span(node), target=None, init=self.convert(value))
        return Other(self.span(node), type=node.type, nodes=self.convert_all(node.children))

    # ── Expressions ─────────────────────────────────────────────────────

    def _assignment(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        return AssignmentExpression(
            self.span(node),
            target=self.convert(node.child_by_field_name("left")),
            value=self.convert(node.child_by_field_name("right")),
        )

    def _binary(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        op = node.child_by_field_name("operator")
        return BinaryExpression(
            self.span(node),
            operator=self.text(op) if op is not None else "",
            left=self.convert(node.child_by_field_name("left")),
            right=self.convert(node.child_by_field_name("right")),
        )

    def _object(self, node: Node) -> SyntaxNode:
        return ObjectLiteral(self.span(node), entries=self.convert_all(node.children))

    def _pair(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        key = node.child_by_field_name("key")
        computed = key is not None and key.type == "computed_property_name"
        return PropertyEntry(
            self.span(node),
            key=self.convert(key),
            value=self.convert(node.child_by_field_name("value")),
            computed=computed,
        )

    def _shorthand(self, node: Node) -> SyntaxNode:
        return PropertyEntry(self.span(node), key=Identifier(self.span(node), name=self.text(node)))

    def _array(self, node: Node) -> SyntaxNode:
        return ArrayLiteral(self.span(node), elements=self.convert_all(node.children))

    def _call(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        return InvocationExpression(
            self.span(node),
            callee=self.convert(node.child_by_field_name("function")),
            arguments=self._arguments(node),
        )

    def _new(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        return ConstructionExpression(
            self.span(node),
            callee=self.convert(node.child_by_field_name("constructor")),
            arguments=self._arguments(node),
        )

    def _arguments(self, node: Node) -> list[SyntaxNode]:
        args = node.child_by_field_name("arguments")
        if args is None:
            return []
        if args.type == "arguments":
            return self.convert_all(args.children)
        # tagged template: tag`...`
        converted = self.convert(args)
        return [converted] if converted is not None else []

    def _member(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        return MemberAccessExpression(
            self.span(node),
            object=self.convert(node.child_by_field_name("object")),
            property=self.convert(node.child_by_field_name("property")),
        )

    def _subscript(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        return MemberAccessExpression(
            self.span(node),
            object=self.convert(node.child_by_field_name("object")),
            property=self.convert(node.child_by_field_name("index")),
            computed=True,
        )

    def _parenthesized(self, node: Node) -> SyntaxNode:
        inner = self.convert_all(node.children)
        if len(inner) == 1:
            return inner[0]
        return Other(self.span(node), type=node.type, nodes=inner)

    # ── Deferred bodies ─────────────────────────────────────────────────

    def _function(self, node: Node) -> SyntaxNode:
        self._comments_between(node)
        name_node = node.child_by_field_name("name")
        key = None
        name = None
        if name_node is not None:
            if name_node.type == "computed_property_name":
                key = self.convert(name_node)
            else:
                name = self.text(name_node)
        body: list[SyntaxNode] = []
        for field_name in ("parameters", "parameter", "body"):
            part = node.child_by_field_name(field_name)
            if part is not None:
                converted = self.convert(part)
                if converted is not None:
                    body.append(converted)
        return FunctionLike(self.span(node), name=name, key=key, body=body)

    def _field(self, node: Node) -> SyntaxNode:
        static = any(c.type == "static" for c in node.children)
        prop = node.child_by_field_name("property")
        key = None
        if prop is not None and prop.type == "computed_property_name":
            key = self.convert(prop)
        self._comments_between(node)
        return ClassFieldInit(
            self.span(node),
            static=static,
            key=key,
            value=self.convert(node.child_by_field_name("value")),
        )

    def _comments_between(self, node: Node) -> None:
        """Collect comments that sit directly under ``node`` between its fields."""
        for child in node.children:
            if child.type == "comment":
                self.comments.append(Comment(self.span(child), text=self.text(child)))
