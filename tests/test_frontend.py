"""Tests for the tree-sitter front end and the node visitor."""

from __future__ import annotations

import textwrap

import pytest

from treeshake_check.analyzer.frontend import parse_module
from treeshake_check.analyzer.nodes import (
    ClassFieldInit,
    ConstructionExpression,
    ExpressionStatement,
    FunctionLike,
    Identifier,
    ImportDeclaration,
    InvocationExpression,
    MemberAccessExpression,
    NodeVisitor,
    Other,
    ScopeContext,
    VariableDeclaration,
    VariableDeclarator,
)
from treeshake_check.errors import ModuleParseError


def _src(code: str) -> str:
    return textwrap.dedent(code).lstrip("\n")


class TestConversion:
    def test_statement_kinds(self):
        module = parse_module(_src("""
            import { a } from './a.js'
            const b = 1
            a.run()
        """))
        body = module.program.body
        assert [type(n) for n in body] == [ImportDeclaration, VariableDeclaration, ExpressionStatement]
        assert body[0].source == "./a.js"

    def test_call_and_member(self):
        module = parse_module("a.b(1, 2)")
        call = module.program.body[0].expression
        assert isinstance(call, InvocationExpression)
        assert isinstance(call.callee, MemberAccessExpression)
        assert isinstance(call.callee.object, Identifier)
        assert call.callee.property.name == "b"
        assert len(call.arguments) == 2

    def test_new_is_construction(self):
        module = parse_module("new Foo")
        node = module.program.body[0].expression
        assert isinstance(node, ConstructionExpression)
        assert node.kind == "construction"
        assert node.arguments == []

    def test_parentheses_are_transparent(self):
        module = parse_module("((f()))")
        assert isinstance(module.program.body[0].expression, InvocationExpression)

    def test_declarator_fields(self):
        module = parse_module("let x = f(), y")
        decl = module.program.body[0]
        assert [d.target.name for d in decl.declarators] == ["x", "y"]
        assert isinstance(decl.declarators[0].init, InvocationExpression)
        assert decl.declarators[1].init is None

    def test_export_default_expression_is_binding(self):
        module = parse_module("export default make()")
        node = module.program.body[0]
        assert isinstance(node, VariableDeclarator)
        assert node.target is None

    def test_functions_and_fields(self):
        module = parse_module(_src("""
            function f() {}
            const g = () => 1
            class A { static s = 1; i = 2; m() {} }
        """))
        assert isinstance(module.program.body[0], FunctionLike)
        assert module.program.body[0].name == "f"
        assert isinstance(module.program.body[1].declarators[0].init, FunctionLike)

        cls = module.program.body[2]
        assert isinstance(cls, Other)
        fields = []
        methods = []
        stack = list(cls.children())
        while stack:
            n = stack.pop()
            if isinstance(n, ClassFieldInit):
                fields.append(n)
            elif isinstance(n, FunctionLike):
                methods.append(n)
            else:
                stack.extend(n.children())
        assert sorted(f.static for f in fields) == [False, True]
        assert [m.name for m in methods] == ["m"]

    def test_positions_are_one_based(self):
        module = parse_module("const a = 1\n  f()")
        stmt = module.program.body[1]
        assert (stmt.span.line, stmt.span.column) == (2, 3)


class TestComments:
    def test_comments_collected_in_order(self):
        module = parse_module(_src("""
            // first
            const x = /* @__PURE__ */ f()
            /* last */
        """))
        assert [c.text for c in module.program.comments] == [
            "// first", "/* @__PURE__ */", "/* last */",
        ]

    def test_pure_records(self):
        module = parse_module("const x = /* @__PURE__ */ f() /* #__PURE__ */")
        pure = [r for r in module.records if r.is_pure]
        assert len(pure) == 2
        assert all(r.is_comment for r in pure)

    def test_preceding_record(self):
        module = parse_module("const x = /* @__PURE__ */ f()")
        call = module.program.body[0].declarators[0].init
        index, record = module.preceding_record(call)
        assert record.is_pure
        assert module.records[index + 1].start == call.span.start

    def test_parentheses_are_not_records(self):
        module = parse_module("const x = /* @__PURE__ */ (f())")
        call = module.program.body[0].declarators[0].init
        index, record = module.preceding_record(call)
        assert record.is_pure
        outer = module.source.index("(")
        assert outer not in [r.start for r in module.records]
        assert module.records[index + 1].start == call.span.start

    def test_first_token_has_no_predecessor(self):
        module = parse_module("f()")
        assert module.preceding_record(module.program.body[0].expression) is None


class TestStrictParsing:
    def test_strict_raises_on_syntax_error(self):
        with pytest.raises(ModuleParseError):
            parse_module("function {", strict=True)

    def test_lenient_parses_what_it_can(self):
        module = parse_module("function {")
        assert module.program is not None

    def test_strict_accepts_valid_module(self):
        module = parse_module("import 'a';\nexport const b = 1;", strict=True)
        assert len(module.program.body) == 2


class TestScopeContext:
    def test_enter_records_ancestors(self):
        module = parse_module("f()")
        stmt = module.program.body[0]
        ctx = ScopeContext().enter(module.program).enter(stmt, has_destination=True)
        assert ctx.ancestors == ("program", "expression_statement")
        assert ctx.has_destination
        assert ctx.top_level

    def test_top_level_is_never_restored(self):
        module = parse_module("f()")
        stmt = module.program.body[0]
        ctx = ScopeContext().deferred(stmt).enter(stmt)
        assert ctx.top_level is False

    def test_callee_flag_does_not_propagate(self):
        module = parse_module("f()")
        stmt = module.program.body[0]
        ctx = ScopeContext().enter(stmt, callee=True).enter(stmt)
        assert ctx.callee is False


class _KindCounter(NodeVisitor):
    def __init__(self):
        self.kinds: list[str] = []

    def generic_visit(self, node, ctx):
        self.kinds.append(node.kind)
        super().generic_visit(node, ctx)

    def visit_function_like(self, node, ctx):
        self.kinds.append(node.kind)
        super().generic_visit(node, ctx.deferred(node))


def test_visitor_dispatch_stops_at_deferred_bodies():
    module = parse_module("a.b(); function f() { g() }")
    counter = _KindCounter()
    counter.visit(module.program, ScopeContext())
    assert counter.kinds[0] == "program"
    assert "invocation" in counter.kinds
    assert "member_access" in counter.kinds
    assert counter.kinds.count("invocation") == 1
    assert counter.kinds[-1] == "function_like"
