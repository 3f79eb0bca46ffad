import pytest
from hypothesis import given, settings, strategies as st

from resilient.errors import ResilientLexError, ResilientParseError
from resilient.nodes import (
    Program, Block, Function, Parameter, LiveBlock, Assert, LetStatement,
    AssignStatement, ReturnStatement, IfStatement, ExpressionStatement,
    Identifier, IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, CallExpression,
)
from resilient.reader.parser import parse_source, MAIN_PARAMS_HINT


def _expr(parse_ok, source):
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def I(value):
    return IntegerLiteral(value)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1 + 2 * 3", InfixExpression(I(1), "+", InfixExpression(I(2), "*", I(3)))),
        ("1 * 2 + 3", InfixExpression(InfixExpression(I(1), "*", I(2)), "+", I(3))),
        ("1 - 2 - 3", InfixExpression(InfixExpression(I(1), "-", I(2)), "-", I(3))),
        ("(1 + 2) * 3", InfixExpression(InfixExpression(I(1), "+", I(2)), "*", I(3))),
        ("1 + 2 < 4 == true", InfixExpression(
            InfixExpression(InfixExpression(I(1), "+", I(2)), "<", I(4)), "==", BooleanLiteral(True))),
        ("a <= b", InfixExpression(Identifier("a"), "<=", Identifier("b"))),
        ("-1 * 2", InfixExpression(PrefixExpression("-", I(1)), "*", I(2))),
        ("2 * -x", InfixExpression(I(2), "*", PrefixExpression("-", Identifier("x")))),
        ("-f(1)", PrefixExpression("-", CallExpression(Identifier("f"), [I(1)]))),
        ("f(1, 2) + 3", InfixExpression(CallExpression(Identifier("f"), [I(1), I(2)]), "+", I(3))),
        ("f(g(1))", CallExpression(Identifier("f"), [CallExpression(Identifier("g"), [I(1)])])),
        ("f()", CallExpression(Identifier("f"), [])),
        ("2.5", FloatLiteral(2.5)),
        ('"s"', StringLiteral("s")),
        ("false", BooleanLiteral(False)),
    ]
)
def test_expression_precedence(parse_ok, source, expected):
    assert _expr(parse_ok, source) == expected


def test_function_declaration(parse_ok):
    program = parse_ok("fn add(int a, float b) { return a + b; }")
    assert program == Program([
        Function(
            "add",
            [Parameter("int", "a"), Parameter("float", "b")],
            Block([ReturnStatement(InfixExpression(Identifier("a"), "+", Identifier("b")))]),
        )
    ])
    assert (program.statements[0].line, program.statements[0].column) == (1, 1)


def test_let_assign_and_static(parse_ok):
    program = parse_ok("let x = 1; x = x + 1; static let s = 0;")
    assert program.statements == [
        LetStatement("x", I(1)),
        AssignStatement("x", InfixExpression(Identifier("x"), "+", I(1))),
        LetStatement("s", I(0), is_static=True),
    ]


def test_semicolons_are_optional(parse_ok):
    program = parse_ok("let x = 1\nlet y = 2\nx")
    assert len(program.statements) == 3


def test_live_and_assert(parse_ok):
    program = parse_ok('live { assert(x > 0, "positive"); assert(true) }')
    assert program.statements == [
        LiveBlock(Block([
            Assert(InfixExpression(Identifier("x"), ">", I(0)), StringLiteral("positive")),
            Assert(BooleanLiteral(True)),
        ]))
    ]


@pytest.mark.parametrize("source", ["if (x) { 1 } else { 2 }", "if x { 1 } else { 2 }"])
def test_if_with_or_without_parens(parse_ok, source):
    program = parse_ok(source)
    assert program.statements == [
        IfStatement(
            Identifier("x"),
            Block([ExpressionStatement(I(1))]),
            Block([ExpressionStatement(I(2))]),
        )
    ]


def test_else_if_chains(parse_ok):
    program = parse_ok("if a { 1 } else if b { 2 } else { 3 }")
    stmt = program.statements[0]
    assert isinstance(stmt, IfStatement)
    inner = stmt.alternative.statements[0]
    assert isinstance(inner, IfStatement)
    assert inner.condition == Identifier("b")
    assert inner.alternative == Block([ExpressionStatement(I(3))])


def test_bare_return(parse_ok):
    program = parse_ok("fn f(int a) { return; }")
    assert program.statements[0].body.statements == [ReturnStatement(None)]


def test_empty_parameter_list_for_main():
    program, errors = parse_source("fn main() { 1 }")
    assert len(errors) >= 1
    assert MAIN_PARAMS_HINT in errors[0].message
    assert "fn main(int dummy)" in str(errors[0])


def test_empty_parameter_list_for_other_functions():
    _, errors = parse_source("fn f() { 1 }")
    assert "must declare at least one parameter" in errors[0].message


def test_parameters_need_type_and_name():
    _, errors = parse_source("fn f(a) { a }")
    assert errors
    assert "Expected parameter name after type 'a'" in errors[0].message


def test_recovers_from_two_independent_errors():
    program, errors = parse_source("fn (int x) { return x; } let y = 1;")
    assert len(errors) == 2
    assert all(isinstance(e, ResilientParseError) for e in errors)
    assert "Expected identifier after 'fn'" in errors[0].message
    assert program.statements == [
        ReturnStatement(Identifier("x")),
        LetStatement("y", I(1)),
    ]


def test_recovery_stops_at_statement_keywords():
    program, errors = parse_source("let = 5\nlet y = 2;")
    assert len(errors) == 1
    assert program.statements == [LetStatement("y", I(2))]


def test_recovery_inside_block_keeps_the_block():
    program, errors = parse_source("fn f(int a) { let = 1; return a; } f(1);")
    assert len(errors) == 1
    assert isinstance(program.statements[0], Function)
    assert program.statements[0].body.statements == [ReturnStatement(Identifier("a"))]
    assert program.statements[1] == ExpressionStatement(CallExpression(Identifier("f"), [I(1)]))


def test_unterminated_block_is_reported():
    _, errors = parse_source("live { let x = 1;")
    assert len(errors) == 1
    assert "Unterminated block opened at line 1, column 6" in errors[0].message


def test_parse_error_carries_position():
    _, errors = parse_source("let x = 1;\nlet 5 = x;")
    err = errors[0]
    assert (err.line, err.column) == (2, 5)
    assert err.token.value == 5
    assert str(err).startswith("Parse error at line 2, column 5")


def test_static_requires_let():
    _, errors = parse_source("static x = 1;")
    assert "Expected 'let' after 'static'" in errors[0].message


def test_lex_errors_are_not_recovered():
    with pytest.raises(ResilientLexError):
        parse_source("let x = !true;")


def test_deep_nesting_is_a_parse_error():
    source = "(" * 3000 + "1" + ")" * 3000 + ";"
    program, errors = parse_source(source + " let ok = 2;")
    assert any("nested too deeply" in e.message for e in errors)
    assert all(isinstance(e, ResilientParseError) for e in errors)
    assert program.statements[-1] == LetStatement("ok", I(2))


SOURCE_ALPHABET = "fnletsaicvrudix(){};,=+-*/<>\"1.2 \n"


@settings(max_examples=200)
@given(st.text(alphabet=SOURCE_ALPHABET, max_size=80))
def test_parser_never_crashes(source):
    try:
        program, errors = parse_source(source)
    except ResilientLexError:
        return
    assert isinstance(program, Program)
    assert all(isinstance(e, ResilientParseError) for e in errors)
