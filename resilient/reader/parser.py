"""
  Resilient Parser

- Recursive descent for statements, precedence climbing for expressions
- A malformed statement raises ResilientParseError internally; the statement
  loop records it and synchronizes to the next plausible statement boundary,
  so one pass can report several independent syntax errors
- Lexical errors are not recovered: ResilientLexError propagates to the caller
- Input nested deeper than the Python stack allows is reported as a parse
  error of the statement it occurs in

Binding powers (higher binds tighter):

    ==  !=          2
    <  >  <=  >=    3
    +  -            4
    *  /            5
    call (          6
"""

from __future__ import annotations

from typing import Optional

from resilient.errors import ResilientParseError
from resilient.reader.lexer import (
    Lexer, Token, IDENT, INT, FLOAT, STRING, BOOL, EOF, STATEMENT_KEYWORDS,
)
from resilient.nodes import (
    Program, Block, Function, Parameter, LiveBlock, Assert, LetStatement,
    AssignStatement, ReturnStatement, IfStatement, ExpressionStatement,
    Identifier, IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, CallExpression, Expression, Statement,
)

LOWEST = 0
CALL = 6
# Operand of a unary minus: tighter than * and /, looser than a call
PREFIX = 5

PRECEDENCES: dict[str, int] = {
    "eq": 2,
    "not_eq": 2,
    "lt": 3,
    "gt": 3,
    "le": 3,
    "ge": 3,
    "plus": 4,
    "minus": 4,
    "star": 5,
    "slash": 5,
    "lparen": CALL,
}

OPERATORS: dict[str, str] = {
    "eq": "==",
    "not_eq": "!=",
    "lt": "<",
    "gt": ">",
    "le": "<=",
    "ge": ">=",
    "plus": "+",
    "minus": "-",
    "star": "*",
    "slash": "/",
}

MAIN_PARAMS_HINT = (
    "Functions in Resilient must have parameters, even if unused. "
    "Try: fn main(int dummy) { ... }"
)


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: list[ResilientParseError] = []
        self.current: Token = lexer.next_token()
        self.peek: Token = lexer.next_token()

    # ------------------------
    # Token helpers
    # ------------------------
    def advance(self) -> Token:
        tok = self.current
        self.current = self.peek
        self.peek = self.lexer.next_token()
        return tok

    def error(self, message: str, token: Optional[Token] = None) -> ResilientParseError:
        tok = token or self.current
        return ResilientParseError(message, tok, tok.line, tok.column)

    def expect(self, tok_type: str, message: str) -> Token:
        if self.current.type != tok_type:
            raise self.error(f"{message}, found {self.current}")
        return self.advance()

    def skip_semicolon(self) -> None:
        if self.current.type == "semicolon":
            self.advance()

    def synchronize(self, in_block: bool = False) -> None:
        """Skip to the next statement boundary after an error.

        Always moves past the offending token; stops after a consumed `;` or
        before a statement keyword. Inside a block it also stops before `}`.
        """
        if self.current.type != EOF:
            self.advance()
        while self.current.type != EOF:
            if self.current.type == "semicolon":
                self.advance()
                return
            if self.current.type in STATEMENT_KEYWORDS:
                return
            if in_block and self.current.type == "rbrace":
                return
            self.advance()

    # ------------------------
    # Statements
    # ------------------------
    def parse_program(self) -> Program:
        statements: list[Statement] = []
        while self.current.type != EOF:
            try:
                statements.append(self.parse_statement())
            except ResilientParseError as err:
                self.errors.append(err)
                self.synchronize()
            except RecursionError:
                self.errors.append(self.error("Expression nested too deeply"))
                self.synchronize()
        return Program(statements)

    def parse_statement(self) -> Statement:
        tok_type = self.current.type
        if tok_type == "fn":
            return self.parse_function()
        if tok_type == "let":
            return self.parse_let_statement()
        if tok_type == "static":
            return self.parse_static_let_statement()
        if tok_type == "return":
            return self.parse_return_statement()
        if tok_type == "live":
            return self.parse_live_block()
        if tok_type == "assert":
            return self.parse_assert()
        if tok_type == "if":
            return self.parse_if_statement()
        if tok_type == IDENT and self.peek.type == "assign":
            return self.parse_assign_statement()
        return self.parse_expression_statement()

    def parse_function(self) -> Function:
        fn_tok = self.advance()  # 'fn'
        if self.current.type != IDENT:
            raise self.error(f"Expected identifier after 'fn', found {self.current}")
        name = self.advance().value

        if self.current.type != "lparen":
            if name == "main":
                raise self.error(f"Expected '(' after function name 'main'. {MAIN_PARAMS_HINT}")
            raise self.error(f"Expected '(' after function name '{name}', found {self.current}")
        self.advance()

        parameters = self.parse_function_parameters(name)
        if self.current.type != "lbrace":
            raise self.error(f"Expected '{{' after function parameters, found {self.current}")
        body = self.parse_block()
        return Function(name, parameters, body, fn_tok.line, fn_tok.column)

    def parse_function_parameters(self, fn_name: str) -> list[Parameter]:
        """Parse `type name, type name ... )`; the opening paren is already consumed."""
        if self.current.type == "rparen":
            if fn_name == "main":
                raise self.error(f"Function 'main' has an empty parameter list. {MAIN_PARAMS_HINT}")
            raise self.error(
                f"Function '{fn_name}' must declare at least one parameter, "
                f"e.g. fn {fn_name}(int dummy)"
            )

        parameters: list[Parameter] = []
        while True:
            if self.current.type != IDENT:
                raise self.error(f"Expected parameter type, found {self.current}")
            type_name = self.advance().value
            if self.current.type != IDENT:
                raise self.error(f"Expected parameter name after type '{type_name}', found {self.current}")
            parameters.append(Parameter(type_name, self.advance().value))

            if self.current.type == "comma":
                self.advance()
                continue
            if self.current.type == "rparen":
                self.advance()
                return parameters
            raise self.error(f"Expected ',' or ')' after parameter, found {self.current}")

    def parse_block(self) -> Block:
        open_tok = self.expect("lbrace", "Expected '{'")
        statements: list[Statement] = []
        while self.current.type not in ("rbrace", EOF):
            try:
                statements.append(self.parse_statement())
            except ResilientParseError as err:
                self.errors.append(err)
                self.synchronize(in_block=True)
            except RecursionError:
                self.errors.append(self.error("Expression nested too deeply"))
                self.synchronize(in_block=True)
        if self.current.type == EOF:
            raise self.error(
                f"Unterminated block opened at line {open_tok.line}, column {open_tok.column}: expected '}}'"
            )
        self.advance()  # '}'
        return Block(statements)

    def parse_let_statement(self, is_static: bool = False, start: Optional[Token] = None) -> LetStatement:
        let_tok = self.advance()  # 'let'
        start = start or let_tok
        if self.current.type != IDENT:
            raise self.error(f"Expected identifier after 'let', found {self.current}")
        name = self.advance().value
        self.expect("assign", f"Expected '=' after '{name}' in let statement")
        value = self.parse_expression(LOWEST)
        self.skip_semicolon()
        return LetStatement(name, value, is_static, start.line, start.column)

    def parse_static_let_statement(self) -> LetStatement:
        static_tok = self.advance()  # 'static'
        if self.current.type != "let":
            raise self.error(f"Expected 'let' after 'static', found {self.current}")
        return self.parse_let_statement(is_static=True, start=static_tok)

    def parse_assign_statement(self) -> AssignStatement:
        name = self.advance().value
        self.advance()  # '='
        value = self.parse_expression(LOWEST)
        self.skip_semicolon()
        return AssignStatement(name, value)

    def parse_return_statement(self) -> ReturnStatement:
        self.advance()  # 'return'
        if self.current.type in ("semicolon", "rbrace", EOF):
            self.skip_semicolon()
            return ReturnStatement(None)
        value = self.parse_expression(LOWEST)
        self.skip_semicolon()
        return ReturnStatement(value)

    def parse_live_block(self) -> LiveBlock:
        self.advance()  # 'live'
        if self.current.type != "lbrace":
            raise self.error(f"Expected '{{' after 'live', found {self.current}")
        return LiveBlock(self.parse_block())

    def parse_assert(self) -> Assert:
        self.advance()  # 'assert'
        self.expect("lparen", "Expected '(' after 'assert'")
        condition = self.parse_expression(LOWEST)
        message = None
        if self.current.type == "comma":
            self.advance()
            message = self.parse_expression(LOWEST)
        self.expect("rparen", "Expected ')' after assert arguments")
        self.skip_semicolon()
        return Assert(condition, message)

    def parse_if_statement(self) -> IfStatement:
        self.advance()  # 'if'
        # `if (cond) {` and `if cond {` both work: parentheses are a grouped expression
        condition = self.parse_expression(LOWEST)
        if self.current.type != "lbrace":
            raise self.error(f"Expected '{{' after if condition, found {self.current}")
        consequence = self.parse_block()

        alternative = None
        if self.current.type == "else":
            self.advance()
            if self.current.type == "if":
                alternative = Block([self.parse_if_statement()])
            elif self.current.type == "lbrace":
                alternative = self.parse_block()
            else:
                raise self.error(f"Expected '{{' or 'if' after 'else', found {self.current}")
        return IfStatement(condition, consequence, alternative)

    def parse_expression_statement(self) -> ExpressionStatement:
        expr = self.parse_expression(LOWEST)
        self.skip_semicolon()
        return ExpressionStatement(expr)

    # ------------------------
    # Expressions
    # ------------------------
    def parse_expression(self, precedence: int) -> Expression:
        left = self.parse_prefix()
        while precedence < PRECEDENCES.get(self.current.type, LOWEST):
            if self.current.type == "lparen":
                left = self.parse_call_expression(left)
            else:
                left = self.parse_infix_expression(left)
        return left

    def parse_prefix(self) -> Expression:
        tok = self.current
        if tok.type == IDENT:
            self.advance()
            return Identifier(tok.value)
        if tok.type == INT:
            self.advance()
            return IntegerLiteral(tok.value)
        if tok.type == FLOAT:
            self.advance()
            return FloatLiteral(tok.value)
        if tok.type == STRING:
            self.advance()
            return StringLiteral(tok.value)
        if tok.type == BOOL:
            self.advance()
            return BooleanLiteral(tok.value)
        if tok.type == "minus":
            self.advance()
            return PrefixExpression("-", self.parse_expression(PREFIX))
        if tok.type == "lparen":
            self.advance()
            # grouping resets precedence
            expr = self.parse_expression(LOWEST)
            self.expect("rparen", "Expected ')'")
            return expr
        raise self.error(f"No prefix parse function for {tok}")

    def parse_infix_expression(self, left: Expression) -> InfixExpression:
        op_tok = self.advance()
        right = self.parse_expression(PRECEDENCES[op_tok.type])
        return InfixExpression(left, OPERATORS[op_tok.type], right)

    def parse_call_expression(self, function: Expression) -> CallExpression:
        self.advance()  # '('
        arguments: list[Expression] = []
        if self.current.type == "rparen":
            self.advance()
            return CallExpression(function, arguments)
        arguments.append(self.parse_expression(LOWEST))
        while self.current.type == "comma":
            self.advance()
            arguments.append(self.parse_expression(LOWEST))
        self.expect("rparen", "Expected ')' after arguments")
        return CallExpression(function, arguments)


def parse(lexer: Lexer) -> tuple[Program, list[ResilientParseError]]:
    parser = Parser(lexer)
    program = parser.parse_program()
    return program, parser.errors


def parse_source(text: str) -> tuple[Program, list[ResilientParseError]]:
    """Parse source text into a best-effort Program plus any parse errors.

    A ResilientLexError is not recovered and propagates to the caller.
    """
    return parse(Lexer(text))
