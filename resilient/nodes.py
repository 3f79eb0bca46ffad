"""AST for Resilient programs.

A closed set of node classes. Composite nodes own their children; the
evaluator and the type checker dispatch on the node class with `match`.
Source positions are carried for diagnostics only and never take part in
equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass
class Parameter:
    type_name: str
    name: str


@dataclass
class Program:
    statements: list[Statement]


@dataclass
class Block:
    statements: list[Statement]


@dataclass
class Function:
    name: str
    parameters: list[Parameter]
    body: Block
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass
class LiveBlock:
    body: Block


@dataclass
class Assert:
    condition: Expression
    message: Optional[Expression] = None


@dataclass
class LetStatement:
    name: str
    value: Expression
    is_static: bool = False
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass
class AssignStatement:
    name: str
    value: Expression


@dataclass
class ReturnStatement:
    # None for a bare `return;`
    value: Optional[Expression]


@dataclass
class IfStatement:
    condition: Expression
    consequence: Block
    alternative: Optional[Block] = None


@dataclass
class ExpressionStatement:
    expression: Expression


@dataclass
class Identifier:
    name: str


@dataclass
class IntegerLiteral:
    value: int


@dataclass
class FloatLiteral:
    value: float


@dataclass
class StringLiteral:
    value: str


@dataclass
class BooleanLiteral:
    value: bool


@dataclass
class PrefixExpression:
    operator: str
    right: Expression


@dataclass
class InfixExpression:
    left: Expression
    operator: str
    right: Expression


@dataclass
class CallExpression:
    function: Expression
    arguments: list[Expression]


Expression = Union[
    Identifier,
    IntegerLiteral,
    FloatLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    CallExpression,
]

Statement = Union[
    Function,
    LiveBlock,
    Assert,
    Block,
    LetStatement,
    AssignStatement,
    ReturnStatement,
    IfStatement,
    ExpressionStatement,
]

Node = Union[Program, Statement, Expression]
