"""Static type checker for Resilient.

A second walk over the AST, mirroring the evaluator but over an environment
of StaticTypes. It never evaluates anything and never touches evaluator
state; callers run it on a freshly parsed Program before evaluation.

Rules in brief:
- parameter types come from {int, float, string, bool, void}, or "" for any
- a function returns the type of the last statement of its body
- if/assert conditions must be bool (or any); assert messages string (or any)
- if/else branches must agree unless one side is any
- arithmetic promotes int/float mixes to float; `+` also joins two strings;
  comparisons need matching (or numeric, or any) operands
- calls check arity and argument types; calling `any` yields `any`
"""

from __future__ import annotations

from resilient.builtin.env_builtin import register_types
from resilient.errors import ResilientTypeError, ResilientUnboundName
from resilient.nodes import (
    Program, Block, Function, Parameter, LiveBlock, Assert, LetStatement,
    AssignStatement, ReturnStatement, IfStatement, ExpressionStatement,
    Identifier, IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, CallExpression, Node,
)
from resilient.types.environment import Environment
from resilient.types.static_types import (
    StaticType, FunctionType, INT, FLOAT, STRING, BOOL, VOID, ANY, NUMERIC,
    TYPE_NAMES, compatible,
)

ARITHMETIC = ("+", "-", "*", "/")
COMPARISON = ("==", "!=", "<", ">", "<=", ">=")


class TypeChecker:
    def __init__(self):
        self.env: Environment[StaticType] = Environment()
        register_types(self.env)

    def check_program(self, program: Program) -> StaticType:
        if not isinstance(program, Program):
            raise ResilientTypeError("Expected program node")
        try:
            return self.check_statements(program.statements, self.env)
        except RecursionError as exc:
            raise ResilientTypeError("Program is nested too deeply to type-check") from exc

    def check_statements(self, statements, env: Environment[StaticType]) -> StaticType:
        result: StaticType = VOID
        for statement in statements:
            result = self.check(statement, env)
        return result

    def check(self, node: Node, env: Environment[StaticType]) -> StaticType:
        match node:
            case Program(statements):
                return self.check_statements(statements, env)
            case Block(statements):
                return self.check_statements(statements, env)
            case Function(name, parameters, body):
                return self.check_function(name, parameters, body, env)
            case LiveBlock(body):
                return self.check(body, env.enclosed())
            case Assert(condition, message):
                cond_type = self.check(condition, env)
                if not compatible(cond_type, BOOL):
                    raise ResilientTypeError(f"Assert condition must be a boolean, got {cond_type}")
                if message is not None:
                    msg_type = self.check(message, env)
                    if not compatible(msg_type, STRING):
                        raise ResilientTypeError(f"Assert message must be a string, got {msg_type}")
                return VOID
            case LetStatement(name, value):
                env.define(name, self.check(value, env))
                return VOID
            case AssignStatement(name, value):
                value_type = self.check(value, env)
                target_type = self.lookup(name, env)
                if not compatible(target_type, value_type):
                    raise ResilientTypeError(
                        f"Cannot assign {value_type} to '{name}' of type {target_type}"
                    )
                return VOID
            case ReturnStatement(value):
                return VOID if value is None else self.check(value, env)
            case IfStatement(condition, consequence, alternative):
                return self.check_if(condition, consequence, alternative, env)
            case ExpressionStatement(expression):
                return self.check(expression, env)
            case Identifier(name):
                return self.lookup(name, env)
            case IntegerLiteral():
                return INT
            case FloatLiteral():
                return FLOAT
            case StringLiteral():
                return STRING
            case BooleanLiteral():
                return BOOL
            case PrefixExpression(op, right):
                return self.check_prefix(op, self.check(right, env))
            case InfixExpression(left, op, right):
                return self.check_infix(op, self.check(left, env), self.check(right, env))
            case CallExpression(function, arguments):
                return self.check_call(function, arguments, env)
        raise ResilientTypeError(f"Cannot type-check node {type(node).__name__}")

    @staticmethod
    def lookup(name: str, env: Environment[StaticType]) -> StaticType:
        try:
            return env.lookup(name)
        except ResilientUnboundName as exc:
            raise ResilientTypeError(f"Undefined variable: {name}") from exc

    @staticmethod
    def parse_type_name(name: str) -> StaticType:
        try:
            return TYPE_NAMES[name]
        except KeyError:
            raise ResilientTypeError(f"Unknown type: {name}") from None

    def check_function(
        self, name: str, parameters: list[Parameter], body: Block, env: Environment[StaticType]
    ) -> StaticType:
        param_types = tuple(self.parse_type_name(p.type_name) for p in parameters)
        # provisional binding so the body can call itself
        env.define(name, FunctionType(param_types, ANY))

        fn_env = env.enclosed()
        for param, param_type in zip(parameters, param_types):
            fn_env.define(param.name, param_type)
        return_type = self.check(body, fn_env)

        env.define(name, FunctionType(param_types, return_type))
        return VOID

    def check_if(self, condition, consequence: Block, alternative: Block | None, env) -> StaticType:
        cond_type = self.check(condition, env)
        if not compatible(cond_type, BOOL):
            raise ResilientTypeError(f"If condition must be a boolean, got {cond_type}")
        consequence_type = self.check(consequence, env)
        if alternative is not None:
            alternative_type = self.check(alternative, env)
            if not compatible(consequence_type, alternative_type):
                raise ResilientTypeError(
                    f"If branches have incompatible types: {consequence_type} and {alternative_type}"
                )
        return consequence_type

    @staticmethod
    def check_prefix(op: str, right: StaticType) -> StaticType:
        if op == "!":
            if not compatible(right, BOOL):
                raise ResilientTypeError(f"Cannot apply '!' to {right}")
            return BOOL
        if op == "-":
            if right not in NUMERIC and right != ANY:
                raise ResilientTypeError(f"Cannot apply '-' to {right}")
            return right
        raise ResilientTypeError(f"Unknown prefix operator: {op}")

    @staticmethod
    def check_infix(op: str, left: StaticType, right: StaticType) -> StaticType:
        if op in ARITHMETIC:
            if op == "+" and STRING in (left, right) and compatible(left, right):
                return STRING
            if left == ANY or right == ANY:
                if left in (*NUMERIC, ANY) and right in (*NUMERIC, ANY):
                    return ANY
            elif left in NUMERIC and right in NUMERIC:
                return FLOAT if FLOAT in (left, right) else INT
            raise ResilientTypeError(f"Cannot apply '{op}' to {left} and {right}")

        if op in COMPARISON:
            numeric_pair = left in NUMERIC and right in NUMERIC
            if not (compatible(left, right) or numeric_pair):
                raise ResilientTypeError(f"Cannot compare {left} and {right}")
            if op not in ("==", "!=") and BOOL in (left, right):
                raise ResilientTypeError(f"Cannot order {left} and {right} with '{op}'")
            return BOOL

        raise ResilientTypeError(f"Unknown infix operator: {op}")

    def check_call(self, function, arguments, env: Environment[StaticType]) -> StaticType:
        func_type = self.check(function, env)
        arg_types = [self.check(arg, env) for arg in arguments]

        if isinstance(func_type, FunctionType):
            if len(arg_types) != len(func_type.params):
                raise ResilientTypeError(
                    f"Expected {len(func_type.params)} arguments, got {len(arg_types)}"
                )
            for i, (arg_type, param_type) in enumerate(zip(arg_types, func_type.params), start=1):
                if not compatible(arg_type, param_type):
                    raise ResilientTypeError(
                        f"Type mismatch in argument {i}: expected {param_type}, got {arg_type}"
                    )
            return func_type.return_type
        if func_type == ANY:
            return ANY
        raise ResilientTypeError(f"Cannot call non-function type: {func_type}")


def check_program(program: Program) -> StaticType:
    """Type-check a Program with a fresh TypeChecker."""
    return TypeChecker().check_program(program)
