"""Tree-walking evaluator for Resilient.

Dispatches on the AST node class with `match`. Evaluation either returns a
value or raises ResilientFailure, which unwinds to the nearest live block or
out of the run.

Scoping: function calls and live-block attempts open child scopes; a Block
runs its statements in whatever environment it is handed, so `if` branches
share the surrounding scope. Each `static let` declaration owns a StaticCell,
kept in the session `statics` store under its declaration position and bound
by name in the declaring scope.
"""

from __future__ import annotations

from resilient import Value
from resilient.config import LIVE_MAX_ATTEMPTS
from resilient.errors import MAX_DEPTH_MESSAGE, ResilientFailure, ResilientUnboundName
from resilient.evaluation.assertion import eval_assert
from resilient.evaluation.live_block import eval_live_block
from resilient.evaluation.operators import eval_infix, eval_prefix, is_truthy
from resilient.nodes import (
    Program, Block, Function as FunctionNode, LiveBlock, Assert, LetStatement,
    AssignStatement, ReturnStatement, IfStatement, ExpressionStatement,
    Identifier, IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, CallExpression, Node,
)
from resilient.printer import pformat
from resilient.types.environment import Environment
from resilient.types.function import Function
from resilient.types.return_value import ReturnValue
from resilient.types.static_cell import StaticCell, static_key
from resilient.types.void import Void


class Evaluator:
    def __init__(self, statics: Environment | None = None, max_attempts: int = LIVE_MAX_ATTEMPTS):
        self.statics: Environment = statics if statics is not None else Environment()
        self.max_attempts = max_attempts

    def evaluate(self, node: Node, env: Environment) -> Value:
        match node:
            case Program(statements):
                return self.eval_statements(statements, env)
            case Block():
                return self.eval_block(node, env)
            case FunctionNode(name, parameters, body):
                env.define(name, Function(name, parameters, body, env))
                return Void
            case LiveBlock():
                return eval_live_block(self, node, env)
            case Assert():
                return eval_assert(self, node, env)
            case LetStatement(name, value, is_static):
                if is_static:
                    return self.eval_static_let(node, env)
                env.define(name, self.evaluate(value, env))
                return Void
            case AssignStatement(name, value):
                self.store(name, self.evaluate(value, env), env)
                return Void
            case ReturnStatement(value):
                return ReturnValue(Void if value is None else self.evaluate(value, env))
            case IfStatement(condition, consequence, alternative):
                if is_truthy(self.evaluate(condition, env)):
                    return self.eval_block(consequence, env)
                if alternative is not None:
                    return self.eval_block(alternative, env)
                return Void
            case ExpressionStatement(expression):
                return self.evaluate(expression, env)
            case Identifier(name):
                return self.load(name, env)
            case IntegerLiteral(value) | FloatLiteral(value) | StringLiteral(value) | BooleanLiteral(value):
                return value
            case PrefixExpression(op, right):
                return eval_prefix(op, self.evaluate(right, env))
            case InfixExpression(left, op, right):
                left_val = self.evaluate(left, env)
                right_val = self.evaluate(right, env)
                return eval_infix(op, left_val, right_val)
            case CallExpression(function, arguments):
                callee = self.evaluate(function, env)
                args = [self.evaluate(arg, env) for arg in arguments]
                return self.apply(callee, args, env)
        raise TypeError(f"Cannot evaluate node {node!r}")

    def eval_statements(self, statements, env: Environment) -> Value:
        """Run statements in order, stopping at the first Return marker."""
        result: Value = Void
        for statement in statements:
            result = self.evaluate(statement, env)
            if isinstance(result, ReturnValue):
                return result
        return result

    def eval_block(self, block: Block, env: Environment) -> Value:
        return self.eval_statements(block.statements, env)

    def load(self, name: str, env: Environment) -> Value:
        try:
            value = env.lookup(name)
        except ResilientUnboundName as exc:
            raise ResilientFailure(f"Identifier not found: {name}") from exc
        return value.value if isinstance(value, StaticCell) else value

    def store(self, name: str, value: Value, env: Environment) -> None:
        frame = env.find(name)
        if frame is None:
            raise ResilientFailure(f"Identifier not found: {name}")
        current = frame.vars[name]
        if isinstance(current, StaticCell):
            current.value = value
        else:
            frame.vars[name] = value

    def eval_static_let(self, node: LetStatement, env: Environment) -> Value:
        # Initialized by the first execution of this declaration, kept afterwards
        key = static_key(node.name, node.line, node.column)
        if key not in self.statics.vars:
            self.statics.define(key, StaticCell(self.evaluate(node.value, env)))
        env.define(node.name, self.statics.vars[key])
        return Void

    def apply(self, callee: Value, args: list[Value], env: Environment) -> Value:
        if isinstance(callee, Function):
            call_env = callee.extend_env(args)
            try:
                result = self.eval_block(callee.body, call_env)
            except RecursionError as exc:
                raise ResilientFailure(MAX_DEPTH_MESSAGE) from exc
            if isinstance(result, ReturnValue):
                return result.value
            return result
        if callable(callee):
            return callee(env, args)
        raise ResilientFailure(f"Not a function: {pformat(callee)}")
