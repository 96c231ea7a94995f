"""
Simian Interpreter
==================
Tree-walking interpreter that evaluates the AST produced by the Parser
against a chain of Environments.

Program failures are returned as Error objects, never raised. Evaluation of
any sub-expression stops as soon as a ReturnValue or Error shows up, and the
signal is handed straight back to the caller.
"""
import logging
from typing import Mapping

from .builtins import BUILTINS
from .environment import Environment
from .errors import (
    ASSIGN_TO_NON_VARIABLE, DIVISION_BY_ZERO, EMPTY_ASSIGNMENT, RECURSION_DEPTH_EXCEEDED,
    VARIADIC_NOT_LAST,
    SimianError, identifier_not_found, index_not_supported, index_out_of_bounds,
    negative_array_index, not_a_function, type_mismatch, unknown_infix_operator,
    unknown_prefix_operator, unusable_as_hash_key, wrong_number_of_arguments,
)
from .objects import (
    NULL, Array, Boolean, Builtin, Error, Function, Hash, HashPair, Integer,
    Object, ReturnValue, String, is_hashable, is_signal, native_bool, wrap_int64,
)
from .parser import (
    ASTNode, ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression,
    ExpressionStatement, ForLoopStatement, FunctionLiteral, HashLiteral,
    Identifier, IfExpression, IndexExpression, InfixExpression, IntegerLiteral,
    LetStatement, PrefixExpression, Program, ReturnStatement, StringLiteral,
)

logger = logging.getLogger(__name__)


def is_truthy(obj: Object | None) -> bool:
    """Only false and null are falsy; no value counts as null."""
    if obj is None or obj is NULL:
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


class Interpreter:
    """
    Tree-walking interpreter for Simian programs.

    Usage:
        interp = Interpreter()
        result = interp.evaluate(program, Environment())
    """

    def __init__(self, builtins: Mapping[str, Builtin] = BUILTINS):
        self.builtins = builtins

    def evaluate(self, node: ASTNode, env: Environment) -> Object | None:
        """Evaluate an AST node in ``env``; None means the node has no value."""
        method = f"_eval_{node.node_type}"
        evaluator = getattr(self, method, None)
        if evaluator is None:
            raise SimianError(f"Unknown node type: {node.node_type}")
        return evaluator(node, env)

    def _value(self, node: ASTNode, env: Environment) -> Object:
        """Evaluate a node whose result is used as a value."""
        result = self.evaluate(node, env)
        return NULL if result is None else result

    def _values(self, nodes: list[ASTNode], env: Environment) -> list[Object] | Object:
        """Evaluate left to right; the first signal is returned instead of a list."""
        values = []
        for node in nodes:
            value = self._value(node, env)
            if is_signal(value):
                return value
            values.append(value)
        return values

    # ─────────────────────────────────────────────────────────
    #  Program & Statements
    # ─────────────────────────────────────────────────────────

    def _eval_program(self, node: Program, env: Environment) -> Object | None:
        logger.debug("evaluating program with %d statement(s)", len(node.statements))
        result = None
        for stmt in node.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                logger.debug("evaluation stopped at L%d: %s", stmt.line, result.message)
                return result
        return result

    def _eval_statements(self, statements: list[ASTNode], env: Environment) -> Object | None:
        result = None
        for stmt in statements:
            result = self.evaluate(stmt, env)
            if is_signal(result):
                return result
        return result

    def _eval_block_statement(self, node: BlockStatement, env: Environment) -> Object | None:
        return self._eval_statements(node.statements, env.enclose())

    def _eval_expression_statement(self, node: ExpressionStatement, env: Environment):
        return self.evaluate(node.expression, env)

    def _eval_let_statement(self, node: LetStatement, env: Environment) -> Object | None:
        value = self.evaluate(node.value, env)
        if is_signal(value):
            return value
        if value is None:
            return Error(EMPTY_ASSIGNMENT)
        try:
            env.define(node.name, value)
        except SimianError as e:
            return Error(str(e))
        return None

    def _eval_return_statement(self, node: ReturnStatement, env: Environment) -> Object:
        value = self._value(node.value, env)
        if is_signal(value):
            return value
        return ReturnValue(value)

    def _eval_for_loop_statement(self, node: ForLoopStatement, env: Environment) -> Object | None:
        loop_env = env.enclose()
        if node.init is not None:
            init = self.evaluate(node.init, loop_env)
            if is_signal(init):
                return init

        while True:
            if node.condition is not None:
                condition = self._value(node.condition, loop_env)
                if is_signal(condition):
                    return condition
                if not is_truthy(condition):
                    break

            result = self._eval_statements(node.body.statements, loop_env.enclose())
            if is_signal(result):
                return result

            if node.step is not None:
                step = self.evaluate(node.step, loop_env)
                if is_signal(step):
                    return step

        # The loop variable stays readable afterwards unless it would shadow a binding
        if isinstance(node.init, LetStatement) and node.init.name not in env:
            env.define(node.init.name, loop_env.store[node.init.name])
        return None

    # ─────────────────────────────────────────────────────────
    #  Literals & Identifiers
    # ─────────────────────────────────────────────────────────

    def _eval_identifier(self, node: Identifier, env: Environment) -> Object:
        value = env.get(node.value)
        if value is not None:
            return value
        builtin = self.builtins.get(node.value)
        if builtin is not None:
            return builtin
        return Error(identifier_not_found(node.value))

    def _eval_integer_literal(self, node: IntegerLiteral, env: Environment) -> Object:
        return Integer(node.value)

    def _eval_string_literal(self, node: StringLiteral, env: Environment) -> Object:
        return String(node.value)

    def _eval_boolean_literal(self, node: BooleanLiteral, env: Environment) -> Object:
        return native_bool(node.value)

    def _eval_array_literal(self, node: ArrayLiteral, env: Environment) -> Object:
        elements = self._values(node.elements, env)
        if not isinstance(elements, list):
            return elements
        return Array(elements)

    def _eval_hash_literal(self, node: HashLiteral, env: Environment) -> Object:
        pairs = {}
        for key_node, value_node in node.pairs:
            key = self._value(key_node, env)
            if is_signal(key):
                return key
            if not is_hashable(key):
                return Error(unusable_as_hash_key(key.object_type))
            value = self._value(value_node, env)
            if is_signal(value):
                return value
            pairs[key.hash_key()] = HashPair(key, value)
        return Hash(pairs)

    def _eval_function_literal(self, node: FunctionLiteral, env: Environment) -> Object:
        if any(p.is_variadic for p in node.parameters[:-1]):
            return Error(VARIADIC_NOT_LAST)
        return Function(parameters=node.parameters, body=node.body, env=env)

    # ─────────────────────────────────────────────────────────
    #  Operators
    # ─────────────────────────────────────────────────────────

    def _eval_prefix_expression(self, node: PrefixExpression, env: Environment) -> Object:
        right = self._value(node.right, env)
        if is_signal(right):
            return right

        if node.operator == "!":
            return native_bool(not is_truthy(right))
        if node.operator == "-" and isinstance(right, Integer):
            return Integer(wrap_int64(-right.value))
        return Error(unknown_prefix_operator(node.operator, right.object_type))

    def _eval_infix_expression(self, node: InfixExpression, env: Environment) -> Object:
        if node.operator == "=":
            return self._eval_assignment(node, env)

        left = self._value(node.left, env)
        if is_signal(left):
            return left
        right = self._value(node.right, env)
        if is_signal(right):
            return right
        return self.apply_operator(node.operator, left, right)

    def _eval_assignment(self, node: InfixExpression, env: Environment) -> Object:
        if not isinstance(node.left, Identifier):
            return Error(ASSIGN_TO_NON_VARIABLE)
        value = self.evaluate(node.right, env)
        if is_signal(value):
            return value
        if value is None:
            return Error(EMPTY_ASSIGNMENT)
        try:
            return env.assign(node.left.value, value)
        except SimianError as e:
            return Error(str(e))

    def apply_operator(self, operator: str, left: Object, right: Object) -> Object:
        """Apply a binary operator to two evaluated operands."""
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._integer_infix(operator, left.value, right.value)
        if isinstance(left, String) and isinstance(right, String):
            return self._string_infix(operator, left.value, right.value)
        if left.object_type != right.object_type:
            return Error(type_mismatch(left.object_type, operator, right.object_type))
        if operator == "==":
            return native_bool(left is right)
        if operator == "!=":
            return native_bool(left is not right)
        return Error(unknown_infix_operator(left.object_type, operator, right.object_type))

    def _integer_infix(self, operator: str, left: int, right: int) -> Object:
        match operator:
            case "+":
                return Integer(wrap_int64(left + right))
            case "-":
                return Integer(wrap_int64(left - right))
            case "*":
                return Integer(wrap_int64(left * right))
            case "/":
                if right == 0:
                    return Error(DIVISION_BY_ZERO)
                quotient = abs(left) // abs(right)
                if (left < 0) != (right < 0):
                    quotient = -quotient
                return Integer(wrap_int64(quotient))
            case "<":
                return native_bool(left < right)
            case ">":
                return native_bool(left > right)
            case "==":
                return native_bool(left == right)
            case "!=":
                return native_bool(left != right)
        return Error(unknown_infix_operator("INTEGER", operator, "INTEGER"))

    def _string_infix(self, operator: str, left: str, right: str) -> Object:
        match operator:
            case "+":
                return String(left + right)
            case "<":
                return native_bool(left < right)
            case ">":
                return native_bool(left > right)
            case "==":
                return native_bool(left == right)
            case "!=":
                return native_bool(left != right)
        return Error(unknown_infix_operator("STRING", operator, "STRING"))

    # ─────────────────────────────────────────────────────────
    #  Control Flow
    # ─────────────────────────────────────────────────────────

    def _eval_if_expression(self, node: IfExpression, env: Environment) -> Object | None:
        for clause in node.clauses:
            condition = self._value(clause.condition, env)
            if is_signal(condition):
                return condition
            if is_truthy(condition):
                return self._eval_statements(clause.consequence.statements, env.enclose())

        if node.alternative is not None:
            return self._eval_statements(node.alternative.statements, env.enclose())
        return NULL

    # ─────────────────────────────────────────────────────────
    #  Calls & Indexing
    # ─────────────────────────────────────────────────────────

    def _eval_call_expression(self, node: CallExpression, env: Environment) -> Object | None:
        function = self._value(node.function, env)
        if is_signal(function):
            return function
        args = self._values(node.arguments, env)
        if not isinstance(args, list):
            return args
        return self.apply_function(function, args)

    def apply_function(self, function: Object, args: list[Object]) -> Object | None:
        """Call a user function or builtin with already-evaluated arguments."""
        if isinstance(function, Builtin):
            return function.fn(*args)
        if not isinstance(function, Function):
            return Error(not_a_function(function.object_type))

        params = function.parameters
        fixed = params[:-1] if function.variadic else params
        if len(args) < len(fixed) or (not function.variadic and len(args) > len(fixed)):
            return Error(wrong_number_of_arguments(len(params), len(args)))

        call_env = function.env.enclose()
        for param, arg in zip(fixed, args):
            call_env.define_or_assign(param.name, arg)
        if function.variadic:
            call_env.define_or_assign(params[-1].name, Array(list(args[len(fixed):])))

        result = self._eval_statements(function.body.statements, call_env)
        if isinstance(result, ReturnValue):
            return result.value
        return result

    def _eval_index_expression(self, node: IndexExpression, env: Environment) -> Object:
        left = self._value(node.left, env)
        if is_signal(left):
            return left
        index = self._value(node.index, env)
        if is_signal(index):
            return index

        if isinstance(left, Array) and isinstance(index, Integer):
            i = index.value
            if i < 0:
                return Error(negative_array_index(i))
            if i >= len(left.elements):
                return Error(index_out_of_bounds(i))
            return left.elements[i]

        if isinstance(left, Hash):
            if not is_hashable(index):
                return Error(unusable_as_hash_key(index.object_type))
            pair = left.pairs.get(index.hash_key())
            return NULL if pair is None else pair.value

        return Error(index_not_supported(left.object_type))


def evaluate(program: ASTNode, env: Environment | None = None) -> Object | None:
    """Evaluate a parsed program; a fresh Environment is used when none is given."""
    if env is None:
        env = Environment()
    try:
        return Interpreter().evaluate(program, env)
    except RecursionError:
        logger.debug("evaluation aborted: host recursion limit reached")
        return Error(RECURSION_DEPTH_EXCEEDED)
