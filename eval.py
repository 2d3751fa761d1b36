"""Tree-walking evaluator for the Monkey interpreter.

Runtime errors are ordinary Error values rather than Python exceptions: every
caller that receives one from a sub-evaluation returns it immediately, so an
error unwinds every enclosing statement sequence up to the top. Return
statements travel the same way as ReturnValue wrappers, which are unwrapped
at function-call boundaries and at the top of a program.
"""

import logging

import monkey_builtins
from monkey_ast import (
    Expression,
    Node,
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    LetStatement,
    AssignStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Program,
)
from monkey_object import (
    Object,
    Integer,
    String,
    Function,
    Builtin,
    ReturnValue,
    Error,
    Environment,
    NULL,
    TRUE,
    FALSE,
    native_bool_to_boolean,
    wrap_int64,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def new_error(message: str) -> Error:
    logger.debug("runtime error: %s", message)
    return Error(message)


def is_error(obj: Object | None) -> bool:
    return isinstance(obj, Error)


def is_truthy(obj: Object) -> bool:
    """Only null and false are falsy; every other value, including 0, is truthy."""
    return obj is not NULL and obj is not FALSE


def evaluate(node: Node | None, env: Environment) -> Object | None:
    """Evaluate node in env.

    Returns None for statements that produce no value (let, assignment).
    """
    if node is None:
        return NULL

    # Statements
    if isinstance(node, Program):
        return eval_program(node, env)

    if isinstance(node, BlockStatement):
        return eval_block_statement(node, env)

    if isinstance(node, ExpressionStatement):
        return evaluate(node.expression, env)

    if isinstance(node, LetStatement):
        val = evaluate(node.value, env)
        if is_error(val):
            return val
        env.set(node.name.value, val if val is not None else NULL)
        return None

    if isinstance(node, AssignStatement):
        val = evaluate(node.value, env)
        if is_error(val):
            return val
        if not env.assign(node.name.value, val if val is not None else NULL):
            return new_error(f"identifier not found: {node.name.value}")
        return None

    if isinstance(node, ReturnStatement):
        val = evaluate(node.value, env)
        if is_error(val):
            return val
        return ReturnValue(val if val is not None else NULL)

    # Expressions
    if isinstance(node, IntegerLiteral):
        return Integer(node.value)

    if isinstance(node, StringLiteral):
        return String(node.value)

    if isinstance(node, BooleanLiteral):
        return native_bool_to_boolean(node.value)

    if isinstance(node, Identifier):
        return eval_identifier(node, env)

    if isinstance(node, PrefixExpression):
        right = evaluate(node.right, env)
        if is_error(right):
            return right
        return eval_prefix_expression(node.operator, right)

    if isinstance(node, InfixExpression):
        left = evaluate(node.left, env)
        if is_error(left):
            return left
        right = evaluate(node.right, env)
        if is_error(right):
            return right
        return eval_infix_expression(node.operator, left, right)

    if isinstance(node, IfExpression):
        return eval_if_expression(node, env)

    if isinstance(node, FunctionLiteral):
        return Function(node.parameters, node.body, env)

    if isinstance(node, CallExpression):
        function = evaluate(node.function, env)
        if is_error(function):
            return function
        args = eval_expressions(node.arguments, env)
        if isinstance(args, Error):
            return args
        return apply_function(function, args)

    raise TypeError(f"Unknown node type: {type(node).__name__}")


def eval_program(program: Program, env: Environment) -> Object | None:
    result: Object | None = None
    for stmt in program.statements:
        result = evaluate(stmt, env)
        if isinstance(result, ReturnValue):
            return result.value
        if isinstance(result, Error):
            return result
    return result


def eval_block_statement(block: BlockStatement, env: Environment) -> Object | None:
    """Evaluate a block in a fresh nested scope.

    ReturnValue is passed up still wrapped so enclosing blocks stop too.
    """
    block_env = Environment.enclosed(env)
    result: Object | None = None
    for stmt in block.statements:
        result = evaluate(stmt, block_env)
        if isinstance(result, (ReturnValue, Error)):
            return result
    return result


def eval_expressions(exprs: list[Expression | None], env: Environment) -> list[Object] | Error:
    """Evaluate arguments left to right, stopping at the first error."""
    result: list[Object] = []
    for expr in exprs:
        evaluated = evaluate(expr, env)
        if isinstance(evaluated, Error):
            return evaluated
        result.append(evaluated if evaluated is not None else NULL)
    return result


def eval_identifier(node: Identifier, env: Environment) -> Object:
    val = env.get(node.value)
    if val is not None:
        return val
    builtin = monkey_builtins.lookup(node.value)
    if builtin is not None:
        return builtin
    return new_error(f"identifier not found: {node.value}")


def eval_if_expression(node: IfExpression, env: Environment) -> Object | None:
    condition = evaluate(node.condition, env)
    if is_error(condition):
        return condition
    if is_truthy(condition):
        return evaluate(node.consequence, env)
    if node.alternative is not None:
        return evaluate(node.alternative, env)
    return NULL


def apply_function(fn: Object | None, args: list[Object]) -> Object:
    if isinstance(fn, Function):
        if len(fn.parameters) != len(args):
            return new_error(
                f"wrong number of arguments: want={len(fn.parameters)}, got={len(args)}"
            )
        logger.debug("applying fn/%d", len(args))
        call_env = extend_function_env(fn, args)
        evaluated = evaluate(fn.body, call_env)
        return unwrap_return_value(evaluated)

    if isinstance(fn, Builtin):
        return fn.fn(*args)

    type_name = fn.type() if fn is not None else NULL.type()
    return new_error(f"not a function: {type_name}")


def extend_function_env(fn: Function, args: list[Object]) -> Environment:
    """New scope for one call, nested inside the function's defining scope."""
    env = Environment.enclosed(fn.env)
    for param, arg in zip(fn.parameters, args):
        env.set(param.value, arg)
    return env


def unwrap_return_value(obj: Object | None) -> Object:
    if isinstance(obj, ReturnValue):
        return obj.value
    if obj is None:
        return NULL
    return obj


def eval_prefix_expression(operator: str, right: Object | None) -> Object:
    if right is None:
        right = NULL
    if operator == "!":
        return eval_bang_operator_expression(right)
    if operator == "-":
        return eval_minus_prefix_operator_expression(right)
    return new_error(f"unknown operator: {operator}{right.type()}")


def eval_bang_operator_expression(right: Object) -> Object:
    return FALSE if is_truthy(right) else TRUE


def eval_minus_prefix_operator_expression(right: Object) -> Object:
    if not isinstance(right, Integer):
        return new_error(f"unknown operator: -{right.type()}")
    return Integer(wrap_int64(-right.value))


def eval_infix_expression(operator: str, left: Object | None, right: Object | None) -> Object:
    if left is None:
        left = NULL
    if right is None:
        right = NULL

    # Type-specific rules, then identity equality, then mismatch, then unknown
    if isinstance(left, Integer) and isinstance(right, Integer):
        return eval_integer_infix_expression(operator, left, right)
    if isinstance(left, String) and isinstance(right, String):
        return eval_string_infix_expression(operator, left, right)
    if operator == "==":
        return native_bool_to_boolean(left is right)
    if operator == "!=":
        return native_bool_to_boolean(left is not right)
    if left.type() != right.type():
        return new_error(f"type mismatch: {left.type()} {operator} {right.type()}")
    return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")


def eval_integer_infix_expression(operator: str, left: Integer, right: Integer) -> Object:
    left_val = left.value
    right_val = right.value

    if operator == "+":
        return Integer(wrap_int64(left_val + right_val))
    if operator == "-":
        return Integer(wrap_int64(left_val - right_val))
    if operator == "*":
        return Integer(wrap_int64(left_val * right_val))
    if operator == "/":
        if right_val == 0:
            return new_error("division by zero")
        # Truncate toward zero like 64-bit machine division
        quotient = abs(left_val) // abs(right_val)
        if (left_val < 0) != (right_val < 0):
            quotient = -quotient
        return Integer(wrap_int64(quotient))
    if operator == "<":
        return native_bool_to_boolean(left_val < right_val)
    if operator == ">":
        return native_bool_to_boolean(left_val > right_val)
    if operator == "<=":
        return native_bool_to_boolean(left_val <= right_val)
    if operator == ">=":
        return native_bool_to_boolean(left_val >= right_val)
    if operator == "==":
        return native_bool_to_boolean(left_val == right_val)
    if operator == "!=":
        return native_bool_to_boolean(left_val != right_val)
    return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")


def eval_string_infix_expression(operator: str, left: String, right: String) -> Object:
    if operator == "+":
        return String(left.value + right.value)
    if operator == "==":
        return native_bool_to_boolean(left.value == right.value)
    if operator == "!=":
        return native_bool_to_boolean(left.value != right.value)
    return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")
