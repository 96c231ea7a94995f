"""
Simian Errors
=============
Host-level exceptions and the message templates of runtime Error objects.

Program failures never escape the evaluator as exceptions: they become
``Error`` objects. ``SimianError`` is only raised where a collaborator (the
environment) needs to unwind to the evaluator, or for interpreter bugs.
"""


class SimianError(Exception):
    """Internal error during Simian execution."""
    pass


def wrong_number_of_arguments(expected: int, actual: int) -> str:
    return f"wrong number of arguments: expected={expected}, got={actual}"


def unsupported_argument_type(name: str, object_type) -> str:
    return f"argument to `{name}` not supported: {object_type}"


def type_mismatch(left_type, operator: str, right_type) -> str:
    return f"type mismatch: {left_type} {operator} {right_type}"


def unknown_infix_operator(left_type, operator: str, right_type) -> str:
    return f"unknown operator: {left_type} {operator} {right_type}"


def unknown_prefix_operator(operator: str, right_type) -> str:
    return f"unknown operator: {operator}{right_type}"


def identifier_not_found(name: str) -> str:
    return f"identifier not found: {name}"


def identifier_already_exists(name: str) -> str:
    return f"identifier already exists: {name}"


EMPTY_ASSIGNMENT = "cannot assign empty value to variable"
ASSIGN_TO_NON_VARIABLE = "left side of assignment must be a variable"
VARIADIC_NOT_LAST = "variadic parameter must be the last parameter of a function"
EMPTY_ARRAY = "array has no elements"
DIVISION_BY_ZERO = "division by zero"
RECURSION_DEPTH_EXCEEDED = "maximum recursion depth exceeded"


def not_a_function(object_type) -> str:
    return f"not a function: {object_type}"


def index_not_supported(object_type) -> str:
    return f"index operator not supported: {object_type}"


def unusable_as_hash_key(object_type) -> str:
    return f"unusable as hash key: {object_type}"


def negative_array_index(index: int) -> str:
    return f"array index must be non-negative: {index}"


def index_out_of_bounds(index: int) -> str:
    return f"index outside array bounds: {index}"
