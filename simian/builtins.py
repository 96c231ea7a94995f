"""
Simian Built-in Registry
========================
Native functions available to every program. Identifiers fall back to this
registry only when no scope binds them, so user code may shadow any name.

Arrays are never mutated: every array-returning builtin allocates a new one.
"""
from types import MappingProxyType
from typing import Mapping

from .errors import EMPTY_ARRAY, unsupported_argument_type, wrong_number_of_arguments
from .objects import Array, Builtin, Error, Integer, Object, String


def _len(*args: Object) -> Object:
    if len(args) != 1:
        return Error(wrong_number_of_arguments(1, len(args)))
    arg = args[0]
    match arg:
        case String():
            return Integer(len(arg.value))
        case Array():
            return Integer(len(arg.elements))
        case _:
            return Error(unsupported_argument_type("len", arg.object_type))


def _first(*args: Object) -> Object:
    if len(args) != 1:
        return Error(wrong_number_of_arguments(1, len(args)))
    arg = args[0]
    if not isinstance(arg, Array):
        return Error(unsupported_argument_type("first", arg.object_type))
    if not arg.elements:
        return Error(EMPTY_ARRAY)
    return arg.elements[0]


def _last(*args: Object) -> Object:
    if len(args) != 1:
        return Error(wrong_number_of_arguments(1, len(args)))
    arg = args[0]
    if not isinstance(arg, Array):
        return Error(unsupported_argument_type("last", arg.object_type))
    if not arg.elements:
        return Error(EMPTY_ARRAY)
    return arg.elements[-1]


def _rest(*args: Object) -> Object:
    if len(args) != 1:
        return Error(wrong_number_of_arguments(1, len(args)))
    arg = args[0]
    if not isinstance(arg, Array):
        return Error(unsupported_argument_type("rest", arg.object_type))
    if not arg.elements:
        return Error(EMPTY_ARRAY)
    return Array(arg.elements[1:])


def _push(*args: Object) -> Object:
    if len(args) != 2:
        return Error(wrong_number_of_arguments(2, len(args)))
    arg, value = args
    if not isinstance(arg, Array):
        return Error(unsupported_argument_type("push", arg.object_type))
    return Array([*arg.elements, value])


def _pop(*args: Object) -> Object:
    if len(args) != 1:
        return Error(wrong_number_of_arguments(1, len(args)))
    arg = args[0]
    if not isinstance(arg, Array):
        return Error(unsupported_argument_type("pop", arg.object_type))
    if not arg.elements:
        return Error(EMPTY_ARRAY)
    return Array(arg.elements[:-1])


# ─────────────────────────────────────────────────────────────
#  Builtin registry (read-only)
# ─────────────────────────────────────────────────────────────

BUILTINS: Mapping[str, Builtin] = MappingProxyType({
    "len": Builtin(name="len", fn=_len),
    "first": Builtin(name="first", fn=_first),
    "last": Builtin(name="last", fn=_last),
    "rest": Builtin(name="rest", fn=_rest),
    "push": Builtin(name="push", fn=_push),
    "pop": Builtin(name="pop", fn=_pop),
})


def describe_all() -> str:
    """Return a one-line listing of the builtin names."""
    return ", ".join(sorted(BUILTINS))
