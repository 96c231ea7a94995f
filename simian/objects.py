"""
Simian Object System
====================
Runtime values produced by the interpreter.

Ordinary values: Integer, Boolean, String, Null, Array, Hash, Function,
Builtin. ReturnValue and Error are control-flow signals that only live while
a tree is being evaluated; an Error is also what a failed program yields.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Hashable

if TYPE_CHECKING:
    from .environment import Environment
    from .parser import BlockStatement, FunctionParameter


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ObjectType(Enum):
    INTEGER      = "INTEGER"
    BOOLEAN      = "BOOLEAN"
    STRING       = "STRING"
    NULL         = "NULL"
    ARRAY        = "ARRAY"
    HASH         = "HASH"
    FUNCTION     = "FUNCTION"
    BUILTIN      = "BUILTIN"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR        = "ERROR"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HashKey:
    """A stable, comparable key derived from a hashable object."""
    object_type: ObjectType
    value: Hashable


class Object:
    """Base class for all runtime values."""
    object_type: ClassVar[ObjectType]

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.inspect()


# ─────────────────────────────────────────────────────────────
#  Scalars
# ─────────────────────────────────────────────────────────────

@dataclass
class Integer(Object):
    object_type = ObjectType.INTEGER
    value: int = 0

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(self.object_type, self.value)


@dataclass(eq=False)
class Boolean(Object):
    object_type = ObjectType.BOOLEAN
    value: bool = False

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(self.object_type, 1 if self.value else 0)


@dataclass
class String(Object):
    object_type = ObjectType.STRING
    value: str = ""

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(self.object_type, self.value)


@dataclass(eq=False)
class Null(Object):
    object_type = ObjectType.NULL

    def inspect(self) -> str:
        return "null"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value: bool) -> Boolean:
    """Map a Python bool onto the shared TRUE/FALSE singletons."""
    return TRUE if value else FALSE


def wrap_int64(value: int) -> int:
    """Wrap an arbitrary Python int into the signed 64-bit range."""
    return (value - INT64_MIN) % (2 ** 64) + INT64_MIN


def is_hashable(obj: Object) -> bool:
    """Whether ``obj`` satisfies the hash-key contract."""
    return isinstance(obj, (Integer, Boolean, String))


# ─────────────────────────────────────────────────────────────
#  Collections
# ─────────────────────────────────────────────────────────────

@dataclass(eq=False)
class Array(Object):
    object_type = ObjectType.ARRAY
    elements: list[Object] = field(default_factory=list)

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(frozen=True)
class HashPair:
    key: Object
    value: Object


@dataclass(eq=False)
class Hash(Object):
    object_type = ObjectType.HASH
    pairs: dict[HashKey, HashPair] = field(default_factory=dict)

    def inspect(self) -> str:
        items = ", ".join(
            f"{pair.key.inspect()}: {pair.value.inspect()}" for pair in self.pairs.values()
        )
        return "{" + items + "}"


# ─────────────────────────────────────────────────────────────
#  Callables
# ─────────────────────────────────────────────────────────────

@dataclass(eq=False)
class Function(Object):
    """A user-defined function closed over its defining environment."""
    object_type = ObjectType.FUNCTION
    parameters: list[FunctionParameter] = field(default_factory=list)
    body: BlockStatement | None = None
    env: Environment | None = None

    @property
    def variadic(self) -> bool:
        return bool(self.parameters) and self.parameters[-1].is_variadic

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"

    def __repr__(self) -> str:
        # env can hold this function, so the generated repr would recurse
        return f"Function({self.inspect()})"


BuiltinFunction = Callable[..., Object]


@dataclass(eq=False)
class Builtin(Object):
    object_type = ObjectType.BUILTIN
    name: str = ""
    fn: BuiltinFunction | None = None

    def inspect(self) -> str:
        return f"builtin function {self.name}"


# ─────────────────────────────────────────────────────────────
#  Signals
# ─────────────────────────────────────────────────────────────

@dataclass(eq=False)
class ReturnValue(Object):
    object_type = ObjectType.RETURN_VALUE
    value: Object = NULL

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass
class Error(Object):
    object_type = ObjectType.ERROR
    message: str = ""

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


def is_signal(obj: Any) -> bool:
    """Whether ``obj`` must stop a statement sequence (early return or error)."""
    return isinstance(obj, (ReturnValue, Error))
