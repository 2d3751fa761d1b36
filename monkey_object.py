"""Runtime values and lexical environments for the Monkey evaluator."""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Union

from monkey_ast import BlockStatement, Identifier


class ObjectType(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    NULL = "NULL"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value


def wrap_int64(value: int) -> int:
    """Wrap an arbitrary Python int to signed 64-bit two's complement."""
    return ((value + 2**63) % 2**64) - 2**63


@dataclass(frozen=True)
class Integer:
    value: int

    def type(self) -> ObjectType:
        return ObjectType.INTEGER

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=False)
class Boolean:
    """Boolean value. Only the TRUE and FALSE singletons are ever created."""
    value: bool

    def type(self) -> ObjectType:
        return ObjectType.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String:
    """String value; the text is interned so equal strings share storage."""
    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", sys.intern(self.value))

    def type(self) -> ObjectType:
        return ObjectType.STRING

    def inspect(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class Null:
    def type(self) -> ObjectType:
        return ObjectType.NULL

    def inspect(self) -> str:
        return "null"


@dataclass(frozen=True, eq=False)
class Function:
    """User-defined function closing over the environment it was defined in."""
    parameters: list[Identifier]
    body: BlockStatement
    env: "Environment"

    def type(self) -> ObjectType:
        return ObjectType.FUNCTION

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


@dataclass(frozen=True, eq=False)
class Builtin:
    """Host-implemented function. Receives evaluated arguments, returns an Object."""
    fn: Callable[..., "Object"]

    def type(self) -> ObjectType:
        return ObjectType.BUILTIN

    def inspect(self) -> str:
        return "builtin function"


@dataclass(frozen=True)
class ReturnValue:
    """Control-flow signal carrying the value of a return statement."""
    value: "Object"

    def type(self) -> ObjectType:
        return ObjectType.RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error:
    """Runtime failure signal; short-circuits evaluation up to the caller."""
    message: str

    def type(self) -> ObjectType:
        return ObjectType.ERROR

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


# Key type representing any runtime value
Object = Union[Integer, Boolean, String, Null, Function, Builtin, ReturnValue, Error]


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


@dataclass(eq=False)
class Environment:
    """Mutable scope mapping names to values, chained to an enclosing scope."""

    store: dict[str, Object] = field(default_factory=dict)
    outer: "Environment | None" = None

    @classmethod
    def enclosed(cls, outer: "Environment") -> "Environment":
        """Create a new empty scope nested inside outer."""
        return cls(outer=outer)

    def get(self, name: str) -> Object | None:
        """Look up name in this scope, then in each enclosing scope."""
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        """Bind name in this scope, shadowing any outer binding."""
        self.store[name] = value
        return value

    def assign(self, name: str, value: Object) -> bool:
        """Rebind name in the nearest scope that defines it.

        Returns False, without binding anything, if no scope defines name.
        """
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                env.store[name] = value
                return True
            env = env.outer
        return False
