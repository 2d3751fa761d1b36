"""Typed AST definitions for the Monkey interpreter.

Nodes are immutable and carry no evaluation state. Child expressions may be
None when the parser could not build them; rendering treats those as empty.
"""

from dataclasses import dataclass
from typing import Union


def _render(node: "Node | None") -> str:
    return "" if node is None else str(node)


@dataclass(frozen=True)
class Identifier:
    """Identifier reference expression."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral:
    """Integer literal expression."""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class StringLiteral:
    """String literal expression."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BooleanLiteral:
    """Boolean literal expression."""
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class PrefixExpression:
    """Unary operator applied to an operand, e.g. -x or !x."""
    operator: str
    right: "Expression | None"

    def __str__(self) -> str:
        return f"({self.operator}{_render(self.right)})"


@dataclass(frozen=True)
class InfixExpression:
    """Binary operator expression."""
    left: "Expression | None"
    operator: str
    right: "Expression | None"

    def __str__(self) -> str:
        return f"({_render(self.left)} {self.operator} {_render(self.right)})"


@dataclass(frozen=True)
class IfExpression:
    """If conditional expression with an optional else block."""
    condition: "Expression | None"
    consequence: "BlockStatement"
    alternative: "BlockStatement | None" = None

    def __str__(self) -> str:
        out = f"if{_render(self.condition)} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral:
    """Function literal: fn(params) { body }."""
    parameters: list[Identifier]
    body: "BlockStatement"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression:
    """Call of any expression that evaluates to a callable."""
    function: "Expression | None"
    arguments: list["Expression | None"]

    def __str__(self) -> str:
        args = ", ".join(_render(a) for a in self.arguments)
        return f"{_render(self.function)}({args})"


# Key type representing any expression in the language
Expression = Union[
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]


@dataclass(frozen=True)
class LetStatement:
    """let <name> = <value>; defines a binding in the current scope."""
    name: Identifier
    value: "Expression | None"

    def __str__(self) -> str:
        return f"let {self.name} = {_render(self.value)};"


@dataclass(frozen=True)
class AssignStatement:
    """<name> = <value>; rebinds an existing binding."""
    name: Identifier
    value: "Expression | None"

    def __str__(self) -> str:
        return f"{self.name} = {_render(self.value)};"


@dataclass(frozen=True)
class ReturnStatement:
    value: "Expression | None"

    def __str__(self) -> str:
        return f"return {_render(self.value)};"


@dataclass(frozen=True)
class ExpressionStatement:
    expression: "Expression | None"

    def __str__(self) -> str:
        return _render(self.expression)


@dataclass(frozen=True)
class BlockStatement:
    """Braced sequence of statements; evaluated in its own scope."""
    statements: list["Statement"]

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


Statement = Union[
    LetStatement,
    AssignStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
]


@dataclass(frozen=True)
class Program:
    """Top-level program: an ordered sequence of statements."""
    statements: list[Statement]

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


Node = Union[Program, Statement, Expression]
