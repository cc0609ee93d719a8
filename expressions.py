"""
Paren Expression Model
Shared tree representation used by both the parser and the evaluator.

Code is data: the same node types describe parsed syntax and evaluated
results. A `func` call is the one call shape treated as an opaque value
(a closure literal) rather than something to reduce further.
"""

from typing import Tuple, Union
from dataclasses import dataclass


FUNC_KEYWORD = "func"

INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1
LONG_MIN, LONG_MAX = -(2 ** 63), 2 ** 63 - 1


@dataclass(frozen=True)
class Identifier:
    """Reference to a bound name"""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class StringLiteral:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class IntLiteral:
    """32-bit integer literal"""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class LongLiteral:
    """64-bit integer literal"""
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DoubleLiteral:
    value: float

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Call:
    """Invocation of a built-in or user-defined function, arguments in order"""
    name: str
    args: Tuple['Expression', ...] = ()

    def __post_init__(self):
        # Accept any sequence but always store a tuple so the node stays hashable
        if not isinstance(self.args, tuple):
            object.__setattr__(self, 'args', tuple(self.args))

    @property
    def is_function_literal(self) -> bool:
        return self.name == FUNC_KEYWORD

    def __str__(self) -> str:
        return f"{self.name}({' '.join(str(arg) for arg in self.args)})"


Literal = Union[StringLiteral, IntLiteral, LongLiteral, DoubleLiteral, BooleanLiteral]
Expression = Union[Identifier, Literal, Call]

LITERAL_TYPES = (StringLiteral, IntLiteral, LongLiteral, DoubleLiteral, BooleanLiteral)
NUMERIC_TYPES = (IntLiteral, LongLiteral, DoubleLiteral)


def is_literal(expr: Expression) -> bool:
    return isinstance(expr, LITERAL_TYPES)


def is_numeric(expr: Expression) -> bool:
    return isinstance(expr, NUMERIC_TYPES)


def is_function_value(expr: Expression) -> bool:
    """Check if expr is a `func` call, i.e. a closure value"""
    return isinstance(expr, Call) and expr.is_function_literal


def kind_name(expr: Expression) -> str:
    """Human readable kind of an expression for error messages"""
    if is_function_value(expr):
        return "Function"
    if isinstance(expr, Call):
        return "Call"
    return {
        Identifier: "Identifier",
        StringLiteral: "String",
        IntLiteral: "Int",
        LongLiteral: "Long",
        DoubleLiteral: "Double",
        BooleanLiteral: "Boolean",
    }[type(expr)]
