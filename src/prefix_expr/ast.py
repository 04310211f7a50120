"""Expression tree nodes for prefix arithmetic over x, y and z."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Number as Numeric
from typing import TYPE_CHECKING, Final, Union

if TYPE_CHECKING:
    from .operators import OperatorSpec

VARIABLE_SLOTS: Final[dict[str, int]] = {"x": 0, "y": 1, "z": 2}


def as_double(value):
    """Coerce an integer to an IEEE double, saturating to signed infinity."""
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    return value


@dataclass(frozen=True)
class Const:
    value: Numeric

    def evaluate(self, x, y, z):
        return as_double(self.value)

    def postfix(self) -> str:
        return str(self.value)

    def prefix(self) -> str:
        return str(self.value)

    def __str__(self) -> str:
        return self.postfix()


@dataclass(frozen=True)
class Variable:
    name: str

    def __post_init__(self) -> None:
        if self.name not in VARIABLE_SLOTS:
            raise ValueError(f"Unknown variable {self.name!r}; expected one of x, y, z")

    @property
    def slot(self) -> int:
        return VARIABLE_SLOTS[self.name]

    def evaluate(self, x, y, z):
        return as_double((x, y, z)[self.slot])

    def postfix(self) -> str:
        return self.name

    def prefix(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.postfix()


@dataclass(frozen=True)
class Operation:
    """Application of a registered operator to an ordered tuple of children.

    Children are evaluated left to right and their results handed to the
    operator's numeric function. Arity is checked by whoever builds the node
    (the parser, or ``OperatorSpec.__call__``), never here.
    """

    op: "OperatorSpec"
    args: tuple["Expr", ...]

    @property
    def symbol(self) -> str:
        return self.op.symbol

    def evaluate(self, x, y, z):
        return self.op.func(*(arg.evaluate(x, y, z) for arg in self.args))

    def postfix(self) -> str:
        return " ".join(arg.postfix() for arg in self.args) + " " + self.op.symbol

    def prefix(self) -> str:
        return "(" + self.op.symbol + " " + " ".join(arg.prefix() for arg in self.args) + ")"

    def __str__(self) -> str:
        return self.postfix()


Expr = Union[Const, Variable, Operation]
