"""Operator, arity and variable registries."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import Callable, Final, Mapping

from .ast import VARIABLE_SLOTS, Expr, Operation, Variable, as_double

VARIADIC: Final = None
OPEN_PAREN: Final[str] = "("
CLOSE_PAREN: Final[str] = ")"


@dataclass(frozen=True)
class OperatorSpec:
    """Display symbol, arity (``VARIADIC`` for one-or-more) and numeric kernel.

    Calling a spec builds an ``Operation`` node, so ``ADD(Variable("x"), Const(2))``
    is the direct, non-parsed way to construct a tree.
    """

    symbol: str
    arity: int | None
    func: Callable[..., object] = field(compare=False, repr=False)

    @property
    def is_variadic(self) -> bool:
        return self.arity is VARIADIC

    def accepts(self, count: int) -> bool:
        if self.is_variadic:
            return count >= 1
        return count == self.arity

    def __call__(self, *args: Expr) -> Operation:
        if not self.accepts(len(args)):
            wanted = "at least 1" if self.is_variadic else str(self.arity)
            raise TypeError(f"{self.symbol!r} takes {wanted} argument(s), got {len(args)}")
        return Operation(op=self, args=tuple(args))


def _divide(a, b):
    a, b = as_double(a), as_double(b)
    try:
        return a / b
    except ZeroDivisionError:
        # IEEE 754: 0/0 is NaN, otherwise a signed infinity.
        if a == 0 or a != a:
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _max2(a, b):
    return a if a > b else b


def _min2(a, b):
    return a if a < b else b


def _med3(a, b, c):
    return _max2(_min2(a, c), _max2(_min2(a, b), _min2(b, c)))


def _arith_mean(*values):
    return _divide(sum(values), len(values))


def _geom_mean(*values):
    product = math.prod(as_double(v) for v in values)
    return abs(product) ** (1 / len(values))


def _harm_mean(*values):
    return _divide(len(values), sum(_divide(1, v) for v in values))


ADD: Final = OperatorSpec("+", 2, lambda a, b: a + b)
SUBTRACT: Final = OperatorSpec("-", 2, lambda a, b: a - b)
MULTIPLY: Final = OperatorSpec("*", 2, lambda a, b: a * b)
DIVIDE: Final = OperatorSpec("/", 2, _divide)
NEGATE: Final = OperatorSpec("negate", 1, lambda a: -a)
ARITH_MEAN: Final = OperatorSpec("arith-mean", VARIADIC, _arith_mean)
GEOM_MEAN: Final = OperatorSpec("geom-mean", VARIADIC, _geom_mean)
HARM_MEAN: Final = OperatorSpec("harm-mean", VARIADIC, _harm_mean)
AVG5: Final = OperatorSpec("avg5", 5, lambda a, b, c, d, e: _divide(a + b + c + d + e, 5))
MED3: Final = OperatorSpec("med3", 3, _med3)

OPERATIONS: Final[Mapping[str, OperatorSpec]] = MappingProxyType(
    {
        spec.symbol: spec
        for spec in (ADD, SUBTRACT, MULTIPLY, DIVIDE, NEGATE, ARITH_MEAN, GEOM_MEAN, HARM_MEAN, AVG5, MED3)
    }
)

VARIABLES: Final[Mapping[str, Callable[[], Variable]]] = MappingProxyType(
    {name: partial(Variable, name) for name in VARIABLE_SLOTS}
)

# Single characters that end a token even without surrounding whitespace.
DELIMITERS: Final[frozenset[str]] = frozenset(
    {symbol for symbol in OPERATIONS if len(symbol) == 1} | {OPEN_PAREN, CLOSE_PAREN}
)


def arity_of(symbol: str) -> int | None:
    return OPERATIONS[symbol].arity
