"""Recursive-descent parser for fully parenthesized prefix expressions."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .ast import Const, Expr, Operation
from .errors import (
    ArityMismatchError,
    ExpectedOperationError,
    TrailingInputError,
    UnexpectedEndOfInputError,
    UnknownVariableError,
)
from .operators import CLOSE_PAREN, DELIMITERS, OPEN_PAREN, OPERATIONS, VARIABLES, OperatorSpec
from .source import Source

logger = logging.getLogger(__name__)

_EXPECT_EXPRESSION = "expression"
_EXPECT_OPERATION = "operation"
_EXPECT_CLOSE = CLOSE_PAREN
_EXPECT_LEAF = ("integer", "x", "y", "z")

_INTEGER_RE = re.compile(r"-?[0-9]+")


@dataclass
class _Parser:
    source: Source

    def parse_prefix(self) -> Expr:
        expr = self._parse_expression()
        if self.source.has_next():
            pos = self.source.pos
            found = self._read_token()
            raise TrailingInputError(
                "Illegal token after end of expression",
                pos,
                expected=("end of input",),
                found=found,
            )
        return expr

    def _parse_expression(self) -> Expr:
        token = self._next_token(_EXPECT_EXPRESSION)
        if token != OPEN_PAREN:
            return self._const_or_var(token)
        return self._parse_operation()

    def _parse_operation(self) -> Operation:
        # Opening parenthesis already consumed.
        spec = OPERATIONS[self._next_token(_EXPECT_OPERATION)]
        if spec.is_variadic:
            args = self._parse_variadic_args(spec)
        else:
            args = self._parse_fixed_args(spec)
        return spec(*args)

    def _parse_fixed_args(self, spec: OperatorSpec) -> list[Expr]:
        args: list[Expr] = []
        for i in range(spec.arity):
            token = self._next_token(f"argument {i + 1} of {spec.symbol}")
            args.append(self._parse_argument(token))
        self._next_token(_EXPECT_CLOSE)
        return args

    def _parse_variadic_args(self, spec: OperatorSpec) -> list[Expr]:
        args: list[Expr] = []
        while True:
            token = self._next_token(f"argument {len(args) + 1} of {spec.symbol}", variadic=True)
            if token == CLOSE_PAREN:
                break
            args.append(self._parse_argument(token))
        if not args:
            raise ArityMismatchError(
                f"Operation {spec.symbol} needs at least one argument",
                self.source.pos,
                expected=(f"argument 1 of {spec.symbol}",),
                found=CLOSE_PAREN,
            )
        return args

    def _parse_argument(self, token: str) -> Expr:
        if token == OPEN_PAREN:
            return self._parse_operation()
        return self._const_or_var(token)

    def _const_or_var(self, token: str) -> Expr:
        if _INTEGER_RE.fullmatch(token):
            return Const(int(token))
        factory = VARIABLES.get(token)
        if factory is None:
            raise UnknownVariableError("Illegal variable", self.source.pos, expected=_EXPECT_LEAF, found=token)
        return factory()

    def _read_token(self) -> str:
        source = self.source
        source.skip_space()
        chars: list[str] = []
        while source.has_char() and not source.is_next_space():
            ch = source.next()
            # A hyphen binds to the next character: "-5", "arith-mean".
            if ch == "-" and source.has_char() and not source.is_next_space():
                chars.append(ch)
                ch = source.next()
            if ch in DELIMITERS:
                if not chars:
                    return ch
                source.shift(-1)
                break
            chars.append(ch)
        return "".join(chars)

    def _next_token(self, expected: str, *, variadic: bool = False) -> str:
        token = self._read_token()
        pos = self.source.pos
        if not token and not self.source.has_next():
            raise UnexpectedEndOfInputError("Unexpected end of input", pos, expected=(expected,), found=token)
        if expected == _EXPECT_OPERATION and token not in OPERATIONS:
            raise ExpectedOperationError("Unknown operation", pos, expected=(expected,), found=token)
        if (expected == _EXPECT_CLOSE) != (token == CLOSE_PAREN) and not variadic:
            if expected == _EXPECT_EXPRESSION:
                raise ArityMismatchError("Illegal token", pos, expected=(expected,), found=token)
            if token == CLOSE_PAREN:
                raise ArityMismatchError("Missing argument", pos, expected=(expected,), found=token)
            raise ArityMismatchError("Too many arguments", pos, expected=(expected,), found=token)
        return token


def parse_prefix(text: str) -> Expr:
    """Parse prefix notation such as ``(+ x 2)`` into an expression tree."""
    expr = _Parser(Source(text)).parse_prefix()
    logger.debug("Parsed %d characters into %s", len(text), type(expr).__name__)
    return expr
