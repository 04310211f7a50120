"""Structured error types for parsing and lowering."""

from __future__ import annotations

from typing import ClassVar


class ExpressionError(Exception):
    """Base class for structured prefix-expr errors."""


class ParseError(ExpressionError, SyntaxError):
    """Malformed input; carries the cursor position and the offending token."""

    kind: ClassVar[str] = "ParseError"

    def __init__(
        self,
        message: str,
        pos: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.pos = pos
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f'; found "{self.found}"'
        return f"{self.message} at position {self.pos}{expected_text}{found_text}"


class UnexpectedEndOfInputError(ParseError):
    kind: ClassVar[str] = "UnexpectedEndOfInput"


class ExpectedOperationError(ParseError):
    kind: ClassVar[str] = "ExpectedOperation"


class ArityMismatchError(ParseError):
    kind: ClassVar[str] = "ArityMismatch"


class UnknownVariableError(ParseError):
    kind: ClassVar[str] = "UnknownVariable"


class TrailingInputError(ParseError):
    kind: ClassVar[str] = "TrailingInput"


class UnsupportedNodeError(ExpressionError):
    """Lowering met a node type or operator without a JAX kernel."""
