"""prefix-expr public API."""

from .ast import Const, Expr, Operation, Variable
from .errors import (
    ArityMismatchError,
    ExpectedOperationError,
    ExpressionError,
    ParseError,
    TrailingInputError,
    UnexpectedEndOfInputError,
    UnknownVariableError,
    UnsupportedNodeError,
)
from .operators import (
    ADD,
    ARITH_MEAN,
    AVG5,
    DIVIDE,
    GEOM_MEAN,
    HARM_MEAN,
    MED3,
    MULTIPLY,
    NEGATE,
    OPERATIONS,
    SUBTRACT,
    VARIABLES,
    OperatorSpec,
)
from .parser import parse_prefix

try:
    from .ir import CompiledExpression, JaxIR, compile_cache_stats, compile_expression, lower_to_ir
except ModuleNotFoundError as exc:
    if exc.name and exc.name.startswith("jax"):
        _jax_import_error = exc

        def compile_expression(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for compile_expression(). Install runtime deps first."
            ) from _jax_import_error

        def lower_to_ir(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for lower_to_ir(). Install runtime deps first."
            ) from _jax_import_error

        def compile_cache_stats(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for compile_cache_stats(). Install runtime deps first."
            ) from _jax_import_error

        class CompiledExpression:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for CompiledExpression(). Install runtime deps first."
                ) from _jax_import_error

        class JaxIR:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for JaxIR(). Install runtime deps first."
                ) from _jax_import_error

    else:
        raise

__all__ = [
    "parse_prefix",
    "Const",
    "Variable",
    "Operation",
    "Expr",
    "OperatorSpec",
    "OPERATIONS",
    "VARIABLES",
    "ADD",
    "SUBTRACT",
    "MULTIPLY",
    "DIVIDE",
    "NEGATE",
    "ARITH_MEAN",
    "GEOM_MEAN",
    "HARM_MEAN",
    "AVG5",
    "MED3",
    "lower_to_ir",
    "compile_expression",
    "compile_cache_stats",
    "CompiledExpression",
    "JaxIR",
    "ExpressionError",
    "ParseError",
    "UnexpectedEndOfInputError",
    "ExpectedOperationError",
    "ArityMismatchError",
    "UnknownVariableError",
    "TrailingInputError",
    "UnsupportedNodeError",
]
