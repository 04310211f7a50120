"""JAX-oriented lowering, tracing, and transform helpers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Final

import jax
import jax.numpy as jnp

from .ast import VARIABLE_SLOTS, Const, Expr, Operation, Variable, as_double
from .errors import UnsupportedNodeError
from .parser import parse_prefix

logger = logging.getLogger(__name__)

ARG_NAMES: Final[tuple[str, ...]] = tuple(sorted(VARIABLE_SLOTS, key=VARIABLE_SLOTS.__getitem__))

_PARSE_CACHE_MAX: Final[int] = max(1, int(os.environ.get("PREFIX_EXPR_PARSE_CACHE_MAX", "512")))
_USE_IR_CACHE: Final[bool] = os.environ.get("PREFIX_EXPR_DISABLE_IR_CACHE", "0") != "1"
_USE_CSE: Final[bool] = os.environ.get("PREFIX_EXPR_DISABLE_CSE", "0") != "1"

_COMPILED_IR_CACHE: dict[Expr, "JaxIR"] = {}
_COMPILED_IR_CACHE_STATS: dict[str, int] = {"hits": 0, "misses": 0}


def _stack(values):
    return jnp.stack(jnp.broadcast_arrays(*values))


def _med3_array(a, b, c):
    return jnp.maximum(jnp.minimum(a, c), jnp.maximum(jnp.minimum(a, b), jnp.minimum(b, c)))


def _arith_mean_array(*values):
    return jnp.sum(_stack(values), axis=0) / len(values)


def _geom_mean_array(*values):
    return jnp.abs(jnp.prod(_stack(values), axis=0)) ** (1.0 / len(values))


def _harm_mean_array(*values):
    return len(values) / jnp.sum(1.0 / _stack(values), axis=0)


_KERNELS: Final[dict[str, object]] = {
    "+": jnp.add,
    "-": jnp.subtract,
    "*": jnp.multiply,
    "/": jnp.divide,
    "negate": jnp.negative,
    "avg5": lambda a, b, c, d, e: (a + b + c + d + e) / 5,
    "med3": _med3_array,
    "arith-mean": _arith_mean_array,
    "geom-mean": _geom_mean_array,
    "harm-mean": _harm_mean_array,
}


@lru_cache(maxsize=_PARSE_CACHE_MAX)
def _parse_cached(text: str) -> Expr:
    return parse_prefix(text)


def _as_expr(source: str | Expr) -> Expr:
    if isinstance(source, str):
        return _parse_cached(source)
    return source


@dataclass(frozen=True)
class IRNode:
    """Single SSA-like IR node."""

    id: int
    op: str
    inputs: tuple[int, ...] = ()
    value: object | None = None
    name: str | None = None


@dataclass(frozen=True)
class JaxIR:
    """Lowered IR container."""

    nodes: tuple[IRNode, ...]
    output: int
    arg_names: tuple[str, ...] = ARG_NAMES


class _Lowerer:
    def __init__(self, *, cse: bool = True) -> None:
        self.cse = cse
        self.nodes: list[IRNode] = []
        self._arg_nodes: dict[str, int] = {}
        self._expr_cache: dict[Expr, int] = {}

    def _add(self, op: str, *, inputs: tuple[int, ...] = (), value: object | None = None, name: str | None = None) -> int:
        node_id = len(self.nodes)
        self.nodes.append(IRNode(id=node_id, op=op, inputs=inputs, value=value, name=name))
        return node_id

    def _arg(self, name: str) -> int:
        if name in self._arg_nodes:
            return self._arg_nodes[name]
        idx = self._add("arg", name=name)
        self._arg_nodes[name] = idx
        return idx

    def lower_expr(self, expr: Expr) -> int:
        if self.cse and expr in self._expr_cache:
            return self._expr_cache[expr]

        if isinstance(expr, Const):
            node_id = self._add("const", value=as_double(expr.value))
        elif isinstance(expr, Variable):
            node_id = self._arg(expr.name)
        elif isinstance(expr, Operation):
            if expr.symbol not in _KERNELS:
                raise UnsupportedNodeError(f"Unsupported in JAX IR backend: operation {expr.symbol!r}")
            input_ids = tuple(self.lower_expr(arg) for arg in expr.args)
            node_id = self._add(f"op:{expr.symbol}", inputs=input_ids)
        else:
            raise UnsupportedNodeError(f"Unsupported in JAX IR backend: node type {type(expr).__name__}")

        self._expr_cache[expr] = node_id
        return node_id


def lower_to_ir(source: str | Expr, *, use_cache: bool = True) -> JaxIR:
    """Lower an expression (or its prefix text) to JAX-friendly IR."""
    expr = _as_expr(source)
    use_cache = use_cache and _USE_IR_CACHE
    if use_cache:
        cached = _COMPILED_IR_CACHE.get(expr)
        if cached is not None:
            _COMPILED_IR_CACHE_STATS["hits"] += 1
            return cached
        _COMPILED_IR_CACHE_STATS["misses"] += 1

    lowerer = _Lowerer(cse=_USE_CSE)
    out = lowerer.lower_expr(expr)
    ir = JaxIR(nodes=tuple(lowerer.nodes), output=out)
    logger.debug("Lowered %s to %d IR nodes", expr.prefix(), len(ir.nodes))
    if use_cache:
        _COMPILED_IR_CACHE[expr] = ir
    return ir


def evaluate_ir(ir: JaxIR, args) -> jnp.ndarray:
    if len(args) != len(ir.arg_names):
        raise TypeError(f"Expected {len(ir.arg_names)} arguments, got {len(args)}")
    bindings = dict(zip(ir.arg_names, args, strict=True))
    values: list[object] = []
    for node in ir.nodes:
        if node.op == "const":
            values.append(jnp.asarray(node.value))
        elif node.op == "arg":
            values.append(jnp.asarray(bindings[node.name]))
        else:
            kernel = _KERNELS[node.op.removeprefix("op:")]
            values.append(kernel(*(values[i] for i in node.inputs)))
    return values[ir.output]


@dataclass
class CompiledExpression:
    """Callable wrapper around lowered IR with optional JAX transforms."""

    ir: JaxIR
    source: str | None = None
    _jit_fn: object | None = field(default=None, init=False, repr=False)
    _call_ir: object = field(default=None, init=False, repr=False)
    _grad_cache: dict[object, object] = field(default_factory=dict, init=False, repr=False)
    _vmap_cache: dict[tuple[str, str], object] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        ir = self.ir

        def _call_ir(x, y, z):
            return evaluate_ir(ir, (x, y, z))

        self._call_ir = _call_ir

    def __call__(self, x, y, z):
        return self._call_ir(x, y, z)

    def trace(self, x, y, z):
        return jax.make_jaxpr(self._call_ir)(x, y, z)

    def jit(self):
        if self._jit_fn is None:
            self._jit_fn = jax.jit(self._call_ir)
        return self._jit_fn

    def vmap(self, *, in_axes=0, out_axes=0):
        key = (repr(in_axes), repr(out_axes))
        fn = self._vmap_cache.get(key)
        if fn is None:
            fn = jax.vmap(self._call_ir, in_axes=in_axes, out_axes=out_axes)
            self._vmap_cache[key] = fn
        return fn

    def grad(self, *, argnums=0):
        key = argnums if isinstance(argnums, int) else tuple(argnums)
        fn = self._grad_cache.get(key)
        if fn is None:
            fn = jax.grad(self._call_ir, argnums=argnums)
            self._grad_cache[key] = fn
        return fn


def compile_expression(source: str | Expr, *, use_cache: bool = True) -> CompiledExpression:
    """Compile an expression (or its prefix text) to an IR-backed callable ``f(x, y, z)``."""
    ir = lower_to_ir(source, use_cache=use_cache)
    text = source if isinstance(source, str) else source.prefix()
    return CompiledExpression(ir=ir, source=text)


def compile_cache_stats(*, reset: bool = False) -> dict[str, int]:
    stats = dict(_COMPILED_IR_CACHE_STATS)
    stats["entries"] = len(_COMPILED_IR_CACHE)
    if reset:
        _COMPILED_IR_CACHE.clear()
        _COMPILED_IR_CACHE_STATS["hits"] = 0
        _COMPILED_IR_CACHE_STATS["misses"] = 0
    return stats
