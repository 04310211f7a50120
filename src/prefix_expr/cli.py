"""Command-line entry point: parse a prefix expression and evaluate or render it."""

from __future__ import annotations

import argparse
import logging
import sys

from .errors import ParseError
from .parser import parse_prefix

logger = logging.getLogger(__name__)

_FORMATS = ("value", "prefix", "postfix", "all")
_BACKENDS = ("python", "jax")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prefix-expr", description=__doc__)
    parser.add_argument("expression", help='prefix expression, e.g. "(+ x 2)"')
    parser.add_argument("--x", type=float, default=0.0, help="binding for x")
    parser.add_argument("--y", type=float, default=0.0, help="binding for y")
    parser.add_argument("--z", type=float, default=0.0, help="binding for z")
    parser.add_argument("--format", choices=_FORMATS, default="value", help="what to print")
    parser.add_argument("--backend", choices=_BACKENDS, default="python", help="evaluation backend")
    parser.add_argument("--log-level", default="WARNING", help="logging level name")
    return parser


def _evaluate(expr, args: argparse.Namespace):
    if args.backend == "jax":
        from .ir import compile_expression

        return float(compile_expression(expr).jit()(args.x, args.y, args.z))
    return expr.evaluate(args.x, args.y, args.z)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    try:
        expr = parse_prefix(args.expression)
    except ParseError as err:
        logger.debug("Parse failed with %s", err.kind)
        print(f"error: {err}", file=sys.stderr)
        return 2

    if args.format in {"prefix", "all"}:
        print(expr.prefix())
    if args.format in {"postfix", "all"}:
        print(str(expr))
    if args.format in {"value", "all"}:
        print(_evaluate(expr, args))
    return 0
