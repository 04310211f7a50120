"""Parse and evaluation timings for prefix expressions of growing size."""

from __future__ import annotations

import argparse
import json
import random
from dataclasses import asdict, dataclass
from pathlib import Path

import jax.numpy as jnp

from prefix_expr import OPERATIONS, Const, Variable, compile_expression, parse_prefix
from _bench_utils import host_metadata, mean as _mean, percentile as _percentile, sample_ms, stddev as _stddev


@dataclass(frozen=True)
class TimingStats:
    mean_ms: float
    p50_ms: float
    p90_ms: float
    stddev_ms: float


@dataclass(frozen=True)
class CaseResult:
    name: str
    depth: int
    chars: int
    parse: TimingStats
    evaluate: TimingStats
    jit_batch: TimingStats


def _stats(rows: list[float]) -> TimingStats:
    return TimingStats(
        mean_ms=_mean(rows),
        p50_ms=_percentile(rows, 0.5),
        p90_ms=_percentile(rows, 0.9),
        stddev_ms=_stddev(rows),
    )


def _random_tree(rng: random.Random, depth: int):
    if depth == 0:
        return Const(rng.randint(1, 9)) if rng.random() < 0.4 else Variable(rng.choice("xyz"))
    spec = rng.choice(list(OPERATIONS.values()))
    count = rng.randint(2, 4) if spec.is_variadic else spec.arity
    return spec(*(_random_tree(rng, depth - 1) for _ in range(count)))


def run_case(depth: int, *, seed: int, batch: int, repeats: int, samples: int) -> CaseResult:
    rng = random.Random(seed)
    text = _random_tree(rng, depth).prefix()
    expr = parse_prefix(text)
    jitted = compile_expression(expr).jit()
    xs = jnp.linspace(1.0, 2.0, batch)

    return CaseResult(
        name=f"depth{depth}",
        depth=depth,
        chars=len(text),
        parse=_stats(sample_ms(parse_prefix, (text,), repeats=repeats, warmup=1, samples=samples)),
        evaluate=_stats(sample_ms(expr.evaluate, (1.5, 2.5, 3.5), repeats=repeats, warmup=1, samples=samples)),
        jit_batch=_stats(sample_ms(jitted, (xs, xs, xs), repeats=repeats, warmup=2, samples=samples)),
    )


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--depths", default="2,4,6", help="comma-separated tree depths")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--batch", type=int, default=100_000, help="array length for the jit case")
    parser.add_argument("--repeats", type=int, default=50)
    parser.add_argument("--samples", type=int, default=5)
    parser.add_argument("--json-out", default="", help="optional path for machine-readable results")
    args = parser.parse_args()

    results = [
        run_case(int(depth), seed=args.seed, batch=args.batch, repeats=args.repeats, samples=args.samples)
        for depth in args.depths.split(",")
    ]
    for row in results:
        print(
            f"{row.name:>8} chars={row.chars:>6} parse={row.parse.mean_ms:.4f}ms "
            f"evaluate={row.evaluate.mean_ms:.4f}ms jit_batch={row.jit_batch.mean_ms:.4f}ms"
        )

    if args.json_out:
        out = Path(args.json_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        payload = {"host": host_metadata(), "results": [asdict(row) for row in results]}
        out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
