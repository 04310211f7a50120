from __future__ import annotations

import math
import random
import unittest

from prefix_expr.ast import Const, Variable
from prefix_expr.operators import OPERATIONS
from prefix_expr.parser import parse_prefix

_POINTS = ((0, 0, 0), (1, 2, 3), (-4, 0.5, 7), (2.5, -1, -3), (10, 10, 0))


def _random_tree(rng: random.Random, depth: int):
    if depth == 0 or rng.random() < 0.25:
        if rng.random() < 0.5:
            return Const(rng.randint(-20, 20))
        return Variable(rng.choice("xyz"))
    spec = rng.choice(list(OPERATIONS.values()))
    count = rng.randint(1, 4) if spec.is_variadic else spec.arity
    return spec(*(_random_tree(rng, depth - 1) for _ in range(count)))


def _same_number(a, b) -> bool:
    if isinstance(a, float) and math.isnan(a):
        return isinstance(b, float) and math.isnan(b)
    return a == b


class RoundTripPropertyTests(unittest.TestCase):
    def test_prefix_reparses_to_equal_tree(self) -> None:
        rng = random.Random(1234)
        for _ in range(200):
            tree = _random_tree(rng, depth=4)
            with self.subTest(text=tree.prefix()):
                self.assertEqual(parse_prefix(tree.prefix()), tree)

    def test_reparsed_tree_evaluates_identically(self) -> None:
        rng = random.Random(99)
        for _ in range(100):
            tree = _random_tree(rng, depth=3)
            reparsed = parse_prefix(tree.prefix())
            for point in _POINTS:
                with self.subTest(text=tree.prefix(), point=point):
                    self.assertTrue(_same_number(reparsed.evaluate(*point), tree.evaluate(*point)))

    def test_postfix_lists_leaves_in_order(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            tree = _random_tree(rng, depth=3)
            prefix_leaves = [tok for tok in tree.prefix().replace("(", " ").replace(")", " ").split()]
            postfix_leaves = str(tree).split()
            self.assertEqual(sorted(prefix_leaves), sorted(postfix_leaves))


if __name__ == "__main__":
    unittest.main()
