from __future__ import annotations

import unittest

from prefix_expr.ast import Variable
from prefix_expr.operators import DELIMITERS, OPERATIONS, VARIABLES, VARIADIC, arity_of


class OperatorRegistryTests(unittest.TestCase):
    def test_arity_table(self) -> None:
        expected = {
            "+": 2,
            "-": 2,
            "*": 2,
            "/": 2,
            "negate": 1,
            "arith-mean": VARIADIC,
            "geom-mean": VARIADIC,
            "harm-mean": VARIADIC,
            "avg5": 5,
            "med3": 3,
        }
        self.assertEqual({symbol: arity_of(symbol) for symbol in OPERATIONS}, expected)

    def test_registry_keys_match_operator_symbols(self) -> None:
        for symbol, spec in OPERATIONS.items():
            self.assertEqual(spec.symbol, symbol)

    def test_registries_are_read_only(self) -> None:
        with self.assertRaises(TypeError):
            OPERATIONS["%"] = OPERATIONS["+"]  # type: ignore[index]
        with self.assertRaises(TypeError):
            VARIABLES["w"] = VARIABLES["x"]  # type: ignore[index]

    def test_variable_factories_build_fresh_nodes(self) -> None:
        self.assertEqual(VARIABLES["x"](), Variable("x"))
        self.assertEqual([VARIABLES[name]().slot for name in "xyz"], [0, 1, 2])

    def test_delimiters(self) -> None:
        self.assertEqual(DELIMITERS, frozenset("+-*/()"))

    def test_accepts(self) -> None:
        self.assertTrue(OPERATIONS["arith-mean"].accepts(1))
        self.assertFalse(OPERATIONS["arith-mean"].accepts(0))
        self.assertTrue(OPERATIONS["avg5"].accepts(5))
        self.assertFalse(OPERATIONS["avg5"].accepts(4))


if __name__ == "__main__":
    unittest.main()
