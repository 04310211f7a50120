from __future__ import annotations

import math
import unittest

from prefix_expr.ast import Const, Operation, Variable
from prefix_expr.errors import UnknownVariableError
from prefix_expr.operators import (
    ADD,
    ARITH_MEAN,
    AVG5,
    DIVIDE,
    GEOM_MEAN,
    HARM_MEAN,
    MED3,
    MULTIPLY,
    NEGATE,
    SUBTRACT,
)
from prefix_expr.parser import parse_prefix


class ExpressionModelTests(unittest.TestCase):
    def test_const_ignores_bindings(self) -> None:
        self.assertEqual(Const(7).evaluate(1, 2, 3), 7)

    def test_variables_read_their_slot(self) -> None:
        self.assertEqual(Variable("x").evaluate(1, 2, 3), 1)
        self.assertEqual(Variable("y").evaluate(1, 2, 3), 2)
        self.assertEqual(Variable("z").evaluate(1, 2, 3), 3)

    def test_variable_rejects_unknown_name(self) -> None:
        with self.assertRaises(ValueError):
            Variable("w")

    def test_direct_construction_evaluates(self) -> None:
        # 2x - 3
        expr = SUBTRACT(MULTIPLY(Const(2), Variable("x")), Const(3))
        self.assertIsInstance(expr, Operation)
        self.assertEqual(expr.evaluate(5, 0, 0), 7)

    def test_direct_construction_checks_arity(self) -> None:
        with self.assertRaises(TypeError):
            ADD(Const(1))
        with self.assertRaises(TypeError):
            NEGATE(Const(1), Const(2))
        with self.assertRaises(TypeError):
            ARITH_MEAN()

    def test_postfix_rendering(self) -> None:
        expr = ADD(Variable("x"), Const(2))
        self.assertEqual(str(expr), "x 2 +")
        self.assertEqual(expr.postfix(), "x 2 +")
        nested = MULTIPLY(SUBTRACT(Variable("x"), Const(3)), Variable("y"))
        self.assertEqual(str(nested), "x 3 - y *")

    def test_prefix_rendering(self) -> None:
        self.assertEqual(ADD(Variable("x"), Const(2)).prefix(), "(+ x 2)")
        self.assertEqual(NEGATE(Const(-5)).prefix(), "(negate -5)")
        self.assertEqual(Const(4).prefix(), "4")
        self.assertEqual(Variable("z").prefix(), "z")
        self.assertEqual(
            ARITH_MEAN(Variable("x"), ADD(Const(1), Variable("y"))).prefix(),
            "(arith-mean x (+ 1 y))",
        )

    def test_division_follows_ieee(self) -> None:
        self.assertEqual(DIVIDE(Const(1), Const(2)).evaluate(0, 0, 0), 0.5)
        self.assertEqual(DIVIDE(Const(1), Const(0)).evaluate(0, 0, 0), math.inf)
        self.assertEqual(DIVIDE(Const(-1), Const(0)).evaluate(0, 0, 0), -math.inf)
        self.assertEqual(DIVIDE(Const(1), Variable("x")).evaluate(-0.0, 0, 0), -math.inf)
        self.assertTrue(math.isnan(DIVIDE(Const(0), Const(0)).evaluate(0, 0, 0)))

    def test_means(self) -> None:
        args = (Const(1), Const(2), Const(3), Const(4))
        self.assertEqual(ARITH_MEAN(*args).evaluate(0, 0, 0), 2.5)
        self.assertAlmostEqual(GEOM_MEAN(Const(2), Const(8)).evaluate(0, 0, 0), 4.0)
        self.assertAlmostEqual(GEOM_MEAN(Const(-2), Const(8)).evaluate(0, 0, 0), 4.0)
        self.assertAlmostEqual(HARM_MEAN(Const(1), Const(2), Const(4)).evaluate(0, 0, 0), 3 / 1.75)
        self.assertEqual(HARM_MEAN(Const(0), Const(2)).evaluate(0, 0, 0), 0.0)
        self.assertEqual(ARITH_MEAN(Variable("x")).evaluate(9, 0, 0), 9)

    def test_avg5_and_med3(self) -> None:
        five = [Const(v) for v in (1, 2, 3, 4, 10)]
        self.assertEqual(AVG5(*five).evaluate(0, 0, 0), 4)
        for a, b, c in ((1, 2, 3), (3, 1, 2), (2, 3, 1), (5, 5, 1), (-1, 7, 0)):
            with self.subTest(args=(a, b, c)):
                expr = MED3(Variable("x"), Variable("y"), Variable("z"))
                self.assertEqual(expr.evaluate(a, b, c), sorted((a, b, c))[1])

    def test_huge_integer_literals_saturate_to_infinity(self) -> None:
        big = "1" + "0" * 400
        cases = [
            (f"(/ {big} 1)", math.inf),
            (f"(/ -{big} 1)", -math.inf),
            (f"(/ 1 {big})", 0.0),
            (f"(arith-mean {big} 1)", math.inf),
            (f"(geom-mean {big})", math.inf),
            (f"(harm-mean {big} {big})", math.inf),
            (f"(avg5 {big} 1 1 1 1)", math.inf),
            (f"(+ {big} x)", math.inf),
            (f"(negate {big})", -math.inf),
        ]
        for text, want in cases:
            with self.subTest(text=text[:24]):
                self.assertEqual(parse_prefix(text).evaluate(0.5, 0, 0), want)

    def test_huge_integer_bindings_saturate_to_infinity(self) -> None:
        expr = ARITH_MEAN(Variable("x"), Const(1))
        self.assertEqual(expr.evaluate(10**400, 0, 0), math.inf)
        self.assertEqual(expr.evaluate(-(10**400), 0, 0), -math.inf)

    def test_non_integer_constants_render_but_do_not_reparse(self) -> None:
        # Only integer literals are accepted, so hand-built float constants
        # fall outside the prefix round trip.
        for value, text in ((2.5, "2.5"), (math.inf, "inf"), (-math.inf, "-inf")):
            with self.subTest(value=value):
                const = Const(value)
                self.assertEqual(const.prefix(), text)
                self.assertEqual(const.evaluate(0, 0, 0), value)
                with self.assertRaises(UnknownVariableError):
                    parse_prefix(ADD(Variable("x"), const).prefix())
        self.assertEqual(parse_prefix(Const(-7).prefix()), Const(-7))

    def test_nodes_are_immutable_and_structurally_equal(self) -> None:
        left = ADD(Variable("x"), Const(2))
        right = ADD(Variable("x"), Const(2))
        self.assertEqual(left, right)
        self.assertEqual(hash(left), hash(right))
        self.assertNotEqual(left, SUBTRACT(Variable("x"), Const(2)))
        with self.assertRaises(AttributeError):
            left.args = ()  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
