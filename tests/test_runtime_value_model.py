from __future__ import annotations

import importlib.util
import unittest
from unittest import mock


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for runtime value-model tests")
class RuntimeValueModelTests(unittest.TestCase):
    def test_cell_bounds_are_int32(self) -> None:
        from forth_jax.values import CELL_MAX, CELL_MIN, UNSIGNED_MAX

        self.assertEqual(CELL_MIN, -(2**31))
        self.assertEqual(CELL_MAX, 2**31 - 1)
        self.assertEqual(UNSIGNED_MAX, 2**32 - 1)

    def test_parse_cell(self) -> None:
        from forth_jax.values import parse_cell

        self.assertEqual(parse_cell("0"), 0)
        self.assertEqual(parse_cell("-0"), 0)
        self.assertEqual(parse_cell("+7"), 7)
        self.assertEqual(parse_cell("007"), 7)
        self.assertEqual(parse_cell("2147483647"), 2147483647)
        self.assertEqual(parse_cell("-2147483648"), -2147483648)

    def test_parse_cell_rejects_non_literals(self) -> None:
        from forth_jax.values import parse_cell

        for text in ("", "-", "+", "2147483648", "-2147483649", "1_0", " 1", "1 ", "1.5", "0x10", "١", "--1"):
            with self.subTest(text=text):
                self.assertIsNone(parse_cell(text))

    def test_parse_unsigned(self) -> None:
        from forth_jax.values import parse_unsigned

        self.assertEqual(parse_unsigned("4294967295"), 4294967295)
        self.assertEqual(parse_unsigned("+1"), 1)
        self.assertIsNone(parse_unsigned("4294967296"))
        self.assertIsNone(parse_unsigned("-1"))
        self.assertIsNone(parse_unsigned(""))

    def test_apply_operator(self) -> None:
        from forth_jax.ast import Operator
        from forth_jax.values import apply_operator

        self.assertEqual(apply_operator(Operator.ADD, 2, 3), 5)
        self.assertEqual(apply_operator(Operator.SUBTRACT, 2, 3), -1)
        self.assertEqual(apply_operator(Operator.MULTIPLY, -4, 3), -12)
        self.assertEqual(apply_operator(Operator.DIVIDE, 9, 2), 4)

    def test_apply_operator_truncates_and_wraps(self) -> None:
        from forth_jax.ast import Operator
        from forth_jax.values import CELL_MAX, CELL_MIN, apply_operator

        self.assertEqual(apply_operator(Operator.DIVIDE, -7, 2), -3)
        self.assertEqual(apply_operator(Operator.DIVIDE, 7, -2), -3)
        self.assertEqual(apply_operator(Operator.ADD, CELL_MAX, 1), CELL_MIN)
        self.assertEqual(apply_operator(Operator.SUBTRACT, CELL_MIN, 1), CELL_MAX)
        self.assertEqual(apply_operator(Operator.MULTIPLY, 65536, 65536), 0)

    def test_apply_operator_returns_python_int(self) -> None:
        from forth_jax.ast import Operator
        from forth_jax.values import apply_operator

        self.assertIs(type(apply_operator(Operator.ADD, 1, 1)), int)

    def test_eager_kernels_match_jitted_results(self) -> None:
        from forth_jax import values
        from forth_jax.ast import Operator
        from forth_jax.values import CELL_MAX, CELL_MIN, apply_operator

        cases = (
            (Operator.ADD, CELL_MAX, 1, CELL_MIN),
            (Operator.SUBTRACT, CELL_MIN, 1, CELL_MAX),
            (Operator.MULTIPLY, 65536, 65536, 0),
            (Operator.DIVIDE, -7, 2, -3),
            (Operator.DIVIDE, 7, -2, -3),
        )
        with mock.patch.object(values, "_USE_JITTED_OPS", False):
            self.assertIs(values._binary_kernel(Operator.ADD), values._BASE_BINARY_OPS[Operator.ADD])
            for op, left, right, expected in cases:
                with self.subTest(op=op, left=left, right=right):
                    self.assertEqual(apply_operator(op, left, right), expected)

    def test_jitted_kernels_are_cached_per_operator(self) -> None:
        from forth_jax.ast import Operator
        from forth_jax.values import _jitted_binary_kernel

        self.assertIs(_jitted_binary_kernel(Operator.ADD), _jitted_binary_kernel(Operator.ADD))
        self.assertIsNot(_jitted_binary_kernel(Operator.ADD), _jitted_binary_kernel(Operator.MULTIPLY))


if __name__ == "__main__":
    unittest.main()
