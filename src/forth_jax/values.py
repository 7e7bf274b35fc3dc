"""Integer cell model: signed 32-bit cells with lax arithmetic kernels."""

from __future__ import annotations

import os
import re
from typing import Callable, Final

import jax
from jax import lax
import jax.numpy as jnp

from .ast import Operator

_USE_JITTED_OPS: Final[bool] = os.environ.get("FORTH_JAX_DISABLE_JITTED_OPS", "0") != "1"

CELL_DTYPE: Final = jnp.int32
CELL_MIN: Final[int] = int(jnp.iinfo(CELL_DTYPE).min)
CELL_MAX: Final[int] = int(jnp.iinfo(CELL_DTYPE).max)
UNSIGNED_MAX: Final[int] = int(jnp.iinfo(jnp.uint32).max)

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


def parse_cell(text: str) -> int | None:
    """Parse a signed decimal literal, or ``None`` if it is not one.

    Only ASCII digits with an optional sign are accepted, and the value
    must fit in a cell. ``int()`` alone would also take underscores,
    surrounding whitespace and non-ASCII digits.
    """
    if not _SIGNED_RE.fullmatch(text):
        return None
    value = int(text)
    if value < CELL_MIN or value > CELL_MAX:
        return None
    return value


def parse_unsigned(text: str) -> int | None:
    if not _UNSIGNED_RE.fullmatch(text):
        return None
    value = int(text)
    if value > UNSIGNED_MAX:
        return None
    return value


def as_cell(value: int) -> jnp.ndarray:
    return jnp.asarray(value, dtype=CELL_DTYPE)


_BASE_BINARY_OPS: Final[dict[Operator, Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]]] = {
    Operator.ADD: lax.add,
    Operator.SUBTRACT: lax.sub,
    Operator.MULTIPLY: lax.mul,
    # rounds toward zero for integer operands
    Operator.DIVIDE: lax.div,
}

_JITTED_BINARY_OPS: dict[Operator, Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]] = {}


def _jitted_binary_kernel(op: Operator) -> Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]:
    fn = _JITTED_BINARY_OPS.get(op)
    if fn is None:
        fn = jax.jit(_BASE_BINARY_OPS[op])
        _JITTED_BINARY_OPS[op] = fn
    return fn


def _binary_kernel(op: Operator) -> Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]:
    if _USE_JITTED_OPS:
        return _jitted_binary_kernel(op)
    return _BASE_BINARY_OPS[op]


def apply_operator(op: Operator, left: int, right: int) -> int:
    """Apply ``op`` to two cells with int32 wraparound semantics.

    The caller rejects a zero divisor; this function does not check it.
    """
    result = _binary_kernel(op)(as_cell(left), as_cell(right))
    return int(result)
