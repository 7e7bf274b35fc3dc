"""forth-jax public API."""

import logging

from .errors import (
    DivisionByZero,
    ErrorKind,
    ForthError,
    InvalidWord,
    StackUnderflow,
    UnknownWord,
)
from .evaluator import Dictionary, Forth, evaluate

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Forth",
    "Dictionary",
    "evaluate",
    "ErrorKind",
    "ForthError",
    "DivisionByZero",
    "StackUnderflow",
    "UnknownWord",
    "InvalidWord",
]
