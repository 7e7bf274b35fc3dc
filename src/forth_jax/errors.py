"""Structured error types for the evaluation driver."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    DIVISION_BY_ZERO = "division_by_zero"
    STACK_UNDERFLOW = "stack_underflow"
    UNKNOWN_WORD = "unknown_word"
    INVALID_WORD = "invalid_word"


class ForthError(Exception):
    """Base class for errors that abort an evaluation.

    Nothing is rolled back when one of these is raised: stack and
    dictionary changes made before the failure stay in place.
    """

    kind: ClassVar[ErrorKind]


class DivisionByZero(ForthError):
    """Right operand of ``/`` was zero."""

    kind = ErrorKind.DIVISION_BY_ZERO


class StackUnderflow(ForthError):
    """An operator or command needed more cells than the stack holds."""

    kind = ErrorKind.STACK_UNDERFLOW


class UnknownWord(ForthError):
    """Token is not a number, operator, command or defined word."""

    kind = ErrorKind.UNKNOWN_WORD


class InvalidWord(ForthError):
    """Malformed ``: name body ;`` declaration."""

    kind = ErrorKind.INVALID_WORD
